from __future__ import annotations

from collections.abc import Sequence

from backoffice.core.schema import CostChangePayload


class ValidationError(Exception):
    """Raised when domain validation fails."""


def validate_task_ids(task_ids: object) -> list[str]:
    if isinstance(task_ids, (str, bytes)) or not isinstance(task_ids, Sequence):
        raise ValidationError("taskIds must be a non-empty array")
    if len(task_ids) == 0:
        raise ValidationError("taskIds must be a non-empty array")
    cleaned: list[str] = []
    for value in task_ids:
        if not isinstance(value, (str, int)) or isinstance(value, bool) or not str(value).strip():
            raise ValidationError(f"invalid task id: {value!r}")
        cleaned.append(str(value).strip())
    return cleaned


def validate_cost_change(change: CostChangePayload) -> list[str]:
    """Return the problems found in a cost change; an empty list means valid."""

    errors: list[str] = []
    if change.action in {"added", "updated"} and change.new_value is None:
        errors.append("new_value is required for added/updated actions")
    if change.action in {"updated", "deleted"} and change.old_value is None:
        errors.append("old_value is required for updated/deleted actions")
    if change.cost_type == "custom_cost" and not (change.item_name or "").strip():
        errors.append("item_name is required for custom_cost changes")
    return errors

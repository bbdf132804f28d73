"""Domain entities for work-item reconciliation."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import NamedTuple


@dataclass(slots=True)
class WorkItem:
    """A trackable unit of operational work tied to a business and a task type."""

    item_id: str
    business_name: str
    task_type: str
    status: str
    title: str
    created_at: datetime
    assignee: str | None = None
    due_date: date | None = None
    is_active: bool = True
    is_deleted: bool = False
    updated_at: datetime | None = None


class GroupKey(NamedTuple):
    """Composite identity of a work item used for duplicate detection."""

    business_name: str
    task_type: str
    status: str

    def label(self) -> str:
        return "|".join(self)


@dataclass(slots=True)
class DuplicateGroup:
    """Work items sharing one :class:`GroupKey`, newest member first."""

    key: GroupKey
    members: list[WorkItem] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.members)

    @property
    def retained(self) -> WorkItem:
        return self.members[0]

    @property
    def removable(self) -> list[WorkItem]:
        return self.members[1:]


@dataclass(frozen=True, slots=True)
class DeletionOutcome:
    item_id: str
    succeeded: bool
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class DeletionSummary:
    """Per-item results of a batch soft delete.

    Counts and the error list are derived from ``outcomes`` so they can never
    drift from the individual results.
    """

    outcomes: tuple[DeletionOutcome, ...] = ()

    @property
    def success_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.succeeded)

    @property
    def failed_count(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.succeeded)

    @property
    def errors(self) -> list[tuple[str, str]]:
        return [(outcome.item_id, outcome.reason or "") for outcome in self.outcomes if not outcome.succeeded]

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "success": self.success_count,
            "failed": self.failed_count,
        }
        errors = self.errors
        if errors:
            payload["errors"] = [{"id": item_id, "error": reason} for item_id, reason in errors]
        return payload

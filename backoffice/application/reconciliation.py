"""Application services for duplicate work-item reconciliation."""
from __future__ import annotations

from typing import Sequence

import structlog

from backoffice.core.duplicates import build_duplicates_report, select_duplicates
from backoffice.core.schema import WorkItemRecord
from backoffice.core.validation import validate_task_ids
from backoffice.domain import DeletionOutcome, DeletionSummary, DuplicateGroup, WorkItem
from backoffice.infrastructure import RecordStore

logger = structlog.get_logger(__name__)


class BatchSoftDeleter:
    """Soft-deletes work items one by one, recording every outcome.

    The batch is not transactional: a failing identifier is reported in the
    summary and never stops or rolls back its siblings.
    """

    def __init__(self, store: RecordStore) -> None:
        self._store = store
        self._logger = logger.bind(component="batch_soft_deleter")

    def soft_delete(self, ids: Sequence[str]) -> DeletionSummary:
        task_ids = validate_task_ids(ids)

        outcomes: list[DeletionOutcome] = []
        for item_id in task_ids:
            try:
                self._store.soft_delete_by_id(item_id)
            except Exception as exc:
                self._logger.warning("soft_delete_failed", item_id=item_id, error=str(exc))
                outcomes.append(DeletionOutcome(item_id=item_id, succeeded=False, reason=str(exc)))
            else:
                outcomes.append(DeletionOutcome(item_id=item_id, succeeded=True))

        summary = DeletionSummary(outcomes=tuple(outcomes))
        self._logger.info(
            "soft_delete_completed",
            requested=len(task_ids),
            success=summary.success_count,
            failed=summary.failed_count,
        )
        return summary


class ReconciliationService:
    """Coordinates duplicate detection and cleanup use cases."""

    def __init__(self, store: RecordStore) -> None:
        self._store = store
        self._deleter = BatchSoftDeleter(store)

    # ------------------------------------------------------------------
    # intake
    # ------------------------------------------------------------------
    def register_work_item(self, record: WorkItemRecord) -> WorkItem:
        return self._store.add_work_item(record.to_work_item())

    def list_active_work_items(self) -> list[WorkItem]:
        return self._store.select_active()

    # ------------------------------------------------------------------
    # duplicates
    # ------------------------------------------------------------------
    def find_duplicate_groups(self) -> list[DuplicateGroup]:
        groups = select_duplicates(self._store.select_active())
        logger.info("duplicates_detected", groups=len(groups))
        return groups

    def get_duplicates_report(self) -> dict[str, object]:
        return build_duplicates_report(self.find_duplicate_groups())

    def soft_delete(self, ids: Sequence[str]) -> DeletionSummary:
        return self._deleter.soft_delete(ids)

    def resolve_duplicates(self) -> DeletionSummary | None:
        """Soft-delete every member that is not retained; ``None`` when clean."""

        removable = [item.item_id for group in self.find_duplicate_groups() for item in group.removable]
        if not removable:
            return None
        return self._deleter.soft_delete(removable)

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from backoffice.application import BatchSoftDeleter, ReconciliationService
from backoffice.core.validation import ValidationError
from backoffice.domain import WorkItem
from backoffice.infrastructure import InMemoryRecordStore, RecordStoreError

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def _store_with(*ids: str) -> InMemoryRecordStore:
    store = InMemoryRecordStore()
    for offset, item_id in enumerate(ids):
        store.add_work_item(
            WorkItem(
                item_id=item_id,
                business_name="A",
                task_type="subsidy",
                status="pending",
                title=item_id,
                created_at=T0 + timedelta(minutes=offset),
            )
        )
    return store


class FlakyStore(InMemoryRecordStore):
    def __init__(self, failing: set[str]) -> None:
        super().__init__()
        self._failing = failing

    def soft_delete_by_id(self, item_id: str) -> WorkItem:
        if item_id in self._failing:
            raise RecordStoreError("connection reset")
        return super().soft_delete_by_id(item_id)


def test_soft_delete_marks_items_deleted():
    store = _store_with("t1", "t2", "t3")

    summary = BatchSoftDeleter(store).soft_delete(["t1", "t2"])

    assert summary.to_payload() == {"success": 2, "failed": 0}
    assert store.get_work_item("t1").is_deleted is True
    assert store.get_work_item("t1").updated_at is not None
    assert store.get_work_item("t3").is_deleted is False
    assert [item.item_id for item in store.select_active()] == ["t3"]


def test_soft_delete_is_idempotent():
    store = _store_with("t1", "t2")
    deleter = BatchSoftDeleter(store)

    first = deleter.soft_delete(["t1", "t2"])
    second = deleter.soft_delete(["t1", "t2"])

    assert first.success_count == second.success_count == 2
    assert second.failed_count == 0
    assert second.errors == []
    assert all(item.is_deleted for item in store.list_work_items(include_deleted=True))


def test_unknown_identifier_fails_alone():
    store = _store_with("t1", "t2", "t3")

    summary = BatchSoftDeleter(store).soft_delete(["t1", "missing", "t2", "t3"])

    assert summary.success_count == 3
    assert summary.failed_count == 1
    assert summary.errors[0][0] == "missing"
    payload = summary.to_payload()
    assert payload["errors"] == [{"id": "missing", "error": "work item not found: missing"}]


def test_store_failure_does_not_block_siblings():
    store = FlakyStore({"t2"})
    for item in _store_with("t1", "t2", "t3").list_work_items():
        store.add_work_item(item)

    summary = BatchSoftDeleter(store).soft_delete(["t1", "t2", "t3"])

    assert [(outcome.item_id, outcome.succeeded) for outcome in summary.outcomes] == [
        ("t1", True),
        ("t2", False),
        ("t3", True),
    ]
    assert summary.outcomes[1].reason == "connection reset"
    assert store.get_work_item("t3").is_deleted is True


@pytest.mark.parametrize("ids", [[], None, "t1", ["t1", ""], ["t1", None]])
def test_invalid_requests_are_rejected_before_any_work(ids):
    store = _store_with("t1")

    with pytest.raises(ValidationError):
        BatchSoftDeleter(store).soft_delete(ids)

    assert store.get_work_item("t1").is_deleted is False


def test_end_to_end_duplicate_cleanup():
    store = _store_with("T1", "T2", "T3")
    service = ReconciliationService(store)

    groups = service.find_duplicate_groups()

    assert len(groups) == 1
    assert groups[0].count == 3
    assert groups[0].retained.item_id == "T3"
    assert [item.item_id for item in groups[0].removable] == ["T2", "T1"]

    summary = service.soft_delete(["T1", "T2"])

    assert summary.to_payload() == {"success": 2, "failed": 0}
    assert service.find_duplicate_groups() == []


def test_resolve_duplicates_keeps_one_survivor_per_group():
    store = _store_with("T1", "T2", "T3")

    summary = ReconciliationService(store).resolve_duplicates()

    assert summary is not None and summary.success_count == 2
    assert [item.item_id for item in store.select_active()] == ["T3"]
    assert ReconciliationService(store).resolve_duplicates() is None

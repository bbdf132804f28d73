"""Infrastructure layer for work-item and business persistence."""
from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Protocol, Sequence

from backoffice.domain import BusinessFinancials, Memo, WorkItem

DEFAULT_SORT: tuple[str, ...] = ("business_name", "task_type", "status", "created_at")


class RecordStoreError(RuntimeError):
    """Raised when the store cannot apply a single record operation."""


class RecordNotFoundError(RecordStoreError):
    """Raised when a record identifier does not exist in the store."""


class RecordStore(Protocol):
    """Persistence contract for work items, businesses and change memos."""

    def select_active(
        self,
        predicate: Callable[[WorkItem], bool] | None = None,
        sort_keys: Sequence[str] = DEFAULT_SORT,
    ) -> list[WorkItem]: ...

    def soft_delete_by_id(self, item_id: str) -> WorkItem: ...

    def read_business_financials(self, business_id: str) -> BusinessFinancials: ...

    def add_work_item(self, item: WorkItem) -> WorkItem: ...

    def get_work_item(self, item_id: str) -> WorkItem | None: ...

    def list_work_items(self, *, include_deleted: bool = False) -> list[WorkItem]: ...

    def upsert_business(self, financials: BusinessFinancials) -> BusinessFinancials: ...

    def list_businesses(self) -> list[BusinessFinancials]: ...

    def apply_cost_change(
        self,
        business_id: str,
        cost_type: str,
        action: str,
        value: Any = None,
        *,
        item_name: str | None = None,
    ) -> Any: ...

    def add_memo(self, business_id: str, memo: Memo) -> Memo: ...

    def list_memos(self, business_id: str) -> list[Memo]: ...

    def next_memo_id(self) -> str: ...

    def reset(self) -> None: ...


def _sort_value(item: WorkItem, key: str) -> tuple[int, Any]:
    value = getattr(item, key)
    return (0, value) if value is not None else (1, "")


class InMemoryRecordStore:
    """Simple in-memory store for fast iteration and tests.

    Returned records are copies, so callers never mutate stored state by
    accident; every change goes through a store method.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()
        self._items: dict[str, WorkItem] = {}
        self._businesses: dict[str, BusinessFinancials] = {}
        self._memos: dict[str, list[Memo]] = {}
        self._memo_counter = 0

    # ------------------------------------------------------------------
    # work items
    # ------------------------------------------------------------------
    def add_work_item(self, item: WorkItem) -> WorkItem:
        with self._lock:
            self._items[item.item_id] = replace(item)
        return replace(item)

    def get_work_item(self, item_id: str) -> WorkItem | None:
        item = self._items.get(item_id)
        return replace(item) if item else None

    def list_work_items(self, *, include_deleted: bool = False) -> list[WorkItem]:
        return [replace(item) for item in self._items.values() if include_deleted or not item.is_deleted]

    def select_active(
        self,
        predicate: Callable[[WorkItem], bool] | None = None,
        sort_keys: Sequence[str] = DEFAULT_SORT,
    ) -> list[WorkItem]:
        selected = [
            replace(item)
            for item in self._items.values()
            if item.is_active and not item.is_deleted and (predicate is None or predicate(item))
        ]
        selected.sort(key=lambda item: tuple(_sort_value(item, key) for key in sort_keys))
        return selected

    def soft_delete_by_id(self, item_id: str) -> WorkItem:
        with self._lock:
            item = self._items.get(item_id)
            if item is None:
                raise RecordNotFoundError(f"work item not found: {item_id}")
            if not item.is_deleted:
                item.is_deleted = True
            item.updated_at = self._clock()
            return replace(item)

    # ------------------------------------------------------------------
    # businesses
    # ------------------------------------------------------------------
    def upsert_business(self, financials: BusinessFinancials) -> BusinessFinancials:
        with self._lock:
            self._businesses[financials.business_id] = replace(
                financials,
                payments=dict(financials.payments),
                costs=dict(financials.costs),
            )
        return financials

    def _get_business(self, business_id: str) -> BusinessFinancials:
        business = self._businesses.get(business_id)
        if business is None:
            raise RecordNotFoundError(f"business not found: {business_id}")
        return business

    def read_business_financials(self, business_id: str) -> BusinessFinancials:
        business = self._get_business(business_id)
        return replace(business, payments=dict(business.payments), costs=dict(business.costs))

    def list_businesses(self) -> list[BusinessFinancials]:
        return [self.read_business_financials(business_id) for business_id in self._businesses]

    def apply_cost_change(
        self,
        business_id: str,
        cost_type: str,
        action: str,
        value: Any = None,
        *,
        item_name: str | None = None,
    ) -> Any:
        """Apply a cost mutation and return the value it replaced."""

        with self._lock:
            business = self._get_business(business_id)
            if cost_type == "custom_cost":
                custom = dict(business.costs.get("custom_cost") or {})
                previous = custom.get(item_name)
                if action == "deleted":
                    custom.pop(item_name, None)
                else:
                    custom[item_name] = value
                business.costs["custom_cost"] = custom
                return previous

            previous = business.costs.get(cost_type)
            if action == "deleted":
                business.costs.pop(cost_type, None)
            else:
                business.costs[cost_type] = value
            return previous

    # ------------------------------------------------------------------
    # change memos
    # ------------------------------------------------------------------
    def next_memo_id(self) -> str:
        with self._lock:
            self._memo_counter += 1
            return f"memo-{self._memo_counter:05d}"

    def add_memo(self, business_id: str, memo: Memo) -> Memo:
        with self._lock:
            self._memos.setdefault(business_id, []).append(memo)
        return memo

    def list_memos(self, business_id: str) -> list[Memo]:
        return list(self._memos.get(business_id, []))

    def reset(self) -> None:
        with self._lock:
            self._items.clear()
            self._businesses.clear()
            self._memos.clear()
            self._memo_counter = 0

"""Cost mutations and their best-effort change history.

A cost mutation is the primary write. Its change memo is recorded afterwards
with a bounded number of retries; when every attempt fails the failure is
logged and the mutation still stands.
"""
from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Protocol

import structlog

from backoffice.core.change_formatter import TYPE_LABELS, build_change_title, generate_change_description
from backoffice.core.schema import CostChangePayload, CostMutationRequest
from backoffice.core.validation import ValidationError, validate_cost_change
from backoffice.domain import ChangeRecord, Memo
from backoffice.infrastructure import RecordStore

logger = structlog.get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]
Clock = Callable[[], datetime]


class MemoSink(Protocol):
    def next_memo_id(self) -> str: ...

    def add_memo(self, business_id: str, memo: Memo) -> Memo: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChangeRecorder:
    """Writes a change record to the memo sink with exponential backoff."""

    def __init__(
        self,
        sink: MemoSink,
        *,
        max_retries: int = 2,
        base_delay: float = 1.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must not be negative")
        self._sink = sink
        self._max_retries = max_retries
        self._base_delay = base_delay
        self._sleep = sleep
        self._logger = logger.bind(component="change_recorder")

    @property
    def max_attempts(self) -> int:
        return self._max_retries + 1

    def backoff_delay(self, attempt: int) -> float:
        return self._base_delay * (2 ** (attempt - 1))

    async def record(self, change: ChangeRecord) -> bool:
        try:
            memo_id = self._sink.next_memo_id()
        except Exception as exc:
            self._logger.error(
                "change_record_failed",
                business_id=change.business_id,
                cost_type=change.cost_type,
                action=change.action,
                error=str(exc),
            )
            return False

        memo = Memo(
            memo_id=memo_id,
            business_id=change.business_id,
            title=change.title,
            content=change.description,
            created_by=change.author_name,
            updated_by=change.author_name,
            created_at=change.created_at,
        )

        for attempt in range(1, self.max_attempts + 1):
            try:
                self._sink.add_memo(change.business_id, memo)
            except Exception as exc:
                self._logger.warning(
                    "change_record_attempt_failed",
                    business_id=change.business_id,
                    attempt=attempt,
                    max_attempts=self.max_attempts,
                    error=str(exc),
                )
                if attempt == self.max_attempts:
                    self._logger.error(
                        "change_record_failed",
                        business_id=change.business_id,
                        cost_type=change.cost_type,
                        action=change.action,
                        error=str(exc),
                    )
                    return False
                await self._sleep(self.backoff_delay(attempt))
            else:
                self._logger.info("change_recorded", business_id=change.business_id, title=change.title)
                return True
        return False


class CostChangeLogger:
    """Turns a cost change into a titled, described, attributed change record."""

    def __init__(self, recorder: ChangeRecorder, clock: Clock | None = None) -> None:
        self._recorder = recorder
        self._clock = clock or _utcnow

    def build_record(self, business_id: str, change: CostChangePayload, author: str | None) -> ChangeRecord | None:
        problems = validate_cost_change(change)
        if problems:
            logger.warning("change_record_skipped", business_id=business_id, errors=problems)
            return None

        created_at = self._clock()
        author_name = f"{author or 'Unknown'} (자동)"
        return ChangeRecord(
            business_id=business_id,
            cost_type=change.cost_type,
            action=change.action,
            title=build_change_title(change),
            description=generate_change_description(change, created_at),
            author_name=author_name,
            created_at=created_at,
            old_value=change.old_value,
            new_value=change.new_value,
            item_name=change.item_name,
        )

    async def log_cost_change(self, business_id: str, change: CostChangePayload, author: str | None = None) -> bool:
        record = self.build_record(business_id, change, author)
        if record is None:
            return False
        return await self._recorder.record(record)


class CostService:
    def __init__(self, store: RecordStore, change_logger: CostChangeLogger) -> None:
        self._store = store
        self._change_logger = change_logger

    @property
    def change_logger(self) -> CostChangeLogger:
        return self._change_logger

    def apply_cost_change(self, business_id: str, cost_type: str, request: CostMutationRequest) -> CostChangePayload:
        """Apply the mutation to the store and describe what changed."""

        if cost_type not in TYPE_LABELS:
            raise ValidationError(f"unknown cost type: {cost_type}")
        if cost_type == "custom_cost" and not (request.item_name or "").strip():
            raise ValidationError("item_name is required for custom_cost")
        if request.action != "deleted" and request.value is None:
            raise ValidationError("value is required for added/updated actions")

        new_value: Any = None if request.action == "deleted" else request.value
        old_value = self._store.apply_cost_change(
            business_id,
            cost_type,
            request.action,
            new_value,
            item_name=request.item_name,
        )
        return CostChangePayload(
            cost_type=cost_type,
            action=request.action,
            old_value=old_value,
            new_value=new_value,
            item_name=request.item_name,
        )

    def list_memos(self, business_id: str) -> list[Memo]:
        self._store.read_business_financials(business_id)
        return self._store.list_memos(business_id)

"""Application services."""
from __future__ import annotations

from backoffice.config import Settings, get_settings
from backoffice.infrastructure import InMemoryRecordStore

from .change_log import ChangeRecorder, CostChangeLogger, CostService
from .receivables import ReceivablesService
from .reconciliation import BatchSoftDeleter, ReconciliationService

__all__ = [
    "BatchSoftDeleter",
    "ChangeRecorder",
    "CostChangeLogger",
    "CostService",
    "ReceivablesService",
    "ReconciliationService",
    "build_cost_service",
    "get_cost_service",
    "get_receivables_service",
    "get_reconciliation_service",
    "get_record_store",
    "reset_state",
]

_settings = get_settings()
_store = InMemoryRecordStore()
_reconciliation = ReconciliationService(_store)
_receivables = ReceivablesService(_store)


def build_cost_service(store: InMemoryRecordStore, settings: Settings) -> CostService:
    recorder = ChangeRecorder(
        store,
        max_retries=settings.change_log_max_retries,
        base_delay=settings.change_log_backoff_seconds,
    )
    return CostService(store, CostChangeLogger(recorder))


_costs = build_cost_service(_store, _settings)


def get_record_store() -> InMemoryRecordStore:
    """Return the process-wide record store."""

    return _store


def get_reconciliation_service() -> ReconciliationService:
    return _reconciliation


def get_receivables_service() -> ReceivablesService:
    return _receivables


def get_cost_service() -> CostService:
    return _costs


def reset_state() -> None:
    """Reset the in-memory store (used in tests)."""

    _store.reset()

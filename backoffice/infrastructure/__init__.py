"""Infrastructure layer exports."""

from .records import DEFAULT_SORT, InMemoryRecordStore, RecordNotFoundError, RecordStore, RecordStoreError

__all__ = [
    "DEFAULT_SORT",
    "InMemoryRecordStore",
    "RecordNotFoundError",
    "RecordStore",
    "RecordStoreError",
]

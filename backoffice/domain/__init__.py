"""Domain layer definitions."""

from .finance import BusinessFinancials, ChangeRecord, Memo
from .tasks import DeletionOutcome, DeletionSummary, DuplicateGroup, GroupKey, WorkItem

__all__ = [
    "BusinessFinancials",
    "ChangeRecord",
    "DeletionOutcome",
    "DeletionSummary",
    "DuplicateGroup",
    "GroupKey",
    "Memo",
    "WorkItem",
]

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pandas as pd

from backoffice.core.schema import WorkItemRecord
from backoffice.domain import WorkItem

WORK_ITEM_COLUMNS = [
    "id",
    "business_name",
    "task_type",
    "status",
    "title",
    "created_at",
    "assignee",
    "due_date",
    "is_active",
    "is_deleted",
    "updated_at",
]


def write_records_to_csv(path: Path, rows: Iterable[dict], columns: list[str] | None = None) -> Path:
    df = pd.DataFrame(list(rows), columns=columns)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    return path


def read_work_items_csv(path: Path) -> list[WorkItem]:
    """Load a work-item export; blank cells are treated as missing values."""

    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    items: list[WorkItem] = []
    for row in df.to_dict(orient="records"):
        values = {key: value for key, value in row.items() if key in WORK_ITEM_COLUMNS and str(value).strip() != ""}
        values.pop("updated_at", None)
        items.append(WorkItemRecord(**values).to_work_item())
    return items


def work_item_to_row(item: WorkItem) -> dict[str, object]:
    return {
        "id": item.item_id,
        "business_name": item.business_name,
        "task_type": item.task_type,
        "status": item.status,
        "title": item.title,
        "created_at": item.created_at.isoformat(),
        "assignee": item.assignee or "",
        "due_date": item.due_date.isoformat() if item.due_date else "",
        "is_active": item.is_active,
        "is_deleted": item.is_deleted,
        "updated_at": item.updated_at.isoformat() if item.updated_at else "",
    }

"""Duplicate work-item detection and the newest-wins retention policy."""
from __future__ import annotations

from typing import Iterable

from backoffice.domain import DuplicateGroup, GroupKey, WorkItem


def group_key(item: WorkItem) -> GroupKey:
    return GroupKey(
        business_name=item.business_name or "",
        task_type=item.task_type or "",
        status=item.status or "",
    )


def group_work_items(items: Iterable[WorkItem]) -> dict[GroupKey, list[WorkItem]]:
    """Bucket active work items by (business name, task type, status).

    Groups appear in first-discovery order and members keep their input order,
    so the output is reproducible as long as the input is sorted.
    """

    groups: dict[GroupKey, list[WorkItem]] = {}
    for item in items:
        if item.is_deleted or not item.is_active:
            raise ValueError(f"work item {item.item_id} is not active; filter before grouping")
        groups.setdefault(group_key(item), []).append(item)
    return groups


def rank_members(members: Iterable[WorkItem]) -> list[WorkItem]:
    """Order members newest first; equal timestamps fall back to the smallest id."""

    by_id = sorted(members, key=lambda item: item.item_id)
    return sorted(by_id, key=lambda item: item.created_at, reverse=True)


def select_retained(members: Iterable[WorkItem]) -> WorkItem:
    ranked = rank_members(members)
    if not ranked:
        raise ValueError("cannot select a retained member from an empty group")
    return ranked[0]


def select_duplicates(items: Iterable[WorkItem]) -> list[DuplicateGroup]:
    duplicates: list[DuplicateGroup] = []
    for key, members in group_work_items(items).items():
        if len(members) < 2:
            continue
        duplicates.append(DuplicateGroup(key=key, members=rank_members(members)))
    return duplicates


def _serialise_member(item: WorkItem, keep: bool) -> dict[str, object]:
    return {
        "id": item.item_id,
        "title": item.title,
        "created_at": item.created_at.isoformat(),
        "assignee": item.assignee,
        "due_date": item.due_date.isoformat() if item.due_date else None,
        "keep": keep,
    }


def build_duplicates_report(groups: Iterable[DuplicateGroup]) -> dict[str, object]:
    rendered: list[dict[str, object]] = []
    total_duplicates = 0
    to_delete = 0
    for group in groups:
        total_duplicates += group.count
        to_delete += len(group.removable)
        rendered.append(
            {
                "key": group.key.label(),
                "business_name": group.key.business_name,
                "task_type": group.key.task_type,
                "status": group.key.status,
                "count": group.count,
                "members": [_serialise_member(item, index == 0) for index, item in enumerate(group.members)],
            }
        )

    return {
        "groups": rendered,
        "summary": {
            "totalGroups": len(rendered),
            "totalDuplicates": total_duplicates,
            "toDelete": to_delete,
        },
    }

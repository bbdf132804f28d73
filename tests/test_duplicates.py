from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from backoffice.core.duplicates import (
    build_duplicates_report,
    group_work_items,
    rank_members,
    select_duplicates,
    select_retained,
)
from backoffice.domain import GroupKey, WorkItem

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def _item(item_id: str, minutes: int = 0, business: str | None = "A", task_type: str = "subsidy", status: str = "pending") -> WorkItem:
    return WorkItem(
        item_id=item_id,
        business_name=business,  # type: ignore[arg-type]
        task_type=task_type,
        status=status,
        title=f"task {item_id}",
        created_at=T0 + timedelta(minutes=minutes),
    )


def test_grouping_keeps_input_order_and_separates_keys():
    items = [
        _item("1", 0),
        _item("2", 1, status="done"),
        _item("3", 2),
        _item("4", 3, business="B"),
    ]

    groups = group_work_items(items)

    assert list(groups) == [
        GroupKey("A", "subsidy", "pending"),
        GroupKey("A", "subsidy", "done"),
        GroupKey("B", "subsidy", "pending"),
    ]
    assert [item.item_id for item in groups[GroupKey("A", "subsidy", "pending")]] == ["1", "3"]


def test_tuple_key_does_not_collide_on_delimiter():
    left = _item("1", business="A|x", task_type="y")
    right = _item("2", business="A", task_type="x|y")

    groups = group_work_items([left, right])

    assert len(groups) == 2
    assert select_duplicates([left, right]) == []


def test_missing_business_name_is_grouped_as_empty_string():
    items = [_item("1", 0, business=None), _item("2", 1, business=None), _item("3", 2, business="")]

    duplicates = select_duplicates(items)

    assert len(duplicates) == 1
    assert duplicates[0].key.business_name == ""
    assert duplicates[0].count == 3


def test_inactive_items_are_rejected():
    deleted = _item("1")
    deleted.is_deleted = True

    with pytest.raises(ValueError):
        group_work_items([deleted])


def test_select_duplicates_covers_exactly_the_duplicated_keys():
    items = [
        _item("a1", 0),
        _item("a2", 5),
        _item("b1", 0, business="B"),
        _item("c1", 0, business="C"),
        _item("c2", 1, business="C"),
        _item("c3", 2, business="C"),
    ]

    duplicates = select_duplicates(items)

    members = {item.item_id for group in duplicates for item in group.members}
    assert members == {"a1", "a2", "c1", "c2", "c3"}
    for group in duplicates:
        assert {(item.business_name, item.task_type, item.status) for item in group.members} == {tuple(group.key)}


def test_newest_member_is_retained():
    members = [_item("old", 0), _item("newest", 10), _item("middle", 5)]

    assert select_retained(members).item_id == "newest"
    assert [item.item_id for item in rank_members(members)] == ["newest", "middle", "old"]


def test_equal_timestamps_keep_smallest_identifier():
    members = [_item("task-b", 0), _item("task-c", 0), _item("task-a", 0)]

    assert select_retained(members).item_id == "task-a"
    assert [item.item_id for item in rank_members(members)] == ["task-a", "task-b", "task-c"]


def test_select_retained_requires_members():
    with pytest.raises(ValueError):
        select_retained([])


def test_report_marks_exactly_one_member_to_keep():
    items = [_item("t1", 1), _item("t2", 2), _item("t3", 3), _item("x1", 0, business="B"), _item("x2", 0, business="B")]

    report = build_duplicates_report(select_duplicates(items))

    assert report["summary"] == {"totalGroups": 2, "totalDuplicates": 5, "toDelete": 3}
    first = report["groups"][0]
    assert first["key"] == "A|subsidy|pending"
    assert first["count"] == 3
    assert [(member["id"], member["keep"]) for member in first["members"]] == [
        ("t3", True),
        ("t2", False),
        ("t1", False),
    ]
    for group in report["groups"]:
        assert sum(1 for member in group["members"] if member["keep"]) == 1
    second = report["groups"][1]
    assert [member["id"] for member in second["members"] if member["keep"]] == ["x1"]


def test_repeated_identifier_in_export_keeps_one_member():
    items = [_item("x", 0), _item("x", 0), _item("y", 0)]

    report = build_duplicates_report(select_duplicates(items))

    members = report["groups"][0]["members"]
    assert [member["keep"] for member in members] == [True, False, False]
    assert report["summary"]["toDelete"] == 2


def test_report_without_duplicates_is_empty():
    report = build_duplicates_report(select_duplicates([_item("1"), _item("2", business="B")]))

    assert report == {"groups": [], "summary": {"totalGroups": 0, "totalDuplicates": 0, "toDelete": 0}}

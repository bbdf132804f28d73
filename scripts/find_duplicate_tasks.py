#!/usr/bin/env python
from __future__ import annotations

import argparse
import json
from pathlib import Path

from backoffice.core.csvio import read_work_items_csv
from backoffice.core.duplicates import build_duplicates_report, select_duplicates


def main(argv: list[str] | None = None) -> dict:
    parser = argparse.ArgumentParser(description="업무 CSV 내보내기에서 중복 업무 그룹을 조회")
    parser.add_argument("--input", required=True, help="업무 CSV 경로")
    parser.add_argument("--json", action="store_true", help="JSON 형식으로 출력")
    args = parser.parse_args(argv)

    items = [item for item in read_work_items_csv(Path(args.input)) if item.is_active and not item.is_deleted]
    items.sort(key=lambda item: (item.business_name, item.task_type, item.status, item.created_at))
    report = build_duplicates_report(select_duplicates(items))

    if args.json:
        print(json.dumps(report, ensure_ascii=False, indent=2))
        return report

    summary = report["summary"]
    print(f"전체 업무: {len(items)}개, 중복 그룹: {summary['totalGroups']}개, 삭제 대상: {summary['toDelete']}개")
    for index, group in enumerate(report["groups"], start=1):
        print(f"[{index}] {group['business_name']} / {group['task_type']} / {group['status']} ({group['count']}개)")
        for member in group["members"]:
            marker = "보존" if member["keep"] else "삭제"
            print(f"    - {marker} {member['id']} {member['created_at']} {member['title']}")
    return report


if __name__ == "__main__":
    main()

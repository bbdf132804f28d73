#!/usr/bin/env python
from __future__ import annotations

import argparse
import json
from pathlib import Path

from backoffice.application import ReconciliationService
from backoffice.core.csvio import WORK_ITEM_COLUMNS, read_work_items_csv, work_item_to_row, write_records_to_csv
from backoffice.infrastructure import InMemoryRecordStore


def main(argv: list[str] | None = None) -> dict:
    parser = argparse.ArgumentParser(description="중복 업무 중 최신 1건만 남기고 나머지를 soft delete")
    parser.add_argument("--input", required=True, help="업무 CSV 경로")
    parser.add_argument("--output", required=True, help="갱신된 업무 CSV 출력 경로")
    parser.add_argument("--dry-run", action="store_true", help="삭제 대상만 출력")
    args = parser.parse_args(argv)

    store = InMemoryRecordStore()
    for item in read_work_items_csv(Path(args.input)):
        store.add_work_item(item)
    service = ReconciliationService(store)

    if args.dry_run:
        removable = [item.item_id for group in service.find_duplicate_groups() for item in group.removable]
        print(f"삭제 대상: {len(removable)}개")
        for item_id in removable:
            print(f"    - {item_id}")
        return {"success": 0, "failed": 0, "pending": removable}

    summary = service.resolve_duplicates()
    payload = summary.to_payload() if summary else {"success": 0, "failed": 0}

    output = Path(args.output)
    rows = [work_item_to_row(item) for item in store.list_work_items(include_deleted=True)]
    write_records_to_csv(output, rows, columns=WORK_ITEM_COLUMNS)

    print(json.dumps(payload, ensure_ascii=False))
    print(f"갱신된 업무 CSV: {output}")
    return payload


if __name__ == "__main__":
    main()

"""Human-readable wording for cost change memos."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from backoffice.core.receivables import to_amount
from backoffice.core.schema import CostChangePayload

BASE_SURVEY_FEE = Decimal("100000")

TYPE_LABELS: dict[str, str] = {
    "operating_cost": "영업비용조정",
    "survey_fee": "실사비용조정",
    "as_cost": "AS비용",
    "custom_cost": "커스텀추가비용",
}

ACTION_LABELS: dict[str, str] = {
    "added": "추가",
    "updated": "수정",
    "deleted": "삭제",
}


def _won(value: Any) -> str:
    return f"{to_amount(value):,.0f}원"


def _adjustment_sign(value: dict[str, Any], *, short: bool = False) -> str:
    if value.get("type") == "add":
        return "추가" if short else "추가(+)"
    return "차감" if short else "차감(-)"


def build_change_title(change: CostChangePayload) -> str:
    label = TYPE_LABELS[change.cost_type]
    if change.cost_type == "custom_cost" and change.item_name:
        label = f"{label}({change.item_name})"
    return f"[자동] {label} {ACTION_LABELS[change.action]}"


def _describe_operating_cost(change: CostChangePayload) -> str:
    old, new = change.old_value, change.new_value
    if change.action == "added":
        new = new if isinstance(new, dict) else {"amount": new}
        return f"{_adjustment_sign(new)} {_won(new.get('amount'))}\n사유: {new.get('reason') or '없음'}"
    if change.action == "updated":
        old = old if isinstance(old, dict) else {"amount": old}
        new = new if isinstance(new, dict) else {"amount": new}
        return (
            f"금액: {_won(old.get('amount'))} → {_won(new.get('amount'))}\n"
            f"타입: {_adjustment_sign(old)} → {_adjustment_sign(new)}\n"
            f"사유: {new.get('reason') or '없음'}"
        )
    if isinstance(old, dict):
        return (
            f"{_won(old.get('amount'))} ({_adjustment_sign(old, short=True)}) 삭제됨\n"
            f"사유: {old.get('reason') or '없음'}"
        )
    return f"조정 금액 {_won(old)} 삭제됨\n기본 영업비용으로 복귀"


def _describe_survey_fee(change: CostChangePayload) -> str:
    if change.action == "deleted":
        return f"조정액 {_won(change.old_value)} 초기화\n기본 실사비 {_won(BASE_SURVEY_FEE)}으로 복귀"
    old_amount = to_amount(change.old_value)
    new_amount = to_amount(change.new_value)
    return (
        f"조정액: {_won(old_amount)} → {_won(new_amount)}\n"
        f"최종 실사비: {_won(BASE_SURVEY_FEE + old_amount)} → {_won(BASE_SURVEY_FEE + new_amount)}"
    )


def _describe_as_cost(change: CostChangePayload) -> str:
    if change.action == "deleted":
        return f"{_won(change.old_value)} 삭제됨"
    return f"{_won(change.old_value)} → {_won(change.new_value)}"


def _describe_custom_cost(change: CostChangePayload) -> str:
    if change.action == "added":
        return f"항목명: {change.item_name}\n금액: {_won(change.new_value)}"
    if change.action == "updated":
        return f"항목명: {change.item_name}\n금액 변경: {_won(change.old_value)} → {_won(change.new_value)}"
    return f"항목명: {change.item_name}\n금액: {_won(change.old_value)} 삭제됨"


_DESCRIBERS = {
    "operating_cost": _describe_operating_cost,
    "survey_fee": _describe_survey_fee,
    "as_cost": _describe_as_cost,
    "custom_cost": _describe_custom_cost,
}


def generate_change_description(change: CostChangePayload, timestamp: datetime) -> str:
    body = _DESCRIBERS[change.cost_type](change)
    return f"{body}\n\n기록 시각: {timestamp.strftime('%Y-%m-%d %H:%M:%S')}"

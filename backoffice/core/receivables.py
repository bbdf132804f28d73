"""Payment aggregation and receivables calculation.

Receivables = tax-inclusive revenue - total payments received, gated by the
installation date: a business without an installation date has not
recognised any revenue yet and therefore owes nothing.

Which payment fields count depends on the progress status. Subsidy-funded
businesses are paid in installments (1st, 2nd, additional); every other
category is paid as advance plus balance. The two schedules are mutually
exclusive.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from pathlib import Path
from typing import Any, Literal, Mapping

import yaml

from backoffice.config import get_settings
from backoffice.domain import BusinessFinancials

Category = Literal["subsidy", "self_pay"]

DEFAULT_RULES: dict[str, Any] = {
    "vat_rate": 0.1,
    "subsidy_marker": "보조금",
    "schedules": {
        "subsidy": ["payment_1st_amount", "payment_2nd_amount", "payment_additional_amount"],
        "self_pay": ["payment_advance_amount", "payment_balance_amount"],
    },
}


@dataclass(frozen=True, slots=True)
class ReceivableRules:
    vat_rate: Decimal
    subsidy_marker: str
    subsidy_fields: tuple[str, ...]
    self_pay_fields: tuple[str, ...]


def _load_rules(path: Path | None = None) -> ReceivableRules:
    path = path or get_settings().receivables_config
    data: dict[str, Any] = {}
    if path.exists():
        with path.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp) or {}

    schedules = {**DEFAULT_RULES["schedules"], **(data.get("schedules") or {})}
    return ReceivableRules(
        vat_rate=to_amount(data.get("vat_rate", DEFAULT_RULES["vat_rate"])),
        subsidy_marker=str(data.get("subsidy_marker") or DEFAULT_RULES["subsidy_marker"]),
        subsidy_fields=tuple(schedules["subsidy"]),
        self_pay_fields=tuple(schedules["self_pay"]),
    )


def to_amount(value: Any) -> Decimal:
    """Coerce a legacy numeric field to ``Decimal``; anything unusable is zero."""

    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, str):
        value = value.replace(",", "").strip()
        if not value:
            return Decimal("0")
    try:
        result = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return Decimal("0")
    if not result.is_finite():
        return Decimal("0")
    return result


def quantize_won(value: Decimal) -> Decimal:
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


RULES = _load_rules()


def classify_progress_status(progress_status: str | None, rules: ReceivableRules | None = None) -> Category:
    rules = rules or RULES
    status = (progress_status or "").strip()
    return "subsidy" if rules.subsidy_marker in status else "self_pay"


def sum_payments(
    progress_status: str | None,
    fields: Mapping[str, Any] | None,
    rules: ReceivableRules | None = None,
) -> Decimal:
    rules = rules or RULES
    fields = fields or {}
    if classify_progress_status(progress_status, rules) == "subsidy":
        names = rules.subsidy_fields
    else:
        names = rules.self_pay_fields
    return sum((to_amount(fields.get(name)) for name in names), Decimal("0"))


def revenue_with_tax(total_revenue: Any, rules: ReceivableRules | None = None) -> Decimal:
    rules = rules or RULES
    return quantize_won(to_amount(total_revenue) * (Decimal("1") + rules.vat_rate))


def calculate_receivables(
    installation_date: date | str | None,
    total_revenue_with_tax: Any,
    total_payments: Any,
) -> Decimal:
    if not installation_date:
        return Decimal("0")
    outstanding = to_amount(total_revenue_with_tax) - to_amount(total_payments)
    return max(Decimal("0"), outstanding)


def receivable_for(financials: BusinessFinancials, rules: ReceivableRules | None = None) -> Decimal:
    payments = sum_payments(financials.progress_status, financials.payments, rules)
    return calculate_receivables(financials.installation_date, financials.total_revenue_with_tax, payments)

from __future__ import annotations

from datetime import date
from decimal import Decimal
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from backoffice.core import receivables
from backoffice.core.receivables import (
    calculate_receivables,
    classify_progress_status,
    receivable_for,
    revenue_with_tax,
    sum_payments,
    to_amount,
)
from backoffice.domain import BusinessFinancials

MIXED_PAYMENTS = {
    "payment_1st_amount": 300_000,
    "payment_2nd_amount": "200,000",
    "payment_additional_amount": 50_000,
    "payment_advance_amount": 1_000_000,
    "payment_balance_amount": 2_000_000,
}


def test_no_installation_date_means_no_receivable():
    assert calculate_receivables(None, 1_000_000, 0) == 0
    assert calculate_receivables("", Decimal("1000000"), Decimal("5")) == 0


def test_receivable_is_revenue_minus_payments():
    assert calculate_receivables("2024-01-01", 1_100_000, 600_000) == Decimal("500000")
    assert calculate_receivables(date(2024, 1, 1), Decimal("1100000"), Decimal("600000")) == 500_000


def test_overpayment_is_clamped_to_zero():
    assert calculate_receivables("2024-01-01", 500_000, 900_000) == 0


def test_subsidy_status_sums_only_installments():
    assert sum_payments("보조금-series", MIXED_PAYMENTS) == Decimal("550000")
    assert sum_payments("  보조금 동시진행 ", MIXED_PAYMENTS) == Decimal("550000")


@pytest.mark.parametrize("status", ["자비", "대리점", "AS", "외주설치", "", None])
def test_other_statuses_sum_advance_and_balance(status):
    assert sum_payments(status, MIXED_PAYMENTS) == Decimal("3000000")


def test_classification_uses_marker_substring():
    assert classify_progress_status("보조금") == "subsidy"
    assert classify_progress_status("자비-series") == "self_pay"
    assert classify_progress_status(None) == "self_pay"


@pytest.mark.parametrize("value", [None, "", "abc", "NaN", "Infinity", True, object(), [1]])
def test_malformed_amounts_coerce_to_zero(value):
    assert to_amount(value) == 0


def test_malformed_payment_fields_never_raise():
    fields = {"payment_advance_amount": "n/a", "payment_balance_amount": None}

    assert sum_payments("자비", fields) == 0
    assert sum_payments("자비", None) == 0


def test_revenue_with_tax_applies_vat():
    assert revenue_with_tax(1_000_000) == Decimal("1100000")
    assert revenue_with_tax("1,000,005") == Decimal("1100006")
    assert revenue_with_tax(None) == 0


def test_receivable_for_business_combines_schedule_and_gate():
    installed = BusinessFinancials(
        business_id="b-1",
        progress_status="보조금",
        installation_date=date(2024, 5, 1),
        total_revenue_with_tax=Decimal("1100000"),
        payments=MIXED_PAYMENTS,
    )
    pending = BusinessFinancials(
        business_id="b-2",
        progress_status="자비",
        installation_date=None,
        total_revenue_with_tax=Decimal("9900000"),
        payments={},
    )

    assert receivable_for(installed) == Decimal("550000")
    assert receivable_for(pending) == 0


def test_rules_load_from_yaml(tmp_path):
    config = tmp_path / "rules.yaml"
    config.write_text(
        "vat_rate: 0.2\nsubsidy_marker: subsidy\nschedules:\n  self_pay:\n    - deposit\n",
        encoding="utf-8",
    )

    rules = receivables._load_rules(config)

    assert rules.vat_rate == Decimal("0.2")
    assert classify_progress_status("subsidy-series", rules) == "subsidy"
    assert sum_payments("cash", {"deposit": 10, "payment_advance_amount": 99}, rules) == 10
    assert rules.subsidy_fields == ("payment_1st_amount", "payment_2nd_amount", "payment_additional_amount")


def test_missing_rules_file_falls_back_to_defaults(tmp_path):
    rules = receivables._load_rules(tmp_path / "absent.yaml")

    assert rules.vat_rate == Decimal("0.1")
    assert rules.subsidy_marker == "보조금"

"""Application service for business financials and receivables."""
from __future__ import annotations

from decimal import Decimal

from backoffice.core.receivables import (
    calculate_receivables,
    classify_progress_status,
    quantize_won,
    revenue_with_tax,
    sum_payments,
    to_amount,
)
from backoffice.core.schema import BusinessRecord, ReceivableResult
from backoffice.domain import BusinessFinancials
from backoffice.infrastructure import RecordStore


class ReceivablesService:
    def __init__(self, store: RecordStore) -> None:
        self._store = store

    def register_business(self, record: BusinessRecord) -> BusinessFinancials:
        if record.total_revenue_with_tax is not None:
            revenue = to_amount(record.total_revenue_with_tax)
        else:
            revenue = revenue_with_tax(record.total_revenue)
        financials = BusinessFinancials(
            business_id=record.business_id,
            business_name=record.business_name,
            progress_status=record.progress_status,
            installation_date=record.installation_date,
            total_revenue_with_tax=max(Decimal("0"), revenue),
            payments=dict(record.payments),
            costs=dict(record.costs),
        )
        return self._store.upsert_business(financials)

    def get_receivable(self, business_id: str) -> ReceivableResult:
        return self._evaluate(self._store.read_business_financials(business_id))

    def list_receivables(self) -> dict[str, object]:
        rows = [self._evaluate(financials) for financials in self._store.list_businesses()]
        total = sum((row.receivables for row in rows), Decimal("0"))
        return {
            "items": [row.model_dump(mode="json") for row in rows],
            "summary": {
                "total_receivables": str(quantize_won(total)),
                "outstanding_businesses": sum(1 for row in rows if row.receivables > 0),
            },
        }

    @staticmethod
    def _evaluate(financials: BusinessFinancials) -> ReceivableResult:
        payments = sum_payments(financials.progress_status, financials.payments)
        receivables = calculate_receivables(
            financials.installation_date,
            financials.total_revenue_with_tax,
            payments,
        )
        return ReceivableResult(
            business_id=financials.business_id,
            business_name=financials.business_name,
            progress_status=financials.progress_status,
            category=classify_progress_status(financials.progress_status),
            installation_date=financials.installation_date,
            total_revenue_with_tax=quantize_won(financials.total_revenue_with_tax),
            total_payments=quantize_won(payments),
            receivables=quantize_won(receivables),
        )

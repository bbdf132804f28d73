"""Domain entities for business financials and cost change history."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Literal

CostType = Literal["operating_cost", "survey_fee", "as_cost", "custom_cost"]
ChangeAction = Literal["added", "updated", "deleted"]


@dataclass(slots=True)
class BusinessFinancials:
    """Financial snapshot of a single business site."""

    business_id: str
    business_name: str = ""
    progress_status: str = ""
    installation_date: date | None = None
    total_revenue_with_tax: Decimal = Decimal("0")
    payments: dict[str, Any] = field(default_factory=dict)
    costs: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class ChangeRecord:
    """Human-readable description of one cost mutation."""

    business_id: str
    cost_type: CostType
    action: ChangeAction
    title: str
    description: str
    author_name: str
    created_at: datetime
    old_value: Any = None
    new_value: Any = None
    item_name: str | None = None


@dataclass(slots=True)
class Memo:
    memo_id: str
    business_id: str
    title: str
    content: str
    created_by: str
    updated_by: str
    created_at: datetime
    is_auto_generated: bool = True

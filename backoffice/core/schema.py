from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, Field, constr, field_validator

from backoffice.domain import WorkItem

CostTypeField = Literal["operating_cost", "survey_fee", "as_cost", "custom_cost"]
ChangeActionField = Literal["added", "updated", "deleted"]


class WorkItemRecord(BaseModel):
    id: str | None = None
    business_name: str | None = None
    task_type: str | None = None
    status: str | None = None
    title: str = ""
    created_at: datetime
    assignee: str | None = None
    due_date: date | None = None
    is_active: bool = True
    is_deleted: bool = False

    @field_validator("due_date", mode="before")
    @classmethod
    def _blank_due_date(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def to_work_item(self, item_id: str | None = None) -> WorkItem:
        created_at = self.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return WorkItem(
            item_id=str(self.id or item_id or uuid4()),
            business_name=self.business_name or "",
            task_type=self.task_type or "",
            status=self.status or "",
            title=self.title,
            created_at=created_at,
            assignee=self.assignee or None,
            due_date=self.due_date,
            is_active=self.is_active,
            is_deleted=self.is_deleted,
        )


class BusinessRecord(BaseModel):
    business_id: constr(min_length=1)
    business_name: str = ""
    progress_status: str = ""
    installation_date: date | None = None
    total_revenue: Decimal | None = None
    total_revenue_with_tax: Decimal | None = None
    payments: dict[str, Any] = Field(default_factory=dict)
    costs: dict[str, Any] = Field(default_factory=dict)

    @field_validator("installation_date", mode="before")
    @classmethod
    def _blank_installation_date(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class CostChangePayload(BaseModel):
    cost_type: CostTypeField
    action: ChangeActionField
    old_value: Any = None
    new_value: Any = None
    item_name: str | None = None


class CostMutationRequest(BaseModel):
    action: ChangeActionField
    value: Any = None
    item_name: str | None = None
    author: str | None = None


class ReceivableResult(BaseModel):
    business_id: str
    business_name: str = ""
    progress_status: str = ""
    category: Literal["subsidy", "self_pay"]
    installation_date: date | None = None
    total_revenue_with_tax: Decimal = Decimal("0")
    total_payments: Decimal = Decimal("0")
    receivables: Decimal = Decimal("0")

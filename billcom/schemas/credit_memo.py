from __future__ import annotations

from typing import Literal, Optional, get_args

from pydantic import Field

from billcom.schemas.common import BillModel, EntityModel


CreditMemoStatus = Literal["NOT_APPLIED", "PARTIALLY_APPLIED", "FULLY_APPLIED"]

CREDIT_MEMO_STATUSES = get_args(CreditMemoStatus)

CREDIT_MEMO_FILTERABLE_FIELDS = (
    "id",
    "archived",
    "customerId",
    "status",
    "creditDate",
    "amount",
    "createdTime",
    "updatedTime",
)
CREDIT_MEMO_SORTABLE_FIELDS = ("creditDate", "amount", "createdTime", "updatedTime")


class CreditMemoClassifications(BillModel):
    accounting_class_id: Optional[str] = None
    department_id: Optional[str] = None
    job_id: Optional[str] = None
    location_id: Optional[str] = None


class CreditMemoLineItemClassifications(CreditMemoClassifications):
    chart_of_account_id: Optional[str] = None
    item_id: Optional[str] = None


class CreditMemoLineItemInput(BillModel):
    description: Optional[str] = None
    price: Optional[float] = None
    quantity: Optional[float] = None
    amount: Optional[float] = None
    rate_percent: Optional[float] = None
    taxable: Optional[bool] = None
    classifications: Optional[CreditMemoLineItemClassifications] = None


class CreditMemoLineItem(CreditMemoLineItemInput):
    id: Optional[str] = None


class CreditMemoFields(BillModel):
    reference_number: Optional[str] = None
    description: Optional[str] = None
    sales_tax_item_id: Optional[str] = None
    pay_to_chart_of_account_id: Optional[str] = None
    pay_to_bank_account_id: Optional[str] = None
    sales_tax_total: Optional[float] = None
    sales_tax_percentage: Optional[float] = None
    classifications: Optional[CreditMemoClassifications] = None


class CreditMemo(EntityModel, CreditMemoFields):
    id: str
    archived: bool
    customer_id: Optional[str] = None
    credit_date: Optional[str] = None
    amount: Optional[float] = None
    applied_amount: Optional[float] = None
    status: Optional[CreditMemoStatus] = None
    created_time: str
    updated_time: str
    credit_memo_line_items: Optional[list[CreditMemoLineItem]] = None


class CreateCreditMemoRequest(CreditMemoFields):
    customer_id: str = Field(min_length=1)
    credit_date: str
    credit_memo_line_items: list[CreditMemoLineItemInput]


class UpdateCreditMemoRequest(CreditMemoFields):
    customer_id: Optional[str] = None
    credit_date: Optional[str] = None
    credit_memo_line_items: Optional[list[CreditMemoLineItemInput]] = None

from __future__ import annotations

from typing import Literal, Optional, get_args

from pydantic import Field

from billcom.schemas.common import BillModel, EntityModel


BillPaymentStatus = Literal["PAID", "UNPAID", "PARTIAL", "SCHEDULED", "UNDEFINED"]
BillApprovalStatus = Literal["UNASSIGNED", "ASSIGNED", "APPROVING", "APPROVED", "DENIED"]
ApproverStatus = Literal["WAITING", "APPROVED", "DENIED", "REROUTED", "UNDEFINED"]

BILL_PAYMENT_STATUSES = get_args(BillPaymentStatus)
BILL_APPROVAL_STATUSES = get_args(BillApprovalStatus)
APPROVER_STATUSES = get_args(ApproverStatus)

BILL_FILTERABLE_FIELDS = (
    "id",
    "archived",
    "vendorId",
    "amount",
    "dueDate",
    "paymentStatus",
    "approvalStatus",
    "createdTime",
    "updatedTime",
)
BILL_SORTABLE_FIELDS = ("dueDate", "amount", "createdTime", "updatedTime")


class BillApprover(BillModel):
    user_id: str
    status: ApproverStatus
    approver_order: int
    status_changed_time: str


class BillClassifications(BillModel):
    chart_of_account_id: Optional[str] = None
    accounting_class_id: Optional[str] = None
    department_id: Optional[str] = None
    location_id: Optional[str] = None
    item_id: Optional[str] = None


class BillLineItemClassifications(BillClassifications):
    employee_id: Optional[str] = None
    job_id: Optional[str] = None
    customer_id: Optional[str] = None


class BillInvoice(BillModel):
    invoice_number: str
    invoice_date: str


class BillVendorCredit(BillModel):
    id: str
    amount: float


class BillLineItemInput(BillModel):
    amount: Optional[float] = None
    quantity: Optional[float] = None
    price: Optional[float] = None
    description: Optional[str] = None
    classifications: Optional[BillLineItemClassifications] = None


class BillLineItem(BillLineItemInput):
    id: Optional[str] = None


class Bill(EntityModel):
    id: str
    archived: bool
    vendor_id: Optional[str] = None
    vendor_name: Optional[str] = None
    funding_amount: Optional[float] = None
    amount: Optional[float] = None
    paid_amount: Optional[float] = None
    due_amount: Optional[float] = None
    scheduled_amount: Optional[float] = None
    credit_amount: float
    exchange_rate: Optional[float] = None
    description: Optional[str] = None
    due_date: str
    invoice: BillInvoice
    bill_line_items: list[BillLineItem]
    pay_from_chart_of_account_id: Optional[str] = None
    payment_status: BillPaymentStatus
    approval_status: BillApprovalStatus
    created_time: str
    updated_time: str
    classifications: Optional[BillClassifications] = None
    approvers: Optional[list[BillApprover]] = None
    purchase_order_number: Optional[str] = None


class CreateBillRequest(BillModel):
    vendor_id: str = Field(min_length=1)
    description: Optional[str] = None
    due_date: str
    bill_line_items: list[BillLineItemInput]
    invoice: BillInvoice
    pay_from_chart_of_account_id: Optional[str] = None
    classifications: Optional[BillClassifications] = None
    vendor_credits: Optional[list[BillVendorCredit]] = None
    purchase_order_number: Optional[str] = None
    bill_approvals: Optional[bool] = None


class UpdateBillRequest(BillModel):
    vendor_id: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[str] = None
    bill_line_items: Optional[list[BillLineItemInput]] = None
    invoice: Optional[BillInvoice] = None
    pay_from_chart_of_account_id: Optional[str] = None
    classifications: Optional[BillClassifications] = None
    vendor_credits: Optional[list[BillVendorCredit]] = None
    purchase_order_number: Optional[str] = None
    bill_approvals: Optional[bool] = None

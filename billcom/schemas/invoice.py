from __future__ import annotations

from typing import Literal, Optional, get_args

from pydantic import Field

from billcom.schemas.common import BillModel, EntityModel


InvoiceStatus = Literal["OPEN", "PARTIAL_PAYMENT", "PAID", "SCHEDULED", "VOID", "UNDEFINED"]
InvoicePaymentStatus = Literal["PAID", "SCHEDULED", "UNDEFINED"]

INVOICE_STATUSES = get_args(InvoiceStatus)
INVOICE_PAYMENT_STATUSES = get_args(InvoicePaymentStatus)

INVOICE_FILTERABLE_FIELDS = (
    "id",
    "archived",
    "invoiceNumber",
    "customerId",
    "status",
    "dueDate",
    "invoiceDate",
    "totalAmount",
    "createdTime",
    "updatedTime",
)
INVOICE_SORTABLE_FIELDS = ("invoiceDate", "dueDate", "totalAmount", "createdTime", "updatedTime")


class InvoiceClassifications(BillModel):
    accounting_class_id: Optional[str] = None
    department_id: Optional[str] = None
    job_id: Optional[str] = None
    location_id: Optional[str] = None


class InvoiceLineItemClassifications(InvoiceClassifications):
    chart_of_account_id: Optional[str] = None
    item_id: Optional[str] = None


class InvoiceLineItemInput(BillModel):
    description: Optional[str] = None
    price: Optional[float] = None
    quantity: Optional[float] = None
    classifications: Optional[InvoiceLineItemClassifications] = None


class InvoiceLineItem(InvoiceLineItemInput):
    id: Optional[str] = None


class InvoicePayment(BillModel):
    id: Optional[str] = None
    amount: Optional[float] = None
    status: Optional[InvoicePaymentStatus] = None
    date: Optional[str] = None


class InvoiceConvenienceFee(BillModel):
    percentage: Optional[float] = None


class InvoiceCustomer(BillModel):
    id: str


class Invoice(EntityModel):
    id: str
    archived: bool
    invoice_number: Optional[str] = None
    invoice_date: Optional[str] = None
    due_date: Optional[str] = None
    customer_id: Optional[str] = None
    total_amount: Optional[float] = None
    due_amount: Optional[float] = None
    scheduled_amount: Optional[float] = None
    credit_amount: Optional[float] = None
    status: Optional[InvoiceStatus] = None
    exchange_rate: Optional[float] = None
    created_time: str
    updated_time: str
    invoice_line_items: Optional[list[InvoiceLineItem]] = None
    pay_to_chart_of_account_id: Optional[str] = None
    payments: Optional[list[InvoicePayment]] = None
    classifications: Optional[InvoiceClassifications] = None
    sales_tax_item_id: Optional[str] = None
    sales_tax_total: Optional[float] = None
    sales_tax_percentage: Optional[float] = None
    enable_card_payment: Optional[bool] = None
    convenience_fee: Optional[InvoiceConvenienceFee] = None
    invoice_pdf_id: Optional[str] = None


class CreateInvoiceRequest(BillModel):
    invoice_number: str = Field(min_length=1)
    invoice_date: str
    due_date: str
    customer: InvoiceCustomer
    invoice_line_items: list[InvoiceLineItemInput]
    pay_to_chart_of_account_id: Optional[str] = None
    classifications: Optional[InvoiceClassifications] = None
    sales_tax_item_id: Optional[str] = None
    sales_tax_total: Optional[float] = None
    sales_tax_percentage: Optional[float] = None
    enable_card_payment: Optional[bool] = None
    convenience_fee: Optional[InvoiceConvenienceFee] = None


class UpdateInvoiceRequest(BillModel):
    invoice_number: Optional[str] = None
    invoice_date: Optional[str] = None
    due_date: Optional[str] = None
    customer_id: Optional[str] = None
    invoice_line_items: Optional[list[InvoiceLineItemInput]] = None
    pay_to_chart_of_account_id: Optional[str] = None
    classifications: Optional[InvoiceClassifications] = None
    sales_tax_item_id: Optional[str] = None
    sales_tax_total: Optional[float] = None
    sales_tax_percentage: Optional[float] = None
    enable_card_payment: Optional[bool] = None
    convenience_fee: Optional[InvoiceConvenienceFee] = None

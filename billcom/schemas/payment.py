from __future__ import annotations

from typing import Literal, Optional, get_args

from pydantic import Field

from billcom.schemas.common import BillModel, EntityModel


PaymentStatus = Literal["APPROVING", "PAID", "VOID", "SCHEDULED", "FAILED", "PENDING", "UNDEFINED"]
PaymentDisbursementType = Literal[
    "ACH", "CHECK", "RPPS", "INTERNATIONAL", "VCARD", "WALLET", "OFFLINE", "UNDEFINED"
]
PaymentDisbursementStatus = Literal["DONE", "FAILED", "IN_PROGRESS", "UNDEFINED"]
PaymentFundingAccountType = Literal["BANK_ACCOUNT", "CARD_ACCOUNT", "AP_CARD", "UNDEFINED"]
PaymentSingleStatus = Literal["CLEARED", "VOID_PENDING", "SCHEDULED", "PAID", "FAILED", "UNDEFINED"]

PAYMENT_STATUSES = get_args(PaymentStatus)
PAYMENT_DISBURSEMENT_TYPES = get_args(PaymentDisbursementType)
PAYMENT_DISBURSEMENT_STATUSES = get_args(PaymentDisbursementStatus)
PAYMENT_FUNDING_ACCOUNT_TYPES = get_args(PaymentFundingAccountType)
PAYMENT_SINGLE_STATUSES = get_args(PaymentSingleStatus)

PAYMENT_FILTERABLE_FIELDS = (
    "id",
    "vendorId",
    "status",
    "disbursementType",
    "processDate",
    "amount",
    "createdTime",
    "updatedTime",
)
PAYMENT_SORTABLE_FIELDS = ("processDate", "amount", "createdTime", "updatedTime")


class PaymentFundingAccount(BillModel):
    type: Optional[PaymentFundingAccountType] = None
    id: Optional[str] = None


class PaymentVendorCredit(BillModel):
    id: Optional[str] = None
    amount: Optional[float] = None


class PaymentBillPayment(BillModel):
    bill_id: Optional[str] = None
    amount: Optional[float] = None
    vendor_credits: Optional[list[PaymentVendorCredit]] = None


class PaymentProcessingOptions(BillModel):
    request_pay_faster: Optional[bool] = None
    create_bill: Optional[bool] = None
    request_check_delivery_type: Optional[str] = None


class PaymentCheckDisbursement(BillModel):
    check_number: Optional[str] = None
    mailed_date: Optional[str] = None
    delivery_date: Optional[str] = None
    tracking_number: Optional[str] = None
    tracking_url: Optional[str] = None


class PaymentAchDisbursement(BillModel):
    trace_number: Optional[str] = None
    cleared_date: Optional[str] = None


class PaymentRppsDisbursement(BillModel):
    confirmation_number: Optional[str] = None


class PaymentInternationalDisbursement(BillModel):
    reference_number: Optional[str] = None
    cleared_date: Optional[str] = None


class PaymentVcardDisbursement(BillModel):
    card_number: Optional[str] = Field(default=None, repr=False)
    expiration_date: Optional[str] = None


class PaymentWalletDisbursement(BillModel):
    transaction_id: Optional[str] = None


class PaymentDisbursementInfo(BillModel):
    check_disbursement: Optional[PaymentCheckDisbursement] = None
    ach_disbursement: Optional[PaymentAchDisbursement] = None
    rpps_disbursement: Optional[PaymentRppsDisbursement] = None
    international_disbursement: Optional[PaymentInternationalDisbursement] = None
    vcard_disbursement: Optional[PaymentVcardDisbursement] = None
    wallet_disbursement: Optional[PaymentWalletDisbursement] = None


class PaymentVoidInfo(BillModel):
    void_date: Optional[str] = None
    void_reason: Optional[str] = None
    voided_by: Optional[str] = None


class PaymentPurposeCode(BillModel):
    name: Optional[str] = None
    value: Optional[str] = None


class PaymentPurpose(BillModel):
    text: Optional[str] = None
    code: Optional[PaymentPurposeCode] = None


class PaymentFields(BillModel):
    amount: Optional[float] = None
    process_date: Optional[str] = None
    description: Optional[str] = None
    bill_payments: Optional[list[PaymentBillPayment]] = None
    funding_account: Optional[PaymentFundingAccount] = None
    processing_options: Optional[PaymentProcessingOptions] = None
    payment_purpose: Optional[PaymentPurpose] = None


class Payment(EntityModel, PaymentFields):
    id: str
    vendor_id: Optional[str] = None
    vendor_name: Optional[str] = None
    bill_id: Optional[str] = None
    status: Optional[PaymentStatus] = None
    disbursement_type: Optional[PaymentDisbursementType] = None
    disbursement_status: Optional[PaymentDisbursementStatus] = None
    disbursement_info: Optional[PaymentDisbursementInfo] = None
    void_info: Optional[list[PaymentVoidInfo]] = None
    single_status: Optional[PaymentSingleStatus] = None
    created_time: Optional[str] = None
    updated_time: Optional[str] = None


class CreatePaymentRequest(PaymentFields):
    vendor_id: str = Field(min_length=1)


class UpdatePaymentRequest(PaymentFields):
    pass

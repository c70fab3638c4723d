from __future__ import annotations

from typing import Literal, Optional, get_args

from pydantic import Field

from billcom.schemas.common import BillModel, EntityModel


VendorAccountType = Literal["BUSINESS", "PERSON", "NONE"]
VendorBankAccountType = Literal["CHECKING", "SAVINGS"]
VendorBankAccountOwnerType = Literal["BUSINESS", "PERSON"]
VendorVirtualCardStatus = Literal["ENROLLED", "UNENROLLED", "PENDING", "UNKNOWN"]
VendorPayByType = Literal["ACH", "CHECK", "VIRTUAL_CARD"]

VENDOR_ACCOUNT_TYPES = get_args(VendorAccountType)
VENDOR_BANK_ACCOUNT_TYPES = get_args(VendorBankAccountType)
VENDOR_BANK_ACCOUNT_OWNER_TYPES = get_args(VendorBankAccountOwnerType)
VENDOR_VIRTUAL_CARD_STATUSES = get_args(VendorVirtualCardStatus)
VENDOR_PAY_BY_TYPES = get_args(VendorPayByType)

VENDOR_FILTERABLE_FIELDS = (
    "id",
    "archived",
    "name",
    "email",
    "createdTime",
    "updatedTime",
)
VENDOR_SORTABLE_FIELDS = ("name", "createdTime", "updatedTime")


class VendorAddress(BillModel):
    line1: Optional[str] = None
    line2: Optional[str] = None
    city: Optional[str] = None
    state_or_province: Optional[str] = None
    zip_or_postal_code: Optional[str] = None
    country: Optional[str] = None
    country_name: Optional[str] = None


class VendorBankAccount(BillModel):
    name_on_account: Optional[str] = None
    account_number: Optional[str] = Field(default=None, repr=False)
    routing_number: Optional[str] = None
    type: Optional[VendorBankAccountType] = None
    owner_type: Optional[VendorBankAccountOwnerType] = None


class VendorVirtualCard(BillModel):
    status: Optional[VendorVirtualCardStatus] = None


class VendorPaymentInformation(BillModel):
    payee_name: Optional[str] = None
    pay_by_type: Optional[VendorPayByType] = None
    bank_account: Optional[VendorBankAccount] = None
    virtual_card: Optional[VendorVirtualCard] = None


class VendorAdditionalInfo(BillModel):
    track1099: Optional[bool] = None
    combine_payments: Optional[bool] = None


class VendorBalance(BillModel):
    amount: Optional[float] = None


class VendorAutoPay(BillModel):
    enabled: Optional[bool] = None


class Vendor(EntityModel):
    id: str
    archived: bool
    name: str
    short_name: Optional[str] = None
    account_type: VendorAccountType
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[VendorAddress] = None
    payment_information: Optional[VendorPaymentInformation] = None
    additional_info: Optional[VendorAdditionalInfo] = None
    bank_account_status: Optional[str] = None
    recurring_payments: Optional[bool] = None
    bill_currency: Optional[str] = None
    balance: Optional[VendorBalance] = None
    auto_pay: Optional[VendorAutoPay] = None
    network_status: Optional[str] = None
    created_time: str
    updated_time: str


class CreateVendorPaymentInformation(BillModel):
    payee_name: Optional[str] = None
    bank_account: Optional[VendorBankAccount] = None


class CreateVendorRequest(BillModel):
    name: str = Field(min_length=1)
    account_type: VendorAccountType
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[VendorAddress] = None
    payment_information: Optional[CreateVendorPaymentInformation] = None
    additional_info: Optional[VendorAdditionalInfo] = None
    bill_currency: Optional[str] = None


class UpdateVendorPaymentInformation(BillModel):
    payee_name: Optional[str] = None


class UpdateVendorRequest(BillModel):
    name: Optional[str] = Field(default=None, min_length=1)
    account_type: Optional[VendorAccountType] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[VendorAddress] = None
    payment_information: Optional[UpdateVendorPaymentInformation] = None
    additional_info: Optional[VendorAdditionalInfo] = None
    bill_currency: Optional[str] = None
    auto_pay: Optional[VendorAutoPay] = None

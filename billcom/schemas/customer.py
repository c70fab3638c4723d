from __future__ import annotations

from typing import Literal, Optional, get_args

from pydantic import Field

from billcom.schemas.common import BillModel, EntityModel


CustomerAccountType = Literal["BUSINESS", "PERSON", "NONE"]

CUSTOMER_ACCOUNT_TYPES = get_args(CustomerAccountType)

CUSTOMER_FILTERABLE_FIELDS = (
    "id",
    "archived",
    "name",
    "email",
    "companyName",
    "accountNumber",
    "createdTime",
    "updatedTime",
)
CUSTOMER_SORTABLE_FIELDS = ("name", "createdTime", "updatedTime")


class CustomerContact(BillModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class CustomerAddress(BillModel):
    line1: Optional[str] = None
    line2: Optional[str] = None
    city: Optional[str] = None
    state_or_province: Optional[str] = None
    zip_or_postal_code: Optional[str] = None
    country: Optional[str] = None
    country_name: Optional[str] = None


class CustomerBalance(BillModel):
    amount: Optional[float] = None


class CustomerFields(BillModel):
    email: Optional[str] = None
    company_name: Optional[str] = None
    contact: Optional[CustomerContact] = None
    phone: Optional[str] = None
    fax: Optional[str] = None
    description: Optional[str] = None
    invoice_currency: Optional[str] = None
    account_type: Optional[CustomerAccountType] = None
    payment_term_id: Optional[str] = None
    account_number: Optional[str] = None
    billing_address: Optional[CustomerAddress] = None
    shipping_address: Optional[CustomerAddress] = None


class Customer(EntityModel, CustomerFields):
    id: str
    archived: bool
    name: Optional[str] = None
    balance: Optional[CustomerBalance] = None
    created_time: str
    updated_time: str


class CreateCustomerRequest(CustomerFields):
    name: str = Field(min_length=1)


class UpdateCustomerRequest(CustomerFields):
    name: Optional[str] = Field(default=None, min_length=1)

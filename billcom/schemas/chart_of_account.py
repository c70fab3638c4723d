from __future__ import annotations

from typing import Literal, Optional, get_args

from pydantic import Field

from billcom.schemas.common import BillModel, EntityModel


AccountType = Literal[
    "UNSPECIFIED",
    "ACCOUNTS_PAYABLE",
    "ACCOUNTS_RECEIVABLE",
    "BANK",
    "COST_OF_GOODS_SOLD",
    "CREDIT_CARD",
    "EQUITY",
    "EXPENSE",
    "FIXED_ASSET",
    "INCOME",
    "LONG_TERM_LIABILITY",
    "OTHER_ASSET",
    "OTHER_CURRENT_ASSET",
    "OTHER_CURRENT_LIABILITY",
    "OTHER_EXPENSE",
    "OTHER_INCOME",
    "NON_POSTING",
]

ACCOUNT_TYPES = get_args(AccountType)

CHART_OF_ACCOUNT_FILTERABLE_FIELDS = ("id", "archived", "name", "parentId", "createdTime", "updatedTime")
CHART_OF_ACCOUNT_SORTABLE_FIELDS = ("name", "createdTime", "updatedTime")


class AccountDetails(BillModel):
    type: AccountType
    number: Optional[str] = None


class AccountDetailsUpdate(BillModel):
    type: Optional[AccountType] = None
    number: Optional[str] = None


class ChartOfAccount(EntityModel):
    id: str
    archived: bool
    name: str
    description: Optional[str] = None
    parent_id: Optional[str] = None
    account: AccountDetails
    created_time: str
    updated_time: str


class CreateChartOfAccountRequest(BillModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    parent_id: Optional[str] = None
    account: AccountDetails


class UpdateChartOfAccountRequest(BillModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    parent_id: Optional[str] = None
    account: Optional[AccountDetailsUpdate] = None

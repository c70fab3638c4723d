from __future__ import annotations

from typing import Optional

from pydantic import Field

from billcom.schemas.common import BillModel, EntityModel


ACCOUNTING_CLASS_FILTERABLE_FIELDS = ("id", "archived", "name", "parentId", "createdTime", "updatedTime")
ACCOUNTING_CLASS_SORTABLE_FIELDS = ("name", "createdTime", "updatedTime")


class AccountingClass(EntityModel):
    id: str
    name: str
    short_name: Optional[str] = None
    description: Optional[str] = None
    parent_id: Optional[str] = None
    archived: bool
    created_time: str
    updated_time: str


class CreateAccountingClassRequest(BillModel):
    name: str = Field(min_length=1)
    short_name: Optional[str] = None
    description: Optional[str] = None
    parent_id: Optional[str] = None


class UpdateAccountingClassRequest(BillModel):
    name: Optional[str] = Field(default=None, min_length=1)
    short_name: Optional[str] = None
    description: Optional[str] = None
    parent_id: Optional[str] = None

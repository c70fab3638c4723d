from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Any, Generic, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from billcom.core.config import Environment


EntityT = TypeVar("EntityT")

ArrayOperator = Literal["in", "nin"]
ScalarOperator = Literal["eq", "ne", "gt", "gte", "lt", "lte", "sw"]
FilterOperator = Literal["eq", "ne", "gt", "gte", "lt", "lte", "in", "nin", "sw"]
SortOrder = Literal["asc", "desc"]

ScalarValue = Union[bool, int, float, datetime, date, str]


class BillModel(BaseModel):
    """Base for wire models: snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class EntityModel(BillModel):
    """Provider record; fields the model does not declare land in ``model_extra``."""


class Credentials(BillModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    username: str = Field(min_length=1)
    password: str = Field(min_length=1, repr=False)
    organization_id: str = Field(min_length=1)
    dev_key: str = Field(min_length=1, repr=False)
    environment: Environment = "sandbox"

    def login_payload(self) -> dict[str, str]:
        return {
            "username": self.username,
            "password": self.password,
            "organizationId": self.organization_id,
            "devKey": self.dev_key,
        }


class LoginResponse(BillModel):
    model_config = ConfigDict(extra="ignore")

    session_id: str
    organization_id: str
    user_id: str
    api_end_point: Optional[str] = None


class SessionInfo(BillModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    session_id: str = Field(repr=False)
    organization_id: str
    user_id: str
    api_end_point: Optional[str] = None


class RequestConfig(BillModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: str
    dev_key: str = Field(repr=False)
    session_id: Optional[str] = Field(default=None, repr=False)


class ArrayFilter(BillModel):
    model_config = ConfigDict(extra="forbid")

    field: str = Field(min_length=1)
    op: ArrayOperator
    value: list[str]


class ScalarFilter(BillModel):
    model_config = ConfigDict(extra="forbid")

    field: str = Field(min_length=1)
    op: ScalarOperator
    value: ScalarValue


Filter = Annotated[Union[ArrayFilter, ScalarFilter], Field(discriminator="op")]


class SortSpec(BillModel):
    model_config = ConfigDict(extra="forbid")

    field: str = Field(min_length=1)
    order: SortOrder = "asc"


class ListParams(BillModel):
    model_config = ConfigDict(extra="forbid")

    max: Optional[int] = Field(default=None, ge=1, le=100)
    page: Optional[str] = None
    filters: list[Filter] = Field(default_factory=list)
    sort: list[SortSpec] = Field(default_factory=list)


class PaginatedResponse(BillModel, Generic[EntityT]):
    model_config = ConfigDict(extra="ignore")

    results: list[EntityT] = Field(default_factory=list)
    next_page: Optional[str] = None
    prev_page: Optional[str] = None

    @property
    def has_more(self) -> bool:
        return bool(self.next_page)

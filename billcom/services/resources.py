from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable, Generic, Mapping, Optional, Sequence, TypeVar, Union
from urllib.parse import quote

from pydantic import ValidationError as PydanticValidationError

from billcom.core.errors import ApiError, ValidationError
from billcom.core.http import HttpMethod
from billcom.schemas.accounting_class import (
    AccountingClass,
    CreateAccountingClassRequest,
    UpdateAccountingClassRequest,
)
from billcom.schemas.bill import Bill, CreateBillRequest, UpdateBillRequest
from billcom.schemas.chart_of_account import (
    ChartOfAccount,
    CreateChartOfAccountRequest,
    UpdateChartOfAccountRequest,
)
from billcom.schemas.common import BillModel, EntityModel, PaginatedResponse, RequestConfig
from billcom.schemas.credit_memo import CreateCreditMemoRequest, CreditMemo, UpdateCreditMemoRequest
from billcom.schemas.customer import CreateCustomerRequest, Customer, UpdateCustomerRequest
from billcom.schemas.invoice import CreateInvoiceRequest, Invoice, UpdateInvoiceRequest
from billcom.schemas.payment import CreatePaymentRequest, Payment, UpdatePaymentRequest
from billcom.schemas.vendor import CreateVendorRequest, UpdateVendorRequest, Vendor
from billcom.utils.query import ListParamsInput, build_path, coerce_list_params


EntityT = TypeVar("EntityT", bound=EntityModel)

Record = dict[str, Any]
Records = list[Record]
Payload = Union[BillModel, Mapping[str, Any]]

Operation = Callable[[], Awaitable[Any]]
Runner = Callable[[Operation], Awaitable[Any]]
ConfigProvider = Callable[[], RequestConfig]
Sender = Callable[[RequestConfig, HttpMethod, str, Any], Awaitable[Any]]

logger = logging.getLogger("billcom.resources")


@dataclass(frozen=True)
class ResourceDefinition(Generic[EntityT]):
    name: str
    endpoint: str
    bulk_response_key: str
    model: type[EntityT]
    create_model: type[BillModel]
    update_model: type[BillModel]


RESOURCES: dict[str, ResourceDefinition[Any]] = {
    "vendors": ResourceDefinition(
        name="Vendor",
        endpoint="/v3/vendors",
        bulk_response_key="vendors",
        model=Vendor,
        create_model=CreateVendorRequest,
        update_model=UpdateVendorRequest,
    ),
    "bills": ResourceDefinition(
        name="Bill",
        endpoint="/v3/bills",
        bulk_response_key="bills",
        model=Bill,
        create_model=CreateBillRequest,
        update_model=UpdateBillRequest,
    ),
    "chart_of_accounts": ResourceDefinition(
        name="ChartOfAccount",
        endpoint="/v3/classifications/chart-of-accounts",
        bulk_response_key="chartOfAccounts",
        model=ChartOfAccount,
        create_model=CreateChartOfAccountRequest,
        update_model=UpdateChartOfAccountRequest,
    ),
    "accounting_classes": ResourceDefinition(
        name="AccountingClass",
        endpoint="/v3/classifications/accounting-classes",
        bulk_response_key="accountingClasses",
        model=AccountingClass,
        create_model=CreateAccountingClassRequest,
        update_model=UpdateAccountingClassRequest,
    ),
    "invoices": ResourceDefinition(
        name="Invoice",
        endpoint="/v3/invoices",
        bulk_response_key="invoices",
        model=Invoice,
        create_model=CreateInvoiceRequest,
        update_model=UpdateInvoiceRequest,
    ),
    "customers": ResourceDefinition(
        name="Customer",
        endpoint="/v3/customers",
        bulk_response_key="customers",
        model=Customer,
        create_model=CreateCustomerRequest,
        update_model=UpdateCustomerRequest,
    ),
    "payments": ResourceDefinition(
        name="Payment",
        endpoint="/v3/payments",
        bulk_response_key="payments",
        model=Payment,
        create_model=CreatePaymentRequest,
        update_model=UpdatePaymentRequest,
    ),
    "credit_memos": ResourceDefinition(
        name="CreditMemo",
        endpoint="/v3/credit-memos",
        bulk_response_key="creditMemos",
        model=CreditMemo,
        create_model=CreateCreditMemoRequest,
        update_model=UpdateCreditMemoRequest,
    ),
}


def _serialize(model: type[BillModel], data: Payload) -> dict[str, Any]:
    if isinstance(data, BillModel):
        return data.to_payload()
    try:
        return model.model_validate(dict(data)).to_payload()
    except PydanticValidationError as exc:
        raise ValidationError.local(f"Invalid {model.__name__} payload", exc.errors()) from exc


class Resource(Generic[EntityT]):
    """CRUD operations for one Bill.com entity endpoint.

    Every call goes through ``run`` (the owning client's login/retry wrapper) and
    reads a fresh ``RequestConfig`` on each attempt, so a session renewed by one
    call is visible to every resource sharing the same client.
    """

    def __init__(
        self,
        definition: ResourceDefinition[EntityT],
        get_config: ConfigProvider,
        run: Runner,
        send: Sender,
    ):
        self.definition = definition
        self._get_config = get_config
        self._run = run
        self._send = send

    @property
    def endpoint(self) -> str:
        return self.definition.endpoint

    async def list(self, params: ListParamsInput = None) -> PaginatedResponse[Record]:
        path = build_path(self.endpoint, coerce_list_params(params))
        payload = await self._call("GET", path)
        try:
            return PaginatedResponse[Record].model_validate(payload if payload is not None else {})
        except PydanticValidationError as exc:
            raise ApiError(f"Unexpected {self.definition.name} list response", None, None, payload) from exc

    async def list_all(self, params: ListParamsInput = None) -> AsyncIterator[Record]:
        current = coerce_list_params(params)
        followed: set[str] = {current.page} if current.page else set()
        while True:
            page = await self.list(current)
            for record in page.results:
                yield record
            if not page.next_page:
                return
            if page.next_page in followed:
                raise ApiError(f"Repeated {self.definition.name} page token", None, None, page.next_page)
            followed.add(page.next_page)
            current = current.model_copy(update={"page": page.next_page})

    async def get(self, entity_id: str) -> Record:
        return await self._call("GET", self._item_path(entity_id))

    async def create(self, data: Payload) -> Record:
        body = _serialize(self.definition.create_model, data)
        return await self._call("POST", self.endpoint, body)

    async def create_multiple(self, items: Sequence[Payload]) -> Records:
        body = [_serialize(self.definition.create_model, item) for item in items]
        payload = await self._call("POST", f"{self.endpoint}/bulk", body)
        if isinstance(payload, list):
            return payload
        if isinstance(payload, dict) and isinstance(payload.get(self.definition.bulk_response_key), list):
            return payload[self.definition.bulk_response_key]
        raise ApiError(f"Unexpected {self.definition.name} bulk response", None, None, payload)

    async def update(self, entity_id: str, data: Payload) -> Record:
        body = _serialize(self.definition.update_model, data)
        return await self._call("PATCH", self._item_path(entity_id), body)

    async def archive(self, entity_id: str) -> Record:
        return await self._call("POST", f"{self._item_path(entity_id)}/archive")

    async def restore(self, entity_id: str) -> Record:
        return await self._call("POST", f"{self._item_path(entity_id)}/restore")

    def parse(self, record: Mapping[str, Any]) -> EntityT:
        """Validate a raw provider record into the entity model."""
        return self.definition.model.model_validate(record)

    def _item_path(self, entity_id: str) -> str:
        if not entity_id:
            raise ValidationError.local(f"{self.definition.name} id is required")
        return f"{self.endpoint}/{quote(str(entity_id), safe='')}"

    async def _call(self, method: HttpMethod, path: str, body: Optional[Any] = None) -> Any:
        async def operation() -> Any:
            return await self._send(self._get_config(), method, path, body)

        logger.debug(
            "bill_resource_call",
            extra={"entity": self.definition.name, "method": method, "path": path},
        )
        return await self._run(operation)

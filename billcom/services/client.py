from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_none

from billcom.core import logging as logging_utils
from billcom.core.config import BASE_URLS, LOGIN_PATH, LOGOUT_PATH, Environment, Settings, get_settings
from billcom.core.errors import ApiError, AuthenticationError, ConfigurationError, SessionExpiredError
from billcom.core.http import HttpMethod, send_request
from billcom.schemas.accounting_class import AccountingClass
from billcom.schemas.bill import Bill
from billcom.schemas.chart_of_account import ChartOfAccount
from billcom.schemas.common import Credentials, LoginResponse, RequestConfig, SessionInfo
from billcom.schemas.credit_memo import CreditMemo
from billcom.schemas.customer import Customer
from billcom.schemas.invoice import Invoice
from billcom.schemas.payment import Payment
from billcom.schemas.vendor import Vendor
from billcom.services.resources import RESOURCES, Resource


T = TypeVar("T")


class BillClient:
    """Session owner for the Bill.com v3 API.

    The client holds a single session slot. ``login`` always replaces it,
    ``logout`` always clears it, and resource calls log in on first use when
    ``auto_login`` is enabled. Concurrent tasks sharing one client may race on
    ``login``; the last successful login wins. Callers that need single-flight
    login must serialize their own calls to ``ensure_logged_in``/``login``.
    """

    def __init__(
        self,
        credentials: Optional[Credentials] = None,
        *,
        environment: Optional[Environment] = None,
        auto_login: bool = True,
        settings: Settings | None = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings()
        self.logger = logging.getLogger("billcom.client")
        self._credentials = credentials
        self._session: Optional[SessionInfo] = None
        self._http_client = http_client
        self.auto_login = auto_login
        self.environment: Environment = environment or (
            credentials.environment if credentials is not None else self.settings.environment
        )
        self.base_url = BASE_URLS[self.environment]

        self.vendors: Resource[Vendor] = self._resource("vendors")
        self.bills: Resource[Bill] = self._resource("bills")
        self.chart_of_accounts: Resource[ChartOfAccount] = self._resource("chart_of_accounts")
        self.accounting_classes: Resource[AccountingClass] = self._resource("accounting_classes")
        self.invoices: Resource[Invoice] = self._resource("invoices")
        self.customers: Resource[Customer] = self._resource("customers")
        self.payments: Resource[Payment] = self._resource("payments")
        self.credit_memos: Resource[CreditMemo] = self._resource("credit_memos")

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **kwargs: Any) -> "BillClient":
        settings = settings or get_settings()
        kwargs.setdefault("auto_login", settings.auto_login)
        kwargs.setdefault("environment", settings.environment)
        return cls(settings.credentials(), settings=settings, **kwargs)

    async def __aenter__(self) -> "BillClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.logout()

    @property
    def has_credentials(self) -> bool:
        return self._credentials is not None

    def is_logged_in(self) -> bool:
        return self._session is not None

    def get_session(self) -> Optional[SessionInfo]:
        return self._session.model_copy() if self._session is not None else None

    def get_request_config(self) -> RequestConfig:
        credentials = self._require_credentials()
        return RequestConfig(
            base_url=self.base_url,
            dev_key=credentials.dev_key,
            session_id=self._session.session_id if self._session is not None else None,
        )

    async def login(self, credentials: Optional[Credentials] = None) -> SessionInfo:
        resolved = credentials or self._credentials
        if resolved is None:
            raise ConfigurationError(
                "No Bill.com credentials configured. Pass Credentials to BillClient or login()."
            )
        payload = await self._send(
            RequestConfig(base_url=self.base_url, dev_key=resolved.dev_key),
            "POST",
            LOGIN_PATH,
            resolved.login_payload(),
        )
        self.logger.debug("bill_login_response", extra={"payload": logging_utils.mask_payload(payload)})
        if not isinstance(payload, dict):
            raise AuthenticationError("Login response did not contain a session", payload)
        try:
            response = LoginResponse.model_validate(payload)
        except ValueError as exc:
            raise AuthenticationError("Login response did not contain a session", payload) from exc

        if credentials is not None:
            self._credentials = credentials
        self._session = SessionInfo(
            session_id=response.session_id,
            organization_id=response.organization_id,
            user_id=response.user_id,
            api_end_point=response.api_end_point,
        )
        logging_utils.set_request_context(organization_id=response.organization_id)
        self.logger.info(
            "bill_session_started",
            extra={
                "organization_id": response.organization_id,
                "user_id": response.user_id,
                "session": logging_utils.mask_secret(response.session_id),
                "environment": self.environment,
            },
        )
        return self._session

    async def logout(self) -> None:
        if self._session is None:
            return
        config = self.get_request_config()
        try:
            await self._send(config, "POST", LOGOUT_PATH, None)
        except ApiError as exc:
            self.logger.warning(
                "bill_logout_failed",
                extra={"status": exc.http_status, "error_kind": type(exc).__name__},
            )
        finally:
            self._session = None
            self.logger.info("bill_session_closed", extra={"environment": self.environment})

    async def ensure_logged_in(self) -> None:
        if self._session is not None:
            return
        if not self.auto_login:
            raise AuthenticationError("Not logged in. Call login() first or enable auto_login.")
        if self._credentials is None:
            raise AuthenticationError("Not logged in and no credentials are available for auto-login.")
        await self.login()

    async def with_auto_retry(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Run ``operation`` once logged in, renewing the session at most once on expiry."""
        await self.ensure_logged_in()
        attempts = 2 if self.auto_login else 1
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(attempts),
            retry=retry_if_exception_type(SessionExpiredError),
            wait=wait_none(),
            reraise=True,
        ):
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    self.logger.info("bill_session_expired_relogin", extra={"environment": self.environment})
                    await self.login()
                return await operation()

    def _require_credentials(self) -> Credentials:
        if self._credentials is None:
            raise ConfigurationError(
                "No Bill.com credentials configured. Pass Credentials to BillClient or login()."
            )
        return self._credentials

    async def _execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        self._require_credentials()
        return await self.with_auto_retry(operation)

    async def _send(self, config: RequestConfig, method: HttpMethod, path: str, body: Any) -> Any:
        return await send_request(
            config,
            method,
            path,
            body,
            client=self._http_client,
            settings=self.settings,
        )

    def _resource(self, key: str) -> Resource[Any]:
        return Resource(RESOURCES[key], self.get_request_config, self._execute, self._send)

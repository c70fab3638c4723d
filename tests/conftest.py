from __future__ import annotations

import os
from typing import Any, Callable, Optional

import httpx
import pytest

from billcom.core.config import Settings, get_settings
from billcom.schemas.common import Credentials
from billcom.services.client import BillClient


SANDBOX_URL = "https://gateway.stage.bill.com/connect"


def api_path(request: httpx.Request) -> str:
    return request.url.path.removeprefix("/connect")


class FakeBillApi:
    """In-memory stand-in for the provider, served through ``httpx.MockTransport``.

    Routes are keyed by ``(method, path)`` without the query string. Queued
    responses are consumed in order and the last one keeps answering. Login and
    logout answer by default so tests only register what they care about.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.sessions_issued = 0
        self._routes: dict[tuple[str, str], list[tuple[int, Any, Optional[str]]]] = {}

    def route(
        self,
        method: str,
        path: str,
        status: int = 200,
        json_body: Any = None,
        text: Optional[str] = None,
    ) -> None:
        self._routes.setdefault((method, path), []).append((status, json_body, text))

    def calls(self, method: Optional[str] = None, path: Optional[str] = None) -> list[httpx.Request]:
        return [
            request
            for request in self.requests
            if (method is None or request.method == method)
            and (path is None or api_path(request) == path)
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, api_path(request))
        queued = self._routes.get(key)
        if queued:
            status, json_body, text = queued.pop(0) if len(queued) > 1 else queued[0]
            if text is not None:
                return httpx.Response(status, text=text)
            if json_body is None:
                return httpx.Response(status)
            return httpx.Response(status, json=json_body)
        if key == ("POST", "/v3/login"):
            self.sessions_issued += 1
            return httpx.Response(
                200,
                json={
                    "sessionId": f"session-{self.sessions_issued}",
                    "organizationId": "org-1",
                    "userId": "user-1",
                    "apiEndPoint": SANDBOX_URL,
                },
            )
        if key == ("POST", "/v3/logout"):
            return httpx.Response(200)
        return httpx.Response(404, json=[{"message": f"No route for {key[0]} {key[1]}"}])


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("BILL_"):
            monkeypatch.delenv(name)
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(
        username="ap@example.com",
        password="s3cret-password",
        organization_id="org-1",
        dev_key="dev-key-123",
    )


@pytest.fixture
def api() -> FakeBillApi:
    return FakeBillApi()


@pytest.fixture
def http_client(api: FakeBillApi) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(api.handler))


@pytest.fixture
def make_client(
    credentials: Credentials,
    settings: Settings,
    http_client: httpx.AsyncClient,
) -> Callable[..., BillClient]:
    def _make(**kwargs: Any) -> BillClient:
        kwargs.setdefault("settings", settings)
        kwargs.setdefault("http_client", http_client)
        creds = kwargs.pop("credentials", credentials)
        return BillClient(creds, **kwargs)

    return _make


@pytest.fixture
def client(make_client: Callable[..., BillClient]) -> BillClient:
    return make_client()

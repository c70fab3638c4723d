import json

import pytest

from billcom.core.config import Settings
from billcom.core.errors import (
    ApiError,
    AuthenticationError,
    ConfigurationError,
    NotFoundError,
    SessionExpiredError,
)
from billcom.services.client import BillClient


SANDBOX_URL = "https://gateway.stage.bill.com/connect"
PRODUCTION_URL = "https://gateway.bill.com/connect"


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_posts_credentials(self, api, client):
        session = await client.login()

        assert session.session_id == "session-1"
        assert session.organization_id == "org-1"
        assert session.user_id == "user-1"
        request = api.calls("POST", "/v3/login")[0]
        assert str(request.url) == f"{SANDBOX_URL}/v3/login"
        assert request.headers["devKey"] == "dev-key-123"
        assert "sessionId" not in request.headers
        assert json.loads(request.content) == {
            "username": "ap@example.com",
            "password": "s3cret-password",
            "organizationId": "org-1",
            "devKey": "dev-key-123",
        }

    @pytest.mark.asyncio
    async def test_second_login_replaces_session(self, api, client):
        first = await client.login()
        second = await client.login()

        assert first.session_id != second.session_id
        assert client.is_logged_in()
        assert client.get_session().session_id == "session-2"
        assert len(api.calls("POST", "/v3/login")) == 2

    @pytest.mark.asyncio
    async def test_login_without_credentials(self, api, make_client):
        client = make_client(credentials=None)

        with pytest.raises(ConfigurationError):
            await client.login()
        assert api.requests == []

    @pytest.mark.asyncio
    async def test_deferred_credentials_are_stored(self, api, make_client, credentials):
        client = make_client(credentials=None)
        assert not client.has_credentials

        await client.login(credentials)

        assert client.has_credentials
        assert client.get_request_config().session_id == "session-1"

    @pytest.mark.asyncio
    async def test_rejected_login(self, api, client):
        api.route("POST", "/v3/login", 401, [{"code": "BDC_1102", "message": "Invalid username or password"}])

        with pytest.raises(AuthenticationError):
            await client.login()
        assert not client.is_logged_in()

    @pytest.mark.asyncio
    async def test_login_response_without_session(self, api, client):
        api.route("POST", "/v3/login", json_body={"unexpected": True})

        with pytest.raises(AuthenticationError):
            await client.login()
        assert not client.is_logged_in()

    @pytest.mark.asyncio
    async def test_get_session_returns_copy(self, client):
        await client.login()

        session = client.get_session()

        assert session == client.get_session()
        assert session is not client.get_session()


class TestLogout:
    @pytest.mark.asyncio
    async def test_logout_when_never_logged_in(self, api, client):
        await client.logout()

        assert api.requests == []
        assert client.get_session() is None

    @pytest.mark.asyncio
    async def test_logout_sends_session_and_clears(self, api, client):
        await client.login()
        await client.logout()

        request = api.calls("POST", "/v3/logout")[0]
        assert request.headers["sessionId"] == "session-1"
        assert not client.is_logged_in()

    @pytest.mark.asyncio
    async def test_logout_clears_even_when_request_fails(self, api, client):
        api.route("POST", "/v3/logout", 500, {"message": "boom"})
        await client.login()

        await client.logout()

        assert not client.is_logged_in()

    @pytest.mark.asyncio
    async def test_context_manager_logs_out(self, api, make_client):
        async with make_client() as client:
            await client.login()
            assert client.is_logged_in()

        assert not client.is_logged_in()
        assert len(api.calls("POST", "/v3/logout")) == 1


class TestEnsureLoggedIn:
    @pytest.mark.asyncio
    async def test_logs_in_once(self, api, client):
        await client.ensure_logged_in()
        await client.ensure_logged_in()

        assert api.sessions_issued == 1

    @pytest.mark.asyncio
    async def test_auto_login_disabled(self, api, make_client):
        client = make_client(auto_login=False)

        with pytest.raises(AuthenticationError):
            await client.ensure_logged_in()
        assert api.requests == []

    @pytest.mark.asyncio
    async def test_no_credentials(self, api, make_client):
        client = make_client(credentials=None)

        with pytest.raises(AuthenticationError):
            await client.ensure_logged_in()

    @pytest.mark.asyncio
    async def test_resource_call_without_credentials(self, api, make_client):
        client = make_client(credentials=None)

        with pytest.raises(ConfigurationError):
            await client.vendors.get("v1")
        with pytest.raises(ConfigurationError):
            await client.bills.list()
        assert api.requests == []

    @pytest.mark.asyncio
    async def test_resource_call_with_auto_login_disabled(self, api, make_client):
        client = make_client(auto_login=False)

        with pytest.raises(AuthenticationError):
            await client.vendors.get("v1")
        assert api.requests == []


class TestWithAutoRetry:
    @pytest.mark.asyncio
    async def test_expiry_once_then_success(self, api, client):
        invocations = []

        async def operation():
            invocations.append(client.get_request_config().session_id)
            if len(invocations) == 1:
                raise SessionExpiredError()
            return "done"

        result = await client.with_auto_retry(operation)

        assert result == "done"
        assert invocations == ["session-1", "session-2"]
        assert api.sessions_issued == 2

    @pytest.mark.asyncio
    async def test_second_expiry_propagates(self, api, client):
        invocations = 0

        async def operation():
            nonlocal invocations
            invocations += 1
            raise SessionExpiredError()

        with pytest.raises(SessionExpiredError):
            await client.with_auto_retry(operation)

        assert invocations == 2
        assert api.sessions_issued == 2

    @pytest.mark.asyncio
    async def test_other_errors_are_not_retried(self, api, client):
        invocations = 0

        async def operation():
            nonlocal invocations
            invocations += 1
            raise NotFoundError("Bill not found")

        with pytest.raises(NotFoundError):
            await client.with_auto_retry(operation)

        assert invocations == 1
        assert api.sessions_issued == 1

    @pytest.mark.asyncio
    async def test_no_retry_when_auto_login_disabled(self, api, make_client):
        client = make_client(auto_login=False)
        await client.login()
        invocations = 0

        async def operation():
            nonlocal invocations
            invocations += 1
            raise SessionExpiredError()

        with pytest.raises(SessionExpiredError):
            await client.with_auto_retry(operation)

        assert invocations == 1
        assert api.sessions_issued == 1

    @pytest.mark.asyncio
    async def test_renewed_session_is_seen_by_every_resource(self, api, client):
        api.route("GET", "/v3/vendors/v1", 401, [{"message": "Session has expired. Please login again."}])
        api.route("GET", "/v3/vendors/v1", json_body={"id": "v1"})
        api.route("GET", "/v3/bills/b1", json_body={"id": "b1"})

        vendor = await client.vendors.get("v1")
        bill = await client.bills.get("b1")

        assert vendor == {"id": "v1"}
        assert bill == {"id": "b1"}
        sent = [(r.method, r.url.path, r.headers.get("sessionId")) for r in api.requests]
        assert sent == [
            ("POST", "/connect/v3/login", None),
            ("GET", "/connect/v3/vendors/v1", "session-1"),
            ("POST", "/connect/v3/login", None),
            ("GET", "/connect/v3/vendors/v1", "session-2"),
            ("GET", "/connect/v3/bills/b1", "session-2"),
        ]

    @pytest.mark.asyncio
    async def test_transport_failure_is_api_error(self, api, client):
        api.route("GET", "/v3/payments/p1", 503, text="Service Unavailable")

        with pytest.raises(ApiError) as excinfo:
            await client.payments.get("p1")

        assert excinfo.value.http_status == 503
        assert excinfo.value.message == "Service Unavailable"


class TestConstruction:
    def test_sandbox_is_default(self, client):
        assert client.environment == "sandbox"
        assert client.base_url == SANDBOX_URL

    def test_environment_from_argument(self, make_client):
        client = make_client(environment="production")
        assert client.base_url == PRODUCTION_URL

    def test_environment_from_credentials(self, make_client, credentials):
        client = make_client(credentials=credentials.model_copy(update={"environment": "production"}))
        assert client.base_url == PRODUCTION_URL

    def test_request_config_before_login(self, client):
        config = client.get_request_config()
        assert config.base_url == SANDBOX_URL
        assert config.dev_key == "dev-key-123"
        assert config.session_id is None

    def test_from_settings(self):
        settings = Settings(
            _env_file=None,
            username="ap@example.com",
            password="pw",
            organization_id="org-9",
            dev_key="dev",
            environment="prod",
            auto_login=False,
        )

        client = BillClient.from_settings(settings)

        assert client.has_credentials
        assert client.environment == "production"
        assert client.base_url == PRODUCTION_URL
        assert client.auto_login is False

    def test_from_settings_without_credentials(self):
        client = BillClient.from_settings(Settings(_env_file=None))
        assert not client.has_credentials
        with pytest.raises(ConfigurationError):
            client.get_request_config()

import logging

import httpx
import pytest

from billcom.core import logging as logging_utils
from billcom.core.http import send_request
from billcom.schemas.common import RequestConfig


def test_mask_secret():
    assert logging_utils.mask_secret("abcdef123456") == "abcd***"
    assert logging_utils.mask_secret("abc") == "***"
    assert logging_utils.mask_secret(None) == "[redacted]"


def test_sanitize_payload_redacts_nested_secrets():
    payload = {
        "username": "ap@example.com",
        "password": "pw",
        "devKey": "dev",
        "vendors": [{"name": "Acme", "bankAccount": {"accountNumber": "123456789"}}],
    }

    sanitized = logging_utils.sanitize_payload(payload)

    assert sanitized["username"] == "ap@example.com"
    assert sanitized["password"] == "***redacted***"
    assert sanitized["devKey"] == "***redacted***"
    assert sanitized["vendors"][0]["bankAccount"]["accountNumber"] == "***redacted***"
    assert payload["password"] == "pw"


def test_request_context_filter():
    record = logging.LogRecord("billcom.http", logging.INFO, __file__, 1, "event", None, None)
    logging_utils.set_request_context(request_id="req-1", organization_id="org-1")
    try:
        logging_utils.RequestContextFilter().filter(record)
    finally:
        logging_utils.clear_request_context()

    assert record.request_id == "req-1"
    assert record.organization_id == "org-1"
    assert logging_utils.request_id_ctx.get() is None


@pytest.mark.asyncio
async def test_transport_logs_completion_without_secrets(caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"sessionId": "live-session"})

    config = RequestConfig(base_url="https://gateway.stage.bill.com/connect", dev_key="dev-secret")
    caplog.set_level(logging.DEBUG, logger="billcom.http")
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        await send_request(config, "POST", "/v3/login", {"username": "u", "password": "pw"}, client=client)

    completed = [r for r in caplog.records if r.getMessage() == "bill_request_completed"]
    assert len(completed) == 1
    assert completed[0].status == 200
    assert completed[0].path == "/v3/login"
    payload_records = [r for r in caplog.records if r.getMessage() == "bill_request_payload"]
    assert payload_records[0].payload == {"username": "u", "password": "***redacted***"}
    assert "dev-secret" not in caplog.text


def test_mask_payload_keeps_secret_prefix():
    payload = {"sessionId": "abcdef-session", "userId": "u1", "items": [{"devKey": None}]}

    masked = logging_utils.mask_payload(payload)

    assert masked == {"sessionId": "abcd***", "userId": "u1", "items": [{"devKey": None}]}


@pytest.mark.asyncio
async def test_login_logs_masked_session(caplog, client):
    caplog.set_level(logging.DEBUG, logger="billcom.client")

    await client.login()

    records = [r for r in caplog.records if r.getMessage() == "bill_login_response"]
    assert records[0].payload["sessionId"] == "sess***"
    assert records[0].payload["userId"] == "user-1"

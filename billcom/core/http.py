from __future__ import annotations

import json
import logging
from time import perf_counter
from typing import Any, Literal, Optional
from uuid import uuid4

import httpx

from billcom.core import logging as logging_utils
from billcom.core.config import Settings, get_settings
from billcom.core.errors import ApiError, classify_error_array
from billcom.schemas.common import RequestConfig


HttpMethod = Literal["GET", "POST", "PATCH", "PUT", "DELETE"]

logger = logging.getLogger("billcom.http")


def get_async_client(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    settings = settings or get_settings()
    timeout = httpx.Timeout(settings.http_timeout_seconds)
    return httpx.AsyncClient(timeout=timeout, transport=transport)


def build_headers(config: RequestConfig) -> dict[str, str]:
    headers = {
        "Content-Type": "application/json",
        "devKey": config.dev_key,
    }
    if config.session_id:
        headers["sessionId"] = config.session_id
    return headers


def parse_response(response: httpx.Response) -> Any:
    """Decode a provider response, raising the matching error kind on failure."""
    text = response.text
    if not text:
        return None

    try:
        payload = json.loads(text)
    except ValueError:
        if not response.is_success:
            raise ApiError(text or "API request failed", response.status_code, 1, text)
        return None

    if isinstance(payload, list) and not response.is_success:
        first = payload[0] if payload else None
        message = first.get("message") if isinstance(first, dict) else None
        raise classify_error_array(str(message or "Unknown API error"), response.status_code, payload)

    if not response.is_success:
        message = None
        if isinstance(payload, dict):
            message = payload.get("message") or payload.get("error")
        raise ApiError(str(message or "API request failed"), response.status_code, 1, payload)

    return payload


async def send_request(
    config: RequestConfig,
    method: HttpMethod,
    path: str,
    body: Any = None,
    *,
    client: Optional[httpx.AsyncClient] = None,
    settings: Settings | None = None,
) -> Any:
    url = f"{config.base_url}{path}"
    content = json.dumps(body).encode("utf-8") if body is not None else None
    request_id = str(uuid4())
    logging_utils.set_request_context(request_id=request_id)
    if body is not None:
        logger.debug(
            "bill_request_payload",
            extra={"method": method, "path": path, "payload": logging_utils.sanitize_payload(body)},
        )
    start = perf_counter()
    status_code: Optional[int] = None
    try:
        if client is None:
            async with get_async_client(settings) as owned_client:
                response = await owned_client.request(
                    method, url, headers=build_headers(config), content=content
                )
        else:
            response = await client.request(method, url, headers=build_headers(config), content=content)
        status_code = response.status_code
        return parse_response(response)
    except httpx.HTTPError as exc:
        logger.error(
            "bill_transport_error",
            extra={"method": method, "path": path, "error": type(exc).__name__},
        )
        raise ApiError(f"Request to {path} failed: {exc}", None, None) from exc
    except ApiError as exc:
        logger.warning(
            "bill_request_failed",
            extra={
                "method": method,
                "path": path,
                "status": exc.http_status,
                "error_kind": type(exc).__name__,
            },
        )
        raise
    finally:
        logger.info(
            "bill_request_completed",
            extra={
                "method": method,
                "path": path,
                "status": status_code,
                "duration_ms": round((perf_counter() - start) * 1000, 2),
            },
        )
        logging_utils.clear_request_context()

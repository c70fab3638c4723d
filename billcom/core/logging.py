from __future__ import annotations

import logging
import logging.config
from contextvars import ContextVar
from typing import Any, Callable, Optional

from pythonjsonlogger import jsonlogger


request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
organization_id_ctx: ContextVar[Optional[str]] = ContextVar("organization_id", default=None)


class RequestContextFilter(logging.Filter):
    """Injects request scoped context variables into each log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get()
        record.organization_id = organization_id_ctx.get()
        return True


def configure_logging(level: int = logging.INFO) -> None:
    """Configure JSON structured logging for command line entry points."""
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "request_context": {
                    "()": RequestContextFilter,
                }
            },
            "formatters": {
                "json": {
                    "()": jsonlogger.JsonFormatter,
                    "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
                }
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "level": level,
                    "formatter": "json",
                    "filters": ["request_context"],
                }
            },
            "loggers": {
                "billcom": {
                    "handlers": ["default"],
                    "level": level,
                    "propagate": False,
                }
            },
        }
    )


def set_request_context(
    request_id: Optional[str] = None,
    organization_id: Optional[str] = None,
) -> None:
    if request_id is not None:
        request_id_ctx.set(request_id)
    if organization_id is not None:
        organization_id_ctx.set(organization_id)


def clear_request_context() -> None:
    request_id_ctx.set(None)


SENSITIVE_KEYS = frozenset(
    {
        "password",
        "devkey",
        "dev_key",
        "sessionid",
        "session_id",
        "accountnumber",
        "routingnumber",
        "cardnumber",
    }
)


def mask_secret(value: Optional[str], visible: int = 4) -> str:
    text = (value or "").strip()
    if not text:
        return "[redacted]"
    if len(text) <= visible:
        return "*" * len(text)
    return text[:visible] + "***"


def _redact_value(value: Any) -> str:
    return "" if value is None else "***redacted***"


def _mask_value(value: Any) -> Optional[str]:
    return None if value is None else mask_secret(str(value))


def _walk_secrets(value: Any, replace: Callable[[Any], Any]) -> Any:
    if isinstance(value, dict):
        return {
            key: replace(item) if str(key).lower() in SENSITIVE_KEYS else _walk_secrets(item, replace)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_walk_secrets(item, replace) for item in value]
    return value


def sanitize_payload(payload: Any) -> Any:
    """Remove credentials and session tokens while keeping business fields."""
    return _walk_secrets(payload, _redact_value)


def mask_payload(payload: Any) -> Any:
    """Like :func:`sanitize_payload`, but keeps a short prefix of each secret."""
    return _walk_secrets(payload, _mask_value)

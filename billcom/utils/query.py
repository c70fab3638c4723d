"""Serialization of list parameters into the provider's query-string dialect.

Filters render as ``field:op:value`` and are comma-joined in caller order::

    status:in:"OPEN,PAID",dueDate:gte:"2024-01-01",amount:eq:42

Sort keys render as ``field:order`` and are likewise comma-joined in order.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Mapping, Union
from urllib.parse import parse_qsl, urlencode

from pydantic import ValidationError as PydanticValidationError

from billcom.core.errors import ValidationError
from billcom.schemas.common import ArrayFilter, ListParams, ScalarFilter, ScalarValue, SortSpec
from billcom.utils.validators import validate_max_results


_ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}(T\d{2}:\d{2}:\d{2})?")

ListParamsInput = Union[ListParams, Mapping[str, Any], None]


def coerce_list_params(params: ListParamsInput) -> ListParams:
    """Validate caller input into ``ListParams`` without touching the network."""
    if params is None:
        return ListParams()
    if isinstance(params, ListParams):
        validate_max_results(params.max)
        return params
    try:
        return ListParams.model_validate(dict(params))
    except PydanticValidationError as exc:
        raise ValidationError.local("Invalid list parameters", exc.errors()) from exc


def _is_date_like(value: ScalarValue) -> bool:
    if isinstance(value, (date, datetime)):
        return True
    return isinstance(value, str) and _ISO_DATE_PATTERN.match(value) is not None


def _format_scalar(value: ScalarValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def format_filter(item: Union[ArrayFilter, ScalarFilter]) -> str:
    if isinstance(item, ArrayFilter):
        return f'{item.field}:{item.op}:"{",".join(item.value)}"'
    rendered = _format_scalar(item.value)
    if (item.op == "sw" and isinstance(item.value, str)) or _is_date_like(item.value):
        return f'{item.field}:{item.op}:"{rendered}"'
    return f"{item.field}:{item.op}:{rendered}"


def format_sort(items: list[SortSpec]) -> str:
    return ",".join(f"{item.field}:{item.order}" for item in items)


def build_query(params: ListParamsInput) -> str:
    """Return the encoded query string (without ``?``) for ``params``."""
    resolved = coerce_list_params(params)
    pairs: list[tuple[str, str]] = []
    if resolved.max is not None:
        pairs.append(("max", str(resolved.max)))
    if resolved.page:
        pairs.append(("page", resolved.page))
    if resolved.sort:
        pairs.append(("sort", format_sort(resolved.sort)))
    if resolved.filters:
        pairs.append(("filters", ",".join(format_filter(item) for item in resolved.filters)))
    return urlencode(pairs)


def build_path(endpoint: str, params: ListParamsInput) -> str:
    query = build_query(params)
    return f"{endpoint}?{query}" if query else endpoint


def _split_outside_quotes(raw: str) -> list[str]:
    parts: list[str] = []
    current: list[str] = []
    quoted = False
    for char in raw:
        if char == '"':
            quoted = not quoted
        if char == "," and not quoted:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    if current or parts:
        parts.append("".join(current))
    return [part for part in parts if part]


def _parse_scalar(raw: str) -> ScalarValue:
    if raw == "true":
        return True
    if raw == "false":
        return False
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        return raw


def parse_filter(raw: str) -> Union[ArrayFilter, ScalarFilter]:
    try:
        field, op, value = raw.split(":", 2)
    except ValueError as exc:
        raise ValidationError.local(f"Malformed filter expression: {raw!r}") from exc
    quoted = len(value) >= 2 and value.startswith('"') and value.endswith('"')
    if quoted:
        value = value[1:-1]
    if op in ("in", "nin"):
        return ArrayFilter(field=field, op=op, value=value.split(",") if value else [])
    parsed: ScalarValue = value if quoted else _parse_scalar(value)
    try:
        return ScalarFilter(field=field, op=op, value=parsed)
    except PydanticValidationError as exc:
        raise ValidationError.local(f"Unsupported filter expression: {raw!r}", exc.errors()) from exc


def parse_query(query: str) -> ListParams:
    """Parse a query string produced by :func:`build_query`.

    Filter and sort order are preserved. Unquoted scalar values are re-typed
    (``name:eq:123`` comes back as the int ``123``), and an unquoted string
    containing a comma cannot be told apart from two filters.
    """
    values: dict[str, str] = dict(parse_qsl(query.lstrip("?")))
    sort = []
    for part in _split_outside_quotes(values.get("sort", "")):
        field, _, order = part.partition(":")
        sort.append(SortSpec(field=field, order=order or "asc"))
    filters = [parse_filter(part) for part in _split_outside_quotes(values.get("filters", ""))]
    return coerce_list_params(
        {
            "max": values.get("max"),
            "page": values.get("page"),
            "filters": [item.model_dump() for item in filters],
            "sort": [item.model_dump() for item in sort],
        }
    )

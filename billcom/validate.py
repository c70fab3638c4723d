"""Check entity models against live Bill.com data.

Lists a handful of records per entity, validates each one against its model and
reports fields the API returns that the models do not declare. Credentials come
from ``BILL_*`` environment variables or a ``.env`` file.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, get_origin

from pydantic import BaseModel, ValidationError as PydanticValidationError

from billcom.core import logging as logging_utils
from billcom.core.config import Settings, get_settings
from billcom.core.errors import ApiError
from billcom.services.client import BillClient
from billcom.services.resources import RESOURCES, Resource


REQUIRED_ENV_VARS = ("BILL_USERNAME", "BILL_PASSWORD", "BILL_ORGANIZATION_ID", "BILL_DEV_KEY")
SAMPLE_SIZE = 10
MAX_REPORTED_ERRORS = 5

logger = logging.getLogger("billcom.validate")


@dataclass
class RecordIssue:
    record_id: str
    issues: list[str]


@dataclass
class ValidationResult:
    entity: str
    success: bool = True
    total_records: int = 0
    valid_records: int = 0
    errors: list[RecordIssue] = field(default_factory=list)
    extra_fields: set[str] = field(default_factory=set)


def _unwrap_model(annotation: Any) -> Optional[type[BaseModel]]:
    if get_origin(annotation) is None and isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    for arg in getattr(annotation, "__args__", ()) or ():
        found = _unwrap_model(arg)
        if found is not None:
            return found
    return None


def find_extra_fields(data: Any, model: type[BaseModel], prefix: str = "") -> list[str]:
    """Return dotted paths of keys in ``data`` that ``model`` does not declare."""
    if not isinstance(data, dict):
        return []
    known = {
        (info.alias or name): info
        for name, info in model.model_fields.items()
    }
    extra: list[str] = []
    for key, value in data.items():
        path = f"{prefix}.{key}" if prefix else key
        info = known.get(key)
        if info is None:
            extra.append(path)
            continue
        if not isinstance(value, dict):
            continue
        nested = _unwrap_model(info.annotation)
        if nested is not None:
            extra.extend(find_extra_fields(value, nested, path))
    return extra


def _format_issues(exc: PydanticValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]


async def validate_entity(resource: Resource[Any], sample_size: int = SAMPLE_SIZE) -> ValidationResult:
    result = ValidationResult(entity=resource.definition.name)
    try:
        page = await resource.list({"max": sample_size})
    except ApiError as exc:
        result.success = False
        logger.error(
            "entity_fetch_failed",
            extra={"entity": result.entity, "status": exc.http_status, "error": exc.message},
        )
        return result

    result.total_records = len(page.results)
    for record in page.results:
        record_id = str(record.get("id", "unknown"))
        result.extra_fields.update(find_extra_fields(record, resource.definition.model))
        try:
            resource.parse(record)
        except PydanticValidationError as exc:
            result.success = False
            result.errors.append(RecordIssue(record_id=record_id, issues=_format_issues(exc)))
        else:
            result.valid_records += 1
    return result


def format_result(result: ValidationResult) -> list[str]:
    status = "PASS" if result.success else "FAIL"
    lines = [f"[{status}] {result.entity}: {result.valid_records}/{result.total_records} valid"]
    if result.total_records == 0 and result.success:
        lines.append("  no records found to validate")
    if result.extra_fields:
        lines.append("  extra fields returned by the API:")
        lines.extend(f"    - {name}" for name in sorted(result.extra_fields))
    for issue in result.errors[:MAX_REPORTED_ERRORS]:
        lines.append(f"  record {issue.record_id}:")
        lines.extend(f"    - {message}" for message in issue.issues)
    if len(result.errors) > MAX_REPORTED_ERRORS:
        lines.append(f"  ... and {len(result.errors) - MAX_REPORTED_ERRORS} more records with errors")
    return lines


def missing_settings(settings: Settings) -> list[str]:
    values = {
        "BILL_USERNAME": settings.username,
        "BILL_PASSWORD": settings.password,
        "BILL_ORGANIZATION_ID": settings.organization_id,
        "BILL_DEV_KEY": settings.dev_key,
    }
    return [name for name in REQUIRED_ENV_VARS if not values[name]]


async def validate_all(client: BillClient, entities: Sequence[str] | None = None) -> list[ValidationResult]:
    names = entities or tuple(RESOURCES)
    results = []
    for name in names:
        results.append(await validate_entity(getattr(client, name)))
    return results


async def _main(settings: Settings) -> int:
    async with BillClient.from_settings(settings) as client:
        await client.login()
        results = await validate_all(client)

    for result in results:
        print("\n".join(format_result(result)))

    passed = sum(1 for r in results if r.success and not r.extra_fields)
    warnings = sum(1 for r in results if r.success and r.extra_fields)
    failed = sum(1 for r in results if not r.success)
    print(f"\npassed: {passed}  warnings: {warnings}  failed: {failed}")
    return 1 if failed else 0


def run() -> None:
    logging_utils.configure_logging(logging.WARNING)
    settings = get_settings()
    missing = missing_settings(settings)
    if missing:
        print("Missing required environment variables: " + ", ".join(missing), file=sys.stderr)
        sys.exit(1)
    sys.exit(asyncio.run(_main(settings)))


if __name__ == "__main__":
    run()

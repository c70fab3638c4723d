from __future__ import annotations

from typing import Optional, cast

from billcom.core.config import Environment
from billcom.core.errors import ValidationError


_ENVIRONMENT_ALIASES = {
    "sandbox": "sandbox",
    "stage": "sandbox",
    "production": "production",
    "prod": "production",
}

MAX_RESULTS_LIMIT = 100


def resolve_environment(value: Optional[str], default_env: Environment) -> Environment:
    if value is None:
        return default_env
    resolved = _ENVIRONMENT_ALIASES.get(value.strip().lower())
    if resolved is None:
        raise ValueError(f"Invalid environment value: {value!r}")
    return cast(Environment, resolved)


def validate_max_results(value: Optional[int], *, limit: int = MAX_RESULTS_LIMIT) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError.local("max must be an integer")
    if value < 1:
        raise ValidationError.local("max must be >= 1")
    if value > limit:
        raise ValidationError.local(f"max cannot exceed {limit}")
    return value

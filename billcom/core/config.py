from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from billcom.schemas.common import Credentials


Environment = Literal["sandbox", "production"]

BASE_URLS: dict[str, str] = {
    "sandbox": "https://gateway.stage.bill.com/connect",
    "production": "https://gateway.bill.com/connect",
}

LOGIN_PATH = "/v3/login"
LOGOUT_PATH = "/v3/logout"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BILL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    username: Optional[str] = None
    password: Optional[str] = None
    organization_id: Optional[str] = None
    dev_key: Optional[str] = None
    environment: Environment = "sandbox"
    auto_login: bool = True

    http_timeout_seconds: float = Field(default=30.0, gt=0)

    @field_validator("environment", mode="before")
    @classmethod
    def normalize_environment(cls, value: object) -> object:
        from billcom.utils.validators import resolve_environment

        if isinstance(value, str):
            return resolve_environment(value, "sandbox")
        return value

    def credentials(self) -> Optional["Credentials"]:
        from billcom.schemas.common import Credentials

        if not (self.username and self.password and self.organization_id and self.dev_key):
            return None
        return Credentials(
            username=self.username,
            password=self.password,
            organization_id=self.organization_id,
            dev_key=self.dev_key,
            environment=self.environment,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

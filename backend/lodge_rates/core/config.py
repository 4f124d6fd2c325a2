from __future__ import annotations

import json
import re
from functools import lru_cache
from typing import Literal

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_RATES_API_URL = "https://dev.gondwana-collection.com/Web-Store/Rates/Rates.php"
DEFAULT_UNIT_TYPE_ID = -2147483637
DEFAULT_UNIT_TYPE_IDS: dict[str, int] = {
    "Standard Room": -2147483637,
    "Deluxe Suite": -2147483456,
}


ANY_ORIGIN: tuple[str, ...] = ("*",)


def parse_allowed_origins(raw: str | None) -> tuple[str, ...]:
    """Reads ALLOWED_ORIGINS: a JSON string or array, or a comma/space separated list.

    Anything empty or unrecognised means any origin.
    """

    text = (raw or "").strip()
    if not text or text == "*":
        return ANY_ORIGIN

    try:
        decoded = json.loads(text)
    except json.JSONDecodeError:
        decoded = re.split(r"[,\s]+", text)

    if isinstance(decoded, str):
        decoded = [decoded]
    if not isinstance(decoded, list):
        return ANY_ORIGIN

    cleaned = (str(item).strip().strip("\"'") for item in decoded)
    return tuple(origin for origin in cleaned if origin) or ANY_ORIGIN


class Settings(BaseSettings):
    """Application settings read from the environment."""

    rates_api_url: AnyHttpUrl = Field(DEFAULT_RATES_API_URL, alias="RATES_API_URL")
    rates_timeout: float = Field(30.0, alias="RATES_TIMEOUT")
    rates_verify_tls: bool = Field(
        False,
        alias="RATES_VERIFY_TLS",
        description="TLS certificate verification towards the rates API. "
        "Off to match the current upstream deployment; turn on for hardened environments.",
    )

    unit_type_ids: dict[str, int] = Field(
        default_factory=lambda: dict(DEFAULT_UNIT_TYPE_IDS), alias="UNIT_TYPE_IDS"
    )
    default_unit_type_id: int = Field(DEFAULT_UNIT_TYPE_ID, alias="DEFAULT_UNIT_TYPE_ID")

    call_log_path: str = Field(
        "logs/api.log",
        alias="CALL_LOG_PATH",
        description="Append-only JSON-lines log of upstream calls; empty disables it",
    )
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    allowed_origins_raw: str = Field("*", alias="ALLOWED_ORIGINS")

    include_trace: bool = Field(
        True,
        alias="INCLUDE_TRACE",
        description="Adds the traceback to 500 responses. Disable when exposed publicly.",
    )

    app_env: Literal["dev", "prod", "test"] = Field("dev", alias="APP_ENV")
    api_prefix: str = "/api"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    @property
    def allowed_origins(self) -> tuple[str, ...]:
        return parse_allowed_origins(self.allowed_origins_raw)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


__all__ = [
    "ANY_ORIGIN",
    "DEFAULT_RATES_API_URL",
    "DEFAULT_UNIT_TYPE_ID",
    "DEFAULT_UNIT_TYPE_IDS",
    "Settings",
    "get_settings",
    "parse_allowed_origins",
]

# This file defines runtime settings for the API layer in one place.
# Each field maps to one environment variable; unset or blank variables keep the field default.
# Pydantic parses the raw strings, so bad numbers or booleans fail at startup.

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

TRUE_VALUES = frozenset({"1", "true", "yes", "y", "on"})
FALSE_VALUES = frozenset({"0", "false", "no", "n", "off"})

ENV_VARS: dict[str, str] = {
    "api_name": "API_NAME",
    "api_version_path": "API_VERSION_PATH",
    "schema_version": "API_SCHEMA_VERSION",
    "host": "API_HOST",
    "port": "API_PORT",
    "environment": "ENV",
    "database_url": "DATABASE_URL",
    "default_page_size": "API_DEFAULT_PAGE_SIZE",
    "max_page_size": "API_MAX_PAGE_SIZE",
    "allowed_origins": "API_ALLOWED_ORIGINS",
    "app_version": "APP_VERSION",
    "auto_create_schema": "API_AUTO_CREATE_SCHEMA",
    "sql_echo": "API_SQL_ECHO",
    "default_loan_days": "LIBRARY_DEFAULT_LOAN_DAYS",
}


class ApiConfig(BaseModel):
    """Typed API runtime configuration."""

    model_config = ConfigDict(extra="ignore")

    api_name: str = "Library Management API"
    api_version_path: str = "/api/v1"
    schema_version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int = 8000
    environment: str = "local"
    database_url: str
    default_page_size: int = Field(default=20, gt=0)
    max_page_size: int = Field(default=100, gt=0)
    allowed_origins: list[str] = Field(default_factory=list)
    app_version: str = "0.1.0"
    auto_create_schema: bool = False
    sql_echo: bool = False
    default_loan_days: int = Field(default=15, gt=0)

    @field_validator("api_version_path")
    @classmethod
    def validate_api_version_path(cls, value: str) -> str:
        segments = [segment for segment in value.split("/") if segment]
        if not value.startswith("/") or len(segments) < 2 or not segments[-1].startswith("v"):
            raise ValueError("api_version_path must look like '/api/v1'.")
        return "/" + "/".join(segments)

    @field_validator("auto_create_schema", "sql_echo", mode="before")
    @classmethod
    def parse_switch(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        lowered = value.strip().lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
        raise ValueError(f"expected one of {sorted(TRUE_VALUES | FALSE_VALUES)}, got {value!r}")

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    def api_version_label(self) -> str:
        return self.api_version_path.rsplit("/", 1)[-1]


def load_api_config(*, load_env: bool = True) -> ApiConfig:
    """Build the config from `.env` and the process environment."""

    if load_env:
        load_dotenv()

    values = {
        field_name: raw.strip()
        for field_name, env_name in ENV_VARS.items()
        if (raw := os.getenv(env_name)) is not None and raw.strip()
    }
    if "database_url" not in values:
        raise RuntimeError("DATABASE_URL is required for API startup.")
    return ApiConfig.model_validate(values)


@lru_cache(maxsize=1)
def get_api_config() -> ApiConfig:
    return load_api_config()

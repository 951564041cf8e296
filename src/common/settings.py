"""
Process-wide settings read from the environment.
Every entry point needs these values before anything else runs; the API layer builds its
richer `ApiConfig` on top of them.
"""

from __future__ import annotations

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError


class Settings(BaseModel):
    """Typed runtime configuration; every field is required."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    PROJECT_NAME: str
    ENV: str
    LOG_LEVEL: str
    DATABASE_URL: str
    API_HOST: str
    API_PORT: int = Field(gt=0, le=65535)

    @property
    def database_backend(self) -> str:
        """Dialect name of `DATABASE_URL`, e.g. `postgresql` or `sqlite`."""

        return self.DATABASE_URL.split(":", 1)[0].split("+", 1)[0]


def load_settings(*, load_env: bool = True) -> Settings:
    if load_env:
        load_dotenv()

    raw = {name: os.getenv(name, "").strip() for name in Settings.model_fields}
    missing = sorted(name for name, value in raw.items() if not value)
    if missing:
        raise RuntimeError(
            f"Missing required environment variables: {', '.join(missing)}. "
            "Set them in the environment or in `.env`."
        )

    try:
        return Settings.model_validate(raw)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()

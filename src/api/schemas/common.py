# This file defines shared schema pieces reused by multiple API endpoints.
# It exists so envelope metadata, pagination, and error payloads stay consistent.
# Shared validators live here too so every entity checks names and e-mails the same way.

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class PaginationMetadata(BaseModel):
    page: int = Field(ge=1)
    page_size: int = Field(ge=1)
    total_count: int = Field(ge=0)
    total_pages: int = Field(ge=0)
    sort: str


class EnvelopeFields(BaseModel):
    api_version: str
    schema_version: str
    request_id: str
    generated_at: datetime
    warnings: list[str] | None = None


class ErrorResponse(BaseModel):
    error_code: str
    message: str
    details: Any | None = None
    request_id: str
    timestamp: datetime


class UnitsRequest(BaseModel):
    """Body for inventory unit movements."""

    units: int = Field(gt=0)


def check_min_length(value: str | None, *, field_name: str, minimum: int = 3) -> str | None:
    if value is None:
        return value
    cleaned = value.strip()
    if len(cleaned) < minimum:
        raise ValueError(f"{field_name} must be at least {minimum} characters long.")
    return cleaned


def lower_email(value: str | None) -> str | None:
    """Store addresses lower-cased so uniqueness checks ignore case."""

    return value.lower() if value is not None else None


ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Rejected by a business rule or the database."},
    404: {"model": ErrorResponse, "description": "The addressed record does not exist."},
    422: {"model": ErrorResponse, "description": "The request failed schema validation."},
}

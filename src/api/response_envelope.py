# This file wraps endpoint data in the envelope every client receives.
# Each payload carries the API label, schema version, request id, and generation time next to `data`.

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from src.api.api_config import ApiConfig


def version_fields(config: ApiConfig) -> dict[str, str]:
    return {"api_version": config.api_version_label(), "schema_version": config.schema_version}


def envelope(
    config: ApiConfig,
    *,
    request_id: str,
    data: Any,
    pagination: dict[str, Any] | None = None,
    warnings: list[str] | None = None,
) -> dict[str, Any]:
    """Wrap `data`; list responses also pass their `pagination` block."""

    payload: dict[str, Any] = {
        **version_fields(config),
        "request_id": request_id,
        "generated_at": datetime.now(tz=UTC),
        "data": data,
        "warnings": warnings,
    }
    if pagination is not None:
        payload["pagination"] = pagination
    return payload

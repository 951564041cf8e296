# This file defines response schemas for the operational endpoints.
# Every operational payload carries the version labels, request id, and a timestamp.

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class OperationalStamp(BaseModel):
    api_version: str
    schema_version: str
    request_id: str
    timestamp: datetime


class HealthResponse(OperationalStamp):
    status: Literal["ok"]
    environment: str
    service_name: str


class ReadinessResponse(OperationalStamp):
    db_connected: bool
    missing_tables: list[str] = Field(default_factory=list)
    ready: bool
    database: Literal["reachable", "unreachable"]


class VersionResponse(OperationalStamp):
    api_version_path: str
    app_version: str
    git_commit: str | None = None
    project: str
    version: str

# This file defines request and response contracts for editorial (publisher) endpoints.

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from src.api.schemas.common import EnvelopeFields, PaginationMetadata, check_min_length
from src.models.enums import RecordStatus


class EditorialCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    description: str | None = None
    status: RecordStatus = RecordStatus.ACTIVE

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str | None) -> str | None:
        return check_min_length(value, field_name="name")


class EditorialUpdate(EditorialCreate):
    name: str | None = None
    status: RecordStatus | None = None


class EditorialRow(BaseModel):
    editorial_id: int
    name: str
    description: str
    status: RecordStatus


class EditorialListResponseV1(EnvelopeFields):
    data: list[EditorialRow]
    pagination: PaginationMetadata


class EditorialResponseV1(EnvelopeFields):
    data: EditorialRow

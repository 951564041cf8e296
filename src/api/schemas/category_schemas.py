# This file defines request and response contracts for category endpoints.
# Categories group books by subject and can be switched between active and inactive.

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from src.api.schemas.common import EnvelopeFields, PaginationMetadata, check_min_length
from src.models.enums import RecordStatus


class CategoryCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    description: str | None = None
    status: RecordStatus = RecordStatus.ACTIVE

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str | None) -> str | None:
        return check_min_length(value, field_name="name")


class CategoryUpdate(CategoryCreate):
    name: str | None = None
    status: RecordStatus | None = None


class CategoryRow(BaseModel):
    category_id: int
    name: str
    description: str
    status: RecordStatus


class CategoryListResponseV1(EnvelopeFields):
    data: list[CategoryRow]
    pagination: PaginationMetadata


class CategoryResponseV1(EnvelopeFields):
    data: CategoryRow

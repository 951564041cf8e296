# This file defines request and response contracts for library user endpoints.
# It exists so identification and e-mail formats are checked before uniqueness is tested in the database.

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, ValidationInfo, field_validator

from src.api.schemas.common import EnvelopeFields, PaginationMetadata, check_min_length, lower_email
from src.models.enums import RecordStatus


class UserCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    first_name: str
    last_name: str
    identification: str
    email: EmailStr
    observations: str | None = None
    status: RecordStatus = RecordStatus.ACTIVE

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_names(cls, value: str | None, info: ValidationInfo) -> str | None:
        return check_min_length(value, field_name=info.field_name)

    @field_validator("identification")
    @classmethod
    def validate_identification(cls, value: str | None) -> str | None:
        return check_min_length(value, field_name="identification", minimum=6)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        return lower_email(value)


class UserUpdate(UserCreate):
    first_name: str | None = None
    last_name: str | None = None
    identification: str | None = None
    email: EmailStr | None = None
    status: RecordStatus | None = None


class UserRow(BaseModel):
    user_id: int
    first_name: str
    last_name: str
    identification: str
    email: str
    observations: str
    status: RecordStatus


class UserListResponseV1(EnvelopeFields):
    data: list[UserRow]
    pagination: PaginationMetadata


class UserResponseV1(EnvelopeFields):
    data: UserRow

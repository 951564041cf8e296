# This file defines library user endpoints under the versioned API path.
# It exists so members can be registered, looked up by identification, and deactivated.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.api.api_config import ApiConfig
from src.api.dependencies import get_config, get_user_service
from src.api.routers.listing import list_response, object_response, resolve_list_query
from src.api.schemas.common import ERROR_RESPONSES
from src.api.schemas.user_schemas import (
    UserCreate,
    UserListResponseV1,
    UserResponseV1,
    UserUpdate,
)
from src.api.services.user_service import DEFAULT_USER_SORT, USER_SORT_FIELD_MAP, UserService
from src.models import RecordStatus

router = APIRouter(prefix="/users", tags=["users"], responses=ERROR_RESPONSES)
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
ConfigDep = Annotated[ApiConfig, Depends(get_config)]


@router.post("", response_model=UserResponseV1, status_code=201)
def create_user(
    request: Request,
    payload: UserCreate,
    service: UserServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(request=request, config=config, data=service.create_user(payload))


@router.get("", response_model=UserListResponseV1)
def list_users(
    request: Request,
    service: UserServiceDep,
    config: ConfigDep,
    status: RecordStatus | None = Query(default=None),
    page: int = Query(default=1),
    page_size: int | None = Query(default=None),
    limit: int | None = Query(default=None),
    sort: str | None = Query(default=None),
) -> dict[str, object]:
    pagination, sort_spec = resolve_list_query(
        config=config,
        page=page,
        page_size=page_size,
        limit=limit,
        sort=sort,
        default_sort=DEFAULT_USER_SORT,
        sort_fields=USER_SORT_FIELD_MAP,
    )
    service_result = service.list_users(
        status=status,
        page=pagination.page,
        page_size=pagination.size,
        sort=sort_spec,
    )
    return list_response(
        request=request,
        config=config,
        pagination=pagination,
        sort_spec=sort_spec,
        service_result=service_result,
    )


@router.get("/identification/{identification}", response_model=UserResponseV1)
def get_user_by_identification(
    request: Request,
    identification: str,
    service: UserServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(
        request=request,
        config=config,
        data=service.get_user_by_identification(identification),
    )


@router.get("/{user_id}", response_model=UserResponseV1)
def get_user(
    request: Request,
    user_id: int,
    service: UserServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(request=request, config=config, data=service.get_user(user_id))


@router.patch("/{user_id}", response_model=UserResponseV1)
def update_user(
    request: Request,
    user_id: int,
    payload: UserUpdate,
    service: UserServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(
        request=request,
        config=config,
        data=service.update_user(user_id, payload),
    )


@router.delete("/{user_id}", response_model=UserResponseV1)
def delete_user(
    request: Request,
    user_id: int,
    service: UserServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(request=request, config=config, data=service.delete_user(user_id))

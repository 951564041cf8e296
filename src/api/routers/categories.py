# This file defines category endpoints under the versioned API path.
# It exists so subject categories can be maintained and filtered by status.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.api.api_config import ApiConfig
from src.api.dependencies import get_category_service, get_config
from src.api.routers.listing import list_response, object_response, resolve_list_query
from src.api.schemas.common import ERROR_RESPONSES
from src.api.schemas.category_schemas import (
    CategoryCreate,
    CategoryListResponseV1,
    CategoryResponseV1,
    CategoryUpdate,
)
from src.api.services.category_service import (
    CATEGORY_SORT_FIELD_MAP,
    DEFAULT_CATEGORY_SORT,
    CategoryService,
)
from src.models import RecordStatus

router = APIRouter(prefix="/categories", tags=["categories"], responses=ERROR_RESPONSES)
CategoryServiceDep = Annotated[CategoryService, Depends(get_category_service)]
ConfigDep = Annotated[ApiConfig, Depends(get_config)]


@router.post("", response_model=CategoryResponseV1, status_code=201)
def create_category(
    request: Request,
    payload: CategoryCreate,
    service: CategoryServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(request=request, config=config, data=service.create_category(payload))


@router.get("", response_model=CategoryListResponseV1)
def list_categories(
    request: Request,
    service: CategoryServiceDep,
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
        default_sort=DEFAULT_CATEGORY_SORT,
        sort_fields=CATEGORY_SORT_FIELD_MAP,
    )
    service_result = service.list_categories(
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


@router.get("/{category_id}", response_model=CategoryResponseV1)
def get_category(
    request: Request,
    category_id: int,
    service: CategoryServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(request=request, config=config, data=service.get_category(category_id))


@router.patch("/{category_id}", response_model=CategoryResponseV1)
def update_category(
    request: Request,
    category_id: int,
    payload: CategoryUpdate,
    service: CategoryServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(
        request=request,
        config=config,
        data=service.update_category(category_id, payload),
    )


@router.delete("/{category_id}", response_model=CategoryResponseV1)
def delete_category(
    request: Request,
    category_id: int,
    service: CategoryServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(
        request=request,
        config=config,
        data=service.delete_category(category_id),
    )

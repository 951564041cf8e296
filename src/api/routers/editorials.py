# This file defines editorial (publisher) endpoints under the versioned API path.
# It exists so publishers can be maintained and filtered by status.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.api.api_config import ApiConfig
from src.api.dependencies import get_editorial_service, get_config
from src.api.routers.listing import list_response, object_response, resolve_list_query
from src.api.schemas.common import ERROR_RESPONSES
from src.api.schemas.editorial_schemas import (
    EditorialCreate,
    EditorialListResponseV1,
    EditorialResponseV1,
    EditorialUpdate,
)
from src.api.services.editorial_service import (
    EDITORIAL_SORT_FIELD_MAP,
    DEFAULT_EDITORIAL_SORT,
    EditorialService,
)
from src.models import RecordStatus

router = APIRouter(prefix="/editorials", tags=["editorials"], responses=ERROR_RESPONSES)
EditorialServiceDep = Annotated[EditorialService, Depends(get_editorial_service)]
ConfigDep = Annotated[ApiConfig, Depends(get_config)]


@router.post("", response_model=EditorialResponseV1, status_code=201)
def create_editorial(
    request: Request,
    payload: EditorialCreate,
    service: EditorialServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(request=request, config=config, data=service.create_editorial(payload))


@router.get("", response_model=EditorialListResponseV1)
def list_editorials(
    request: Request,
    service: EditorialServiceDep,
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
        default_sort=DEFAULT_EDITORIAL_SORT,
        sort_fields=EDITORIAL_SORT_FIELD_MAP,
    )
    service_result = service.list_editorials(
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


@router.get("/{editorial_id}", response_model=EditorialResponseV1)
def get_editorial(
    request: Request,
    editorial_id: int,
    service: EditorialServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(request=request, config=config, data=service.get_editorial(editorial_id))


@router.patch("/{editorial_id}", response_model=EditorialResponseV1)
def update_editorial(
    request: Request,
    editorial_id: int,
    payload: EditorialUpdate,
    service: EditorialServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(
        request=request,
        config=config,
        data=service.update_editorial(editorial_id, payload),
    )


@router.delete("/{editorial_id}", response_model=EditorialResponseV1)
def delete_editorial(
    request: Request,
    editorial_id: int,
    service: EditorialServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(
        request=request,
        config=config,
        data=service.delete_editorial(editorial_id),
    )

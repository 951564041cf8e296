# This file defines inventory endpoints under the versioned API path.
# It exists so stock can be registered per book and moved through purchase, loan, and return.
# Unit movements answer with the updated counters so clients never compute availability themselves.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.api.api_config import ApiConfig
from src.api.dependencies import get_config, get_inventory_service
from src.api.routers.listing import list_response, object_response, resolve_list_query
from src.api.schemas.common import ERROR_RESPONSES, UnitsRequest
from src.api.schemas.inventory_schemas import (
    InventoryCreate,
    InventoryListResponseV1,
    InventoryResponseV1,
)
from src.api.services.inventory_service import (
    DEFAULT_INVENTORY_SORT,
    INVENTORY_SORT_FIELD_MAP,
    InventoryService,
)

router = APIRouter(prefix="/inventories", tags=["inventories"], responses=ERROR_RESPONSES)
InventoryServiceDep = Annotated[InventoryService, Depends(get_inventory_service)]
ConfigDep = Annotated[ApiConfig, Depends(get_config)]


@router.post("", response_model=InventoryResponseV1, status_code=201)
def create_inventory(
    request: Request,
    payload: InventoryCreate,
    service: InventoryServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(request=request, config=config, data=service.create_inventory(payload))


@router.get("", response_model=InventoryListResponseV1)
def list_inventories(
    request: Request,
    service: InventoryServiceDep,
    config: ConfigDep,
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
        default_sort=DEFAULT_INVENTORY_SORT,
        sort_fields=INVENTORY_SORT_FIELD_MAP,
    )
    service_result = service.list_inventories(
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


@router.get("/book/{book_id}", response_model=InventoryResponseV1)
def get_inventory_for_book(
    request: Request,
    book_id: int,
    service: InventoryServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(
        request=request,
        config=config,
        data=service.get_inventory_for_book(book_id),
    )


@router.get("/{inventory_id}", response_model=InventoryResponseV1)
def get_inventory(
    request: Request,
    inventory_id: int,
    service: InventoryServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(request=request, config=config, data=service.get_inventory(inventory_id))


@router.patch("/{inventory_id}/purchase", response_model=InventoryResponseV1)
def purchase_units(
    request: Request,
    inventory_id: int,
    payload: UnitsRequest,
    service: InventoryServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(
        request=request,
        config=config,
        data=service.purchase_units(inventory_id, payload.units),
    )


@router.patch("/{inventory_id}/loan", response_model=InventoryResponseV1)
def lend_units(
    request: Request,
    inventory_id: int,
    payload: UnitsRequest,
    service: InventoryServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(
        request=request,
        config=config,
        data=service.lend_units(inventory_id, payload.units),
    )


@router.patch("/{inventory_id}/return", response_model=InventoryResponseV1)
def return_units(
    request: Request,
    inventory_id: int,
    payload: UnitsRequest,
    service: InventoryServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(
        request=request,
        config=config,
        data=service.return_units(inventory_id, payload.units),
    )


@router.delete("/{inventory_id}", response_model=InventoryResponseV1)
def delete_inventory(
    request: Request,
    inventory_id: int,
    service: InventoryServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return object_response(
        request=request,
        config=config,
        data=service.delete_inventory(inventory_id),
    )

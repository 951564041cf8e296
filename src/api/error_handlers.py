# This file defines consistent API error payloads and exception handlers.
# It exists so every endpoint returns the same error shape with request trace fields.
# The handlers translate validation, HTTP, inventory, and unexpected failures into safe client messages.

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.models.inventory import InventoryUnitsError

LOGGER = logging.getLogger("api.errors")


class APIError(Exception):
    """Domain error type with structured API details."""

    def __init__(
        self,
        *,
        status_code: int,
        error_code: str,
        message: str,
        details: Any | None = None,
    ) -> None:
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.details = details
        super().__init__(message)


def not_found(entity: str, entity_id: object) -> APIError:
    return APIError(
        status_code=404,
        error_code="NOT_FOUND",
        message=f"{entity} with id {entity_id} does not exist.",
    )


def reference_not_found(entity: str, entity_id: object) -> APIError:
    return APIError(
        status_code=400,
        error_code="REFERENCE_NOT_FOUND",
        message=f"{entity} with id {entity_id} does not exist.",
        details={"entity": entity, "id": entity_id},
    )


def _request_id(request: Request) -> str:
    return str(getattr(request.state, "request_id", "unknown"))


def _error_response(
    request: Request,
    *,
    status_code: int,
    error_code: str,
    message: str,
    details: Any | None = None,
) -> JSONResponse:
    body = {
        "error_code": error_code,
        "message": message,
        "details": jsonable_encoder(details),
        "request_id": _request_id(request),
        "timestamp": datetime.now(tz=UTC).isoformat(),
    }
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        return _error_response(
            request,
            status_code=exc.status_code,
            error_code=exc.error_code,
            message=exc.message,
            details=exc.details,
        )

    # Raised by the inventory flush hook when a write slips past the service checks.
    @app.exception_handler(InventoryUnitsError)
    async def inventory_error_handler(request: Request, exc: InventoryUnitsError) -> JSONResponse:
        return _error_response(
            request, status_code=400, error_code="INVENTORY_UNITS_INVALID", message=str(exc)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error_response(
            request,
            status_code=422,
            error_code="VALIDATION_ERROR",
            message="Invalid request parameters.",
            details=exc.errors(),
        )

    # Starlette's base class also covers unknown routes and disallowed methods.
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error_response(
            request, status_code=exc.status_code, error_code="HTTP_ERROR", message=str(exc.detail)
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        LOGGER.error("unhandled error request_id=%s", _request_id(request), exc_info=exc)
        return _error_response(
            request,
            status_code=500,
            error_code="INTERNAL_SERVER_ERROR",
            message="The server encountered an unexpected error.",
        )

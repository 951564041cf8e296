# This file builds the FastAPI application and registers all API routers.
# It exists so startup behavior, middleware, and error handling are configured in one place.
# Every request gets an id, a timing header, and Prometheus metrics labelled by route template.

from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import RequestResponseEndpoint

from src.api.api_config import get_api_config
from src.api.dependencies import get_database_client
from src.api.error_handlers import register_error_handlers
from src.api.routers.authors import router as authors_router
from src.api.routers.books import router as books_router
from src.api.routers.categories import router as categories_router
from src.api.routers.editorials import router as editorials_router
from src.api.routers.health import router as health_router
from src.api.routers.inventories import router as inventories_router
from src.api.routers.loans import router as loans_router
from src.api.routers.users import router as users_router
from src.common.logging import configure_logging

LOGGER = logging.getLogger("api.app")

ENTITY_ROUTERS = (
    authors_router,
    categories_router,
    editorials_router,
    books_router,
    inventories_router,
    users_router,
    loans_router,
)

API_HTTP_REQUESTS_TOTAL = Counter(
    "library_api_http_requests_total",
    "Total number of HTTP requests processed by the library API.",
    ["method", "path", "status_code"],
)
API_HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "library_api_http_request_duration_seconds",
    "Library API request duration in seconds.",
    ["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10),
)
API_HTTP_INFLIGHT_REQUESTS = Gauge(
    "library_api_http_inflight_requests",
    "Number of library API requests currently being processed.",
    ["method"],
)


def _route_template(request: Request) -> str:
    """Label metrics by route template so `/books/1` and `/books/2` share a series."""

    route = request.scope.get("route")
    return getattr(route, "path_format", None) or "unmatched"


def create_app() -> FastAPI:
    """Create configured FastAPI application instance."""

    configure_logging()
    config = get_api_config()

    app = FastAPI(
        title=config.api_name,
        description=(
            "Versioned API for a library catalog: books, authors, categories, editorials, "
            "per-book inventories, library users, and loans."
        ),
        version=config.app_version,
        openapi_tags=[
            {"name": "health", "description": "Service liveness, readiness, and version metadata."},
            {"name": "authors", "description": "Book authors."},
            {"name": "categories", "description": "Subject categories for books."},
            {"name": "editorials", "description": "Publishers."},
            {"name": "books", "description": "Catalog entries with their related records."},
            {
                "name": "inventories",
                "description": "Per-book stock counters: purchased, loaned, and available units.",
            },
            {"name": "users", "description": "Library members who can borrow books."},
            {"name": "loans", "description": "Lending books to users and taking them back."},
        ],
    )

    if config.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def request_context_middleware(
        request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()
        status_code = 500
        API_HTTP_INFLIGHT_REQUESTS.labels(method=request.method).inc()
        try:
            response: Response = await call_next(request)
            status_code = response.status_code
            response.headers["x-request-id"] = request_id
            response.headers["x-response-time-ms"] = f"{(time.perf_counter() - started) * 1000.0:.2f}"
            return response
        finally:
            path_label = _route_template(request)
            API_HTTP_REQUESTS_TOTAL.labels(
                method=request.method,
                path=path_label,
                status_code=str(status_code),
            ).inc()
            API_HTTP_REQUEST_DURATION_SECONDS.labels(method=request.method, path=path_label).observe(
                time.perf_counter() - started
            )
            API_HTTP_INFLIGHT_REQUESTS.labels(method=request.method).dec()

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.on_event("startup")
    def startup_checks() -> None:
        try:
            db = get_database_client()
            if config.auto_create_schema:
                db.create_schema()
            app.state.db_connected_at_startup = db.can_connect()
        except SQLAlchemyError:
            LOGGER.warning("database unavailable at startup", exc_info=True)
            app.state.db_connected_at_startup = False
        LOGGER.info(
            "library api started env=%s db_connected=%s",
            config.environment,
            app.state.db_connected_at_startup,
        )

    register_error_handlers(app)

    app.include_router(health_router)
    for entity_router in ENTITY_ROUTERS:
        app.include_router(entity_router, prefix=config.api_version_path)

    return app


app = create_app()

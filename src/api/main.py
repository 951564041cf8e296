"""Process entrypoint that serves the library API with uvicorn."""

from __future__ import annotations

import logging

import uvicorn

from src.common.logging import configure_logging
from src.common.settings import get_settings

LOGGER = logging.getLogger("api.main")


def run() -> None:
    configure_logging()
    settings = get_settings()
    LOGGER.info(
        "starting %s env=%s on %s:%s",
        settings.PROJECT_NAME,
        settings.ENV,
        settings.API_HOST,
        settings.API_PORT,
    )
    uvicorn.run(
        "src.api.app:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()

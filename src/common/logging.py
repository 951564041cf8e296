"""
Logging setup shared by the API process and the scripts.
`configure_logging` is idempotent, so entry points can call it without coordinating.
"""

from __future__ import annotations

import logging

from src.common.settings import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_configured = False


def resolve_level(level_name: str) -> int:
    """Map a level name to its number, falling back to INFO for unknown names."""

    return logging.getLevelNamesMapping().get(level_name.strip().upper(), logging.INFO)


def configure_logging(level_name: str | None = None) -> None:
    global _configured
    if _configured:
        return

    logging.basicConfig(
        level=resolve_level(level_name or get_settings().LOG_LEVEL),
        format=LOG_FORMAT,
    )
    _configured = True

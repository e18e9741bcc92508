"""Logging setup for the service."""

import logging

from app.core.config import LogFormatEnum, settings

SIMPLE_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
JSON_FORMAT = (
    '{"time": "%(asctime)s", "level": "%(levelname)s", '
    '"logger": "%(name)s", "message": "%(message)s"}'
)


def configure_logging() -> None:
    """Apply the configured level and line format to the root logger."""
    fmt = JSON_FORMAT if settings.log_format == LogFormatEnum.json else SIMPLE_FORMAT
    logging.basicConfig(level=settings.log_level.value, format=fmt, force=True)

"""
Structured logging setup.
All modules log through structlog as JSON lines.
"""
import logging
from typing import Optional

import structlog

from hot22_dashboard.core import config


def configure_logging(level: Optional[str] = None) -> None:
    """Configure structlog once for the process."""
    level_value = logging.getLevelName((level or config.settings.log_level).upper())
    if not isinstance(level_value, int):
        level_value = logging.INFO

    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
    )


def get_logger(name: str):
    return structlog.get_logger(name)

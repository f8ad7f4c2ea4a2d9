"""
Project logging helpers.

Every module obtains its logger through ``getLogger(__name__)`` so the
handler and level configuration in ``settings.LOGGING`` applies uniformly.
"""

from __future__ import annotations

import logging
from typing import Any


def getLogger(name: str) -> logging.Logger:  # noqa: N802
    return logging.getLogger(name)


def build_logging_config(level: str = "INFO", db_level: str = "WARNING") -> dict[str, Any]:
    """
    Build the ``LOGGING`` dictConfig used by the settings module.

    Args:
        level: Level for the ``teahub`` loggers and the root logger
        db_level: Level for ``django.db.backends``; DEBUG logs every SQL query

    Returns:
        A dictionary suitable for ``logging.config.dictConfig``
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "verbose": {
                "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "verbose",
            },
        },
        "root": {
            "handlers": ["console"],
            "level": level,
        },
        "loggers": {
            "teahub": {
                "handlers": ["console"],
                "level": level,
                "propagate": False,
            },
            "django.db.backends": {
                "handlers": ["console"],
                "level": db_level,
                "propagate": False,
            },
        },
    }

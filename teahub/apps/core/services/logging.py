"""
Structured log events.

Events are logged as ``<event> key=value ...`` with the same key/value pairs
attached to the record as ``context``. Values may come from request bodies,
so they are stripped of control characters and truncated first.
"""

from __future__ import annotations

import logging
from typing import Any

_CONTROL_CHARS = dict.fromkeys(range(32))
MAX_VALUE_LENGTH = 200


def sanitize_for_log(value: Any, max_length: int = MAX_VALUE_LENGTH) -> str:
    text = str(value).translate(_CONTROL_CHARS)
    return text if len(text) <= max_length else text[:max_length] + "..."


def build_log_context(**context: Any) -> dict[str, Any]:
    return {key: sanitize_for_log(value) for key, value in context.items() if value is not None}


def log_event(logger: logging.Logger, level: int, event: str, **context: Any) -> None:
    safe_context = build_log_context(**context)
    pairs = [f"{key}={value}" for key, value in safe_context.items()]
    logger.log(level, " ".join([event, *pairs]), extra={"context": safe_context})


def log_info(logger: logging.Logger, event: str, **context: Any) -> None:
    log_event(logger, logging.INFO, event, **context)


def log_warning(logger: logging.Logger, event: str, **context: Any) -> None:
    log_event(logger, logging.WARNING, event, **context)

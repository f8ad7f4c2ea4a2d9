"""Helpers shared by the TEA orchestrators: required fields, paging and PATCH changes."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from django.conf import settings
from pydantic import BaseModel

from teahub.apps.core.domain.exceptions import ValidationError


def is_missing(value: Any) -> bool:
    return value is None or value == ""


def require_fields(payload: BaseModel, *fields: str) -> None:
    """Raise ``ValidationError`` naming the first required field that is absent or empty."""
    for field in fields:
        if is_missing(getattr(payload, field, None)):
            raise ValidationError(f"Missing required field: {field}")


def normalize_page(page_offset: int, page_size: int) -> tuple[int, int]:
    """Clamp paging parameters; sizes above the configured maximum are capped, not rejected."""
    page_offset = max(0, page_offset)
    page_size = max(1, min(page_size, settings.TEA_MAX_PAGE_SIZE))
    return page_offset, page_size


def patch_changes(
    payload: BaseModel,
    field_map: Mapping[str, str],
    *,
    required: Iterable[str] = (),
    empty_as: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Translate the keys present in a PATCH body into model field changes.

    Only keys the caller actually sent are returned. An explicit null clears a
    nullable field; it is rejected for fields listed in ``required``, and
    replaced by the ``empty_as`` value for fields stored as non-null.

    Args:
        payload: Parsed PATCH body
        field_map: Wire field name -> model field name
        required: Wire fields that may not be null or empty
        empty_as: Wire fields whose null is stored as the given value

    Returns:
        Model field name -> new value
    """
    required = set(required)
    empty_as = empty_as or {}
    changes: dict[str, Any] = {}
    for wire_name in payload.model_fields_set:
        if wire_name not in field_map:
            continue
        value = getattr(payload, wire_name)
        if value is None and wire_name in empty_as:
            value = empty_as[wire_name]
        elif wire_name in required and is_missing(value):
            raise ValidationError(f"Field '{wire_name}' cannot be null or empty")
        changes[field_map[wire_name]] = value
    return changes

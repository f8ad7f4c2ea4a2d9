"""
Identifier validation for TEA entity addressing.

Every uuid taken from a path or query parameter passes through
``require_uuid`` before it reaches a store lookup.
"""

from __future__ import annotations

import re
from typing import Any

from teahub.apps.core.domain.exceptions import ValidationError

UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)


def is_valid_uuid(value: Any) -> bool:
    """Return True when ``value`` is a string in the canonical 8-4-4-4-12 hex grouping."""
    if not isinstance(value, str):
        return False
    return UUID_PATTERN.fullmatch(value) is not None


def require_uuid(value: Any, field: str) -> str:
    """
    Validate an entity-addressing identifier.

    Args:
        value: The raw identifier
        field: Human readable name of the parameter, used in the error message

    Returns:
        The identifier, lower-cased

    Raises:
        ValidationError: If the identifier is not a canonical UUID
    """
    if not is_valid_uuid(value):
        raise ValidationError(f"Invalid {field}")
    return value.lower()

"""
Model fields for embedded TEA structures.

Qualifiers, artifacts, update reasons and lifecycle values are stored as
JSON. ``EmbeddedSchemaField`` puts the encode/decode pair for each of them
on the model-field edge:

- assigning to the attribute validates the value into pydantic objects,
- saving dumps those objects to JSON primitives,
- loading validates the stored JSON back into pydantic objects.

A stored value that no longer matches its schema raises
``CorruptRecordError`` instead of silently turning into an empty value.
"""

from __future__ import annotations

from typing import Any

from django.db import models
from django.db.models.expressions import Col
from django.db.models.query_utils import DeferredAttribute
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from teahub.apps.core.domain.exceptions import CorruptRecordError, ValidationError
from teahub.logging import getLogger

log = getLogger(__name__)


def _first_error(exc: PydanticValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error['msg']}" if location else error["msg"]


class EmbeddedSchemaAttribute(DeferredAttribute):
    """Attribute descriptor that keeps the instance value in its schema type."""

    def __set__(self, instance, value):
        instance.__dict__[self.field.attname] = self.field.to_schema(value)


class EmbeddedSchemaField(models.JSONField):
    descriptor_class = EmbeddedSchemaAttribute

    def __init__(self, *args: Any, schema: Any = None, **kwargs: Any) -> None:
        self.schema = schema
        self.adapter = TypeAdapter(schema) if schema is not None else None
        super().__init__(*args, **kwargs)

    def deconstruct(self):
        # Migrations only need the column definition; the schema is runtime behaviour.
        name, _path, args, kwargs = super().deconstruct()
        return name, "django.db.models.JSONField", args, kwargs

    def to_schema(self, value: Any) -> Any:
        """Validate a value assigned in code; bad input is a client error."""
        if value is None or self.adapter is None:
            return value
        try:
            return self.adapter.validate_python(value)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid {self.name}: {_first_error(e)}") from e

    def encode(self, value: Any) -> Any:
        if value is None or self.adapter is None:
            return value
        return self.adapter.dump_python(self.to_schema(value), mode="json", exclude_none=True)

    def decode(self, value: Any) -> Any:
        if value is None or self.adapter is None:
            return value
        try:
            return self.adapter.validate_python(value)
        except PydanticValidationError as e:
            log.error("Stored %s.%s does not match its schema: %s", self.model.__name__, self.name, e)
            raise CorruptRecordError(f"Corrupt {self.name} value on {self.model.__name__}") from e

    def from_db_value(self, value, expression, connection):
        raw = super().from_db_value(value, expression, connection)
        # Key transforms and annotations return fragments, not the whole structure.
        if isinstance(expression, Col):
            return self.decode(raw)
        return raw

    def get_prep_value(self, value):
        return super().get_prep_value(self.encode(value))

"""Tests for TEA identifier validation."""

import uuid

import pytest

from teahub.apps.core.domain.exceptions import ValidationError
from teahub.apps.tea.validators import is_valid_uuid, require_uuid


class TestIsValidUuid:
    def test_accepts_generated_uuids(self):
        for _ in range(20):
            assert is_valid_uuid(str(uuid.uuid4()))

    def test_is_case_insensitive(self):
        value = str(uuid.uuid4())
        assert is_valid_uuid(value.upper())
        assert is_valid_uuid("A0EEBC99-9c0b-4ef8-bb6d-6bb9bd380a11")

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "not-a-uuid",
            "a0eebc99-9c0b-4ef8-bb6d-6bb9bd380a1",  # too short
            "a0eebc99-9c0b-4ef8-bb6d-6bb9bd380a111",  # too long
            "a0eebc999c0b4ef8bb6d6bb9bd380a11",  # no hyphens
            "a0eebc99-9c0b-4ef8-bb6d6bb9bd380a11",  # missing one hyphen
            "a0eebc99-9c0b-4ef8-bb6d-6bb9bd380a1g",  # non-hex
            "{a0eebc99-9c0b-4ef8-bb6d-6bb9bd380a11}",
            " a0eebc99-9c0b-4ef8-bb6d-6bb9bd380a11",
            "a0eebc99-9c0b-4ef8-bb6d-6bb9bd380a11\n",
            "a0eebc9-99c0b-4ef8-bb6d-6bb9bd380a11",  # wrong grouping
        ],
    )
    def test_rejects_malformed_strings(self, value):
        assert not is_valid_uuid(value)

    @pytest.mark.parametrize("value", [None, 123, uuid.uuid4(), b"a0eebc99-9c0b-4ef8-bb6d-6bb9bd380a11"])
    def test_rejects_non_strings(self, value):
        assert not is_valid_uuid(value)


class TestRequireUuid:
    def test_returns_lower_case_value(self):
        assert require_uuid("A0EEBC99-9C0B-4EF8-BB6D-6BB9BD380A11", "id") == "a0eebc99-9c0b-4ef8-bb6d-6bb9bd380a11"

    def test_error_names_the_field(self):
        with pytest.raises(ValidationError) as exc_info:
            require_uuid("nope", "productIdentifier")

        assert exc_info.value.detail == "Invalid productIdentifier"
        assert exc_info.value.status_code == 400

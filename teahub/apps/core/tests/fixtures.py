import os
from typing import Any, Generator

import pytest
from django.contrib.auth.base_user import AbstractBaseUser


def _create_user(model: type[AbstractBaseUser], username: str, email: str, password: str, **extra) -> AbstractBaseUser:
    user = model(username=username, email=email, **extra)
    user.set_password(password)
    user.save()
    return user


@pytest.fixture
def sample_user(django_user_model: type[AbstractBaseUser]) -> Generator[AbstractBaseUser, Any, None]:
    """User taken from the test environment; owner of ``sample_team`` in the team fixtures."""
    user = _create_user(
        django_user_model,
        os.environ.get("DJANGO_TEST_USER", "testuser"),
        os.environ.get("DJANGO_TEST_EMAIL", "test@example.com"),
        os.environ.get("DJANGO_TEST_PASSWORD", "testpassword"),
        first_name="Test",
    )

    yield user

    user.delete()


@pytest.fixture
def guest_user(django_user_model: type[AbstractBaseUser]) -> Generator[AbstractBaseUser, Any, None]:
    user = _create_user(django_user_model, "guest", "guest@example.com", "guest", first_name="Guest")

    yield user

    user.delete()

# Team and membership fixtures shared by every app's tests

from typing import Any, Generator

import pytest
from django.contrib.auth.base_user import AbstractBaseUser

from teahub.apps.core.tests.fixtures import guest_user, sample_user  # noqa: F401

from .models import Member, Team


def _membership(user: AbstractBaseUser, team: Team, role: str) -> Member:
    return Member.objects.create(user=user, team=team, role=role, is_default_team=True)


@pytest.fixture
def sample_team(db) -> Generator[Team, Any, None]:
    team = Team.objects.create(name="test team")
    yield team
    team.delete()


@pytest.fixture
def other_team(db) -> Generator[Team, Any, None]:
    team = Team.objects.create(name="other team")
    yield team
    team.delete()


@pytest.fixture
def sample_team_with_owner_member(sample_team: Team, sample_user: AbstractBaseUser) -> Member:  # noqa: F811
    return _membership(sample_user, sample_team, "owner")


@pytest.fixture
def other_team_with_guest_member(other_team: Team, guest_user: AbstractBaseUser) -> Member:  # noqa: F811
    return _membership(guest_user, other_team, "guest")

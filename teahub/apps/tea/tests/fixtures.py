# Fixtures for TEA test cases

from datetime import datetime, timezone
from typing import Any, Generator

import pytest
from django.test import Client

from teahub.apps.teams.models import Member, Team

from ..models import TeaCollection, TeaComponent, TeaProduct, TeaRelease
from ..schemas import (
    CollectionCreateSchema,
    ComponentCreateSchema,
    ProductCreateSchema,
    ReleaseCreateSchema,
)
from ..services import collections as collection_service
from ..services import components as component_service
from ..services import products as product_service
from ..services import releases as release_service
from ..store import TeaStore


@pytest.fixture
def tea_store(sample_team: Team) -> TeaStore:
    return TeaStore(sample_team.pk)


@pytest.fixture
def other_team_store(other_team: Team) -> TeaStore:
    return TeaStore(other_team.pk)


@pytest.fixture
def authenticated_client(sample_team_with_owner_member: Member) -> Generator[Client, Any, None]:
    client = Client()
    client.force_login(sample_team_with_owner_member.user)

    yield client

    client.logout()


@pytest.fixture
def sample_product(tea_store: TeaStore) -> TeaProduct:
    return product_service.create_product(
        tea_store,
        ProductCreateSchema(
            name="libfoo",
            type="generic",
            identifiers=[{"idType": "purl", "idValue": "pkg:generic/libfoo"}],
        ),
    )


@pytest.fixture
def sample_component(tea_store: TeaStore, sample_product: TeaProduct) -> TeaComponent:
    return component_service.create_component(
        tea_store,
        ComponentCreateSchema(
            name="libfoo-core",
            type="generic",
            productIdentifier=str(sample_product.uuid),
            identifiers=[{"idType": "purl", "idValue": "pkg:generic/libfoo-core"}],
        ),
    )


@pytest.fixture
def sample_release(tea_store: TeaStore, sample_component: TeaComponent) -> TeaRelease:
    return release_service.create_release(
        tea_store,
        ReleaseCreateSchema(
            componentIdentifier=str(sample_component.uuid),
            version="1.0.0",
            releaseDate=datetime(2024, 1, 1, tzinfo=timezone.utc),
        ),
    )


@pytest.fixture
def sample_collection(tea_store: TeaStore, sample_release: TeaRelease) -> TeaCollection:
    return collection_service.create_collection(
        tea_store,
        CollectionCreateSchema(
            releaseIdentifier=str(sample_release.uuid),
            updateReason={"type": "INITIAL_RELEASE"},
            artifacts=[{"name": "sbom.cdx.json", "type": "BOM", "downloadUrl": "https://example.com/sbom.json"}],
        ),
    )

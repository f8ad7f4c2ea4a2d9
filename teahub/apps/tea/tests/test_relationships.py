"""
Tests for association records, projections and cascade deletes.
"""

from datetime import datetime, timezone

import pytest
from django.db import DatabaseError

from teahub.apps.core.domain.exceptions import (
    AccessDeniedError,
    DuplicateAssociationError,
    InternalError,
    NotFoundError,
    ValidationError,
)

from ..models import (
    CollectionProduct,
    ComponentIdentifier,
    ProductComponent,
    ReleaseComponent,
    TeaCollection,
    TeaComponent,
    TeaProduct,
    TeaRelease,
)
from ..store import TeaStore


def _release(store: TeaStore, product: TeaProduct, component: TeaComponent, version: str) -> TeaRelease:
    release = store.releases.create(
        product=product,
        tag=f"v{version}",
        version=version,
        release_date=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    store.relationships.link_release_component(release, component)
    return release


# =============================================================================
# Links
# =============================================================================


@pytest.mark.django_db
class TestLinks:
    def test_default_relationship_labels(self, sample_component: TeaComponent, sample_release: TeaRelease):
        assert ProductComponent.objects.get(component=sample_component).relationship == "component"
        assert ReleaseComponent.objects.get(release=sample_release).relationship == "release"

    def test_duplicate_product_component_link(
        self, tea_store: TeaStore, sample_product: TeaProduct, sample_component: TeaComponent
    ):
        with pytest.raises(DuplicateAssociationError) as exc_info:
            tea_store.relationships.link_product_component(sample_product, sample_component)

        assert exc_info.value.status_code == 409
        assert ProductComponent.objects.filter(component=sample_component).count() == 1

    def test_duplicate_collection_product_link(
        self, tea_store: TeaStore, sample_collection: TeaCollection, sample_product: TeaProduct
    ):
        with pytest.raises(DuplicateAssociationError):
            tea_store.relationships.link_collection_product(str(sample_collection.uuid), str(sample_product.uuid))

    def test_link_by_uuid_checks_team(
        self, tea_store: TeaStore, other_team_store: TeaStore, sample_component: TeaComponent
    ):
        foreign = other_team_store.products.create(name="foreign", type="generic")

        with pytest.raises(AccessDeniedError) as exc_info:
            tea_store.relationships.link_product_component(str(foreign.uuid), sample_component)

        assert exc_info.value.status_code == 403

    def test_link_unknown_entity(self, tea_store: TeaStore, sample_product: TeaProduct):
        with pytest.raises(NotFoundError):
            tea_store.relationships.link_product_component(sample_product, "00000000-0000-4000-8000-000000000000")


# =============================================================================
# Projections
# =============================================================================


@pytest.mark.django_db
class TestProjections:
    def test_components_of_product_in_association_order(self, tea_store: TeaStore, sample_product: TeaProduct):
        components = [tea_store.components.create(name=f"c{i}", type="generic") for i in range(3)]
        for component in components:
            tea_store.relationships.link_product_component(sample_product, component)

        assert tea_store.relationships.components_of_product(str(sample_product.uuid)) == [
            str(c.uuid) for c in components
        ]

    def test_component_in_several_products(self, tea_store: TeaStore, sample_component: TeaComponent):
        second = tea_store.products.create(name="second", type="generic")
        tea_store.relationships.link_product_component(second, sample_component)

        products = tea_store.relationships.products_of_component(str(sample_component.uuid))

        assert len(products) == 2
        assert products[1] == str(second.uuid)

    def test_release_projections(
        self, tea_store: TeaStore, sample_product: TeaProduct, sample_component: TeaComponent
    ):
        first = _release(tea_store, sample_product, sample_component, "1.0.0")
        second = _release(tea_store, sample_product, sample_component, "1.1.0")

        assert tea_store.relationships.releases_of_component(str(sample_component.uuid)) == [
            str(first.uuid),
            str(second.uuid),
        ]
        assert tea_store.relationships.components_of_release(str(first.uuid)) == [str(sample_component.uuid)]
        assert tea_store.relationships.component_versions_map([sample_component.uuid]) == {
            str(sample_component.uuid): ["1.0.0", "1.1.0"]
        }

    def test_collection_projections(
        self, tea_store: TeaStore, sample_collection: TeaCollection, sample_product: TeaProduct
    ):
        assert tea_store.relationships.products_of_collection(str(sample_collection.uuid)) == [
            str(sample_product.uuid)
        ]
        assert tea_store.relationships.collections_of_product(str(sample_product.uuid)) == [
            str(sample_collection.uuid)
        ]

    def test_maps_skip_entities_without_links(
        self, tea_store: TeaStore, sample_product: TeaProduct, sample_component: TeaComponent
    ):
        lonely = tea_store.products.create(name="lonely", type="generic")

        result = tea_store.relationships.components_of_products_map([sample_product.uuid, lonely.uuid])

        assert str(lonely.uuid) not in result
        assert result[str(sample_product.uuid)] == [str(sample_component.uuid)]
        with pytest.raises(KeyError):
            result[str(lonely.uuid)]


# =============================================================================
# Release product resolution
# =============================================================================


@pytest.mark.django_db
class TestResolveReleaseProduct:
    def test_single_product(self, tea_store: TeaStore, sample_product: TeaProduct, sample_component: TeaComponent):
        assert tea_store.relationships.resolve_release_product(str(sample_component.uuid)) == str(sample_product.uuid)

    def test_orphan_component(self, tea_store: TeaStore):
        orphan = tea_store.components.create(name="orphan", type="generic")

        with pytest.raises(NotFoundError) as exc_info:
            tea_store.relationships.resolve_release_product(str(orphan.uuid))

        assert exc_info.value.detail == "Component not associated with any product"

    def test_several_products_need_a_hint(self, tea_store: TeaStore, sample_component: TeaComponent):
        second = tea_store.products.create(name="second", type="generic")
        tea_store.relationships.link_product_component(second, sample_component)

        with pytest.raises(ValidationError):
            tea_store.relationships.resolve_release_product(str(sample_component.uuid))

        assert tea_store.relationships.resolve_release_product(str(sample_component.uuid), str(second.uuid)) == str(
            second.uuid
        )

    def test_hint_must_be_linked(self, tea_store: TeaStore, sample_component: TeaComponent):
        unrelated = tea_store.products.create(name="unrelated", type="generic")

        with pytest.raises(ValidationError):
            tea_store.relationships.resolve_release_product(str(sample_component.uuid), str(unrelated.uuid))


# =============================================================================
# Cascades
# =============================================================================


@pytest.mark.django_db
class TestCascades:
    def test_delete_product(
        self,
        tea_store: TeaStore,
        sample_product: TeaProduct,
        sample_component: TeaComponent,
        sample_release: TeaRelease,
        sample_collection: TeaCollection,
    ):
        tea_store.relationships.cascade_delete_product(str(sample_product.uuid))

        assert not TeaProduct.objects.filter(pk=sample_product.pk).exists()
        assert not TeaRelease.objects.filter(pk=sample_release.pk).exists()
        assert not ProductComponent.objects.filter(component=sample_component).exists()
        assert not ReleaseComponent.objects.filter(component=sample_component).exists()
        assert not CollectionProduct.objects.filter(collection=sample_collection).exists()
        # Components and collections outlive the product
        assert TeaComponent.objects.filter(pk=sample_component.pk).exists()
        assert TeaCollection.objects.filter(pk=sample_collection.pk).exists()

    def test_delete_component(
        self,
        tea_store: TeaStore,
        sample_product: TeaProduct,
        sample_component: TeaComponent,
        sample_release: TeaRelease,
    ):
        tea_store.relationships.cascade_delete_component(str(sample_component.uuid))

        assert not TeaComponent.objects.filter(pk=sample_component.pk).exists()
        assert not ComponentIdentifier.objects.filter(component_id=sample_component.pk).exists()
        assert not ProductComponent.objects.filter(product=sample_product).exists()
        assert not ReleaseComponent.objects.filter(release=sample_release).exists()
        assert TeaProduct.objects.filter(pk=sample_product.pk).exists()
        assert TeaRelease.objects.filter(pk=sample_release.pk).exists()
        assert tea_store.relationships.components_of_release(str(sample_release.uuid)) == []

    def test_delete_release(self, tea_store: TeaStore, sample_component: TeaComponent, sample_release: TeaRelease):
        tea_store.relationships.cascade_delete_release(str(sample_release.uuid))

        assert not TeaRelease.objects.filter(pk=sample_release.pk).exists()
        assert tea_store.relationships.releases_of_component(str(sample_component.uuid)) == []
        assert TeaComponent.objects.filter(pk=sample_component.pk).exists()

    def test_delete_collection_keeps_products(
        self, tea_store: TeaStore, sample_product: TeaProduct, sample_collection: TeaCollection
    ):
        tea_store.relationships.delete_collection(str(sample_collection.uuid))

        assert not TeaCollection.objects.filter(pk=sample_collection.pk).exists()
        assert tea_store.relationships.collections_of_product(str(sample_product.uuid)) == []
        assert TeaProduct.objects.filter(pk=sample_product.pk).exists()

    def test_failed_cascade_rolls_back(
        self,
        mocker,
        tea_store: TeaStore,
        sample_product: TeaProduct,
        sample_component: TeaComponent,
        sample_release: TeaRelease,
    ):
        mocker.patch.object(TeaProduct, "delete", side_effect=DatabaseError("connection lost"))

        with pytest.raises(InternalError):
            tea_store.relationships.cascade_delete_product(str(sample_product.uuid))

        assert TeaRelease.objects.filter(pk=sample_release.pk).exists()
        assert ProductComponent.objects.filter(product=sample_product, component=sample_component).exists()
        assert tea_store.relationships.components_of_release(str(sample_release.uuid)) == [
            str(sample_component.uuid)
        ]

    def test_cascade_refuses_other_team(self, other_team_store: TeaStore, sample_product: TeaProduct):
        with pytest.raises(AccessDeniedError) as exc_info:
            other_team_store.relationships.cascade_delete_product(str(sample_product.uuid))

        assert exc_info.value.status_code == 403
        assert TeaProduct.objects.filter(pk=sample_product.pk).exists()

"""
Association records between TEA entities.

The manager owns the three join tables:

- ProductComponent: which products a component belongs to
- ReleaseComponent: the originating component of each release
- CollectionProduct: which products a collection covers

Projections return uuid strings ordered by association creation time.
Cascades remove association rows before the entity rows they reference and
run inside a single transaction.
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING, Iterable, TypeVar

from django.db import IntegrityError, models, transaction

from teahub.apps.core.domain.exceptions import DuplicateAssociationError, NotFoundError, ValidationError
from teahub.logging import getLogger

from .models import (
    CollectionProduct,
    ProductComponent,
    ReleaseComponent,
    TeaCollection,
    TeaComponent,
    TeaProduct,
    TeaRelease,
)

if TYPE_CHECKING:
    from .store import EntityStore, TeaStore

log = getLogger(__name__)

M = TypeVar("M", bound=models.Model)

DEFAULT_PRODUCT_COMPONENT_RELATIONSHIP = "component"
DEFAULT_RELEASE_COMPONENT_RELATIONSHIP = "release"


def _uuids(qs: models.QuerySet, field: str) -> list[str]:
    return [str(value) for value in qs.values_list(field, flat=True)]


def _group(qs: models.QuerySet, key: str, value: str) -> dict[str, list[str]]:
    grouped: dict[str, list[str]] = defaultdict(list)
    for k, v in qs.values_list(key, value):
        grouped[str(k)].append(str(v))
    return dict(grouped)


class RelationshipManager:
    def __init__(self, store: TeaStore) -> None:
        self.store = store

    # =========================================================================
    # Links
    # =========================================================================

    @staticmethod
    def _resolve(entities: EntityStore[M], entity: M | str) -> M:
        if isinstance(entity, entities.model):
            return entity
        return entities.get(str(entity))

    @staticmethod
    def _insert(model: type[models.Model], description: str, **fields) -> models.Model:
        if model.objects.filter(**{k: v for k, v in fields.items() if k != "relationship"}).exists():
            raise DuplicateAssociationError(f"{description} already exists")
        try:
            with transaction.atomic():
                return model.objects.create(**fields)
        except IntegrityError as e:
            raise DuplicateAssociationError(f"{description} already exists") from e

    def link_product_component(
        self,
        product: TeaProduct | str,
        component: TeaComponent | str,
        relationship: str | None = DEFAULT_PRODUCT_COMPONENT_RELATIONSHIP,
    ) -> ProductComponent:
        """
        Associate a component with a product.

        Raises:
            DuplicateAssociationError: If the pair is already linked
        """
        product = self._resolve(self.store.products, product)
        component = self._resolve(self.store.components, component)
        return self._insert(
            ProductComponent,
            "Product-component association",
            product=product,
            component=component,
            relationship=relationship,
        )

    def link_release_component(
        self,
        release: TeaRelease | str,
        component: TeaComponent | str,
        relationship: str | None = DEFAULT_RELEASE_COMPONENT_RELATIONSHIP,
    ) -> ReleaseComponent:
        release = self._resolve(self.store.releases, release)
        component = self._resolve(self.store.components, component)
        return self._insert(
            ReleaseComponent,
            "Release-component association",
            release=release,
            component=component,
            relationship=relationship,
        )

    def link_collection_product(
        self,
        collection: TeaCollection | str,
        product: TeaProduct | str,
        relationship: str | None = None,
    ) -> CollectionProduct:
        collection = self._resolve(self.store.collections, collection)
        product = self._resolve(self.store.products, product)
        return self._insert(
            CollectionProduct,
            "Collection-product association",
            collection=collection,
            product=product,
            relationship=relationship,
        )

    # =========================================================================
    # Projections
    # =========================================================================

    def components_of_product(self, product_uuid: str) -> list[str]:
        return _uuids(ProductComponent.objects.filter(product_id=product_uuid), "component_id")

    def products_of_component(self, component_uuid: str) -> list[str]:
        return _uuids(ProductComponent.objects.filter(component_id=component_uuid), "product_id")

    def releases_of_component(self, component_uuid: str) -> list[str]:
        return _uuids(ReleaseComponent.objects.filter(component_id=component_uuid), "release_id")

    def components_of_release(self, release_uuid: str) -> list[str]:
        return _uuids(ReleaseComponent.objects.filter(release_id=release_uuid), "component_id")

    def products_of_collection(self, collection_uuid: str) -> list[str]:
        return _uuids(CollectionProduct.objects.filter(collection_id=collection_uuid), "product_id")

    def collections_of_product(self, product_uuid: str) -> list[str]:
        return _uuids(CollectionProduct.objects.filter(product_id=product_uuid), "collection_id")

    # Batched variants keep list endpoints at a fixed number of queries.

    def components_of_products_map(self, product_uuids: Iterable) -> dict[str, list[str]]:
        return _group(ProductComponent.objects.filter(product_id__in=list(product_uuids)), "product_id", "component_id")

    def releases_of_components_map(self, component_uuids: Iterable) -> dict[str, list[str]]:
        return _group(
            ReleaseComponent.objects.filter(component_id__in=list(component_uuids)), "component_id", "release_id"
        )

    def components_of_releases_map(self, release_uuids: Iterable) -> dict[str, list[str]]:
        return _group(
            ReleaseComponent.objects.filter(release_id__in=list(release_uuids)), "release_id", "component_id"
        )

    def products_of_collections_map(self, collection_uuids: Iterable) -> dict[str, list[str]]:
        return _group(
            CollectionProduct.objects.filter(collection_id__in=list(collection_uuids)), "collection_id", "product_id"
        )

    def collections_of_products_map(self, product_uuids: Iterable) -> dict[str, list[str]]:
        return _group(
            CollectionProduct.objects.filter(product_id__in=list(product_uuids)), "product_id", "collection_id"
        )

    def component_versions_map(self, component_uuids: Iterable) -> dict[str, list[str]]:
        """Release versions per component, oldest association first."""
        return _group(
            ReleaseComponent.objects.filter(component_id__in=list(component_uuids)), "component_id", "release__version"
        )

    # =========================================================================
    # Release product resolution
    # =========================================================================

    def resolve_release_product(self, component_uuid: str, product_uuid: str | None = None) -> str:
        """
        Pick the product a new release of ``component_uuid`` belongs to.

        A component linked to a single product needs no hint. When it belongs to
        several products the caller must name one of them; guessing would make
        the result depend on row order.

        Raises:
            NotFoundError: If the component is not associated with any product
            ValidationError: If the product is ambiguous or not linked to the component
        """
        products = self.products_of_component(component_uuid)
        if not products:
            raise NotFoundError("Component not associated with any product")

        if product_uuid is not None:
            if product_uuid not in products:
                raise ValidationError("productIdentifier is not associated with the component")
            return product_uuid

        if len(products) > 1:
            raise ValidationError(
                "Component is associated with multiple products; productIdentifier is required"
            )
        return products[0]

    # =========================================================================
    # Cascades
    # =========================================================================

    def cascade_delete_product(self, product_uuid: str) -> None:
        """Delete a product together with its releases and every association row referencing them."""
        product = self.store.products.get(product_uuid)
        with self.store.atomic():
            release_ids = list(TeaRelease.objects.filter(product=product).values_list("uuid", flat=True))
            pc_deleted, _ = ProductComponent.objects.filter(product=product).delete()
            cp_deleted, _ = CollectionProduct.objects.filter(product=product).delete()
            rc_deleted, _ = ReleaseComponent.objects.filter(release_id__in=release_ids).delete()
            TeaRelease.objects.filter(uuid__in=release_ids).delete()
            product.delete()
        log.info(
            "Deleted product %s with %d releases (%d component, %d collection, %d release-component links)",
            product_uuid,
            len(release_ids),
            pc_deleted,
            cp_deleted,
            rc_deleted,
        )

    def cascade_delete_component(self, component_uuid: str) -> None:
        component = self.store.components.get(component_uuid)
        with self.store.atomic():
            ProductComponent.objects.filter(component=component).delete()
            ReleaseComponent.objects.filter(component=component).delete()
            component.delete()
        log.info("Deleted component %s", component_uuid)

    def cascade_delete_release(self, release_uuid: str) -> None:
        release = self.store.releases.get(release_uuid)
        with self.store.atomic():
            ReleaseComponent.objects.filter(release=release).delete()
            release.delete()
        log.info("Deleted release %s", release_uuid)

    def delete_collection(self, collection_uuid: str) -> None:
        """Delete a collection and its product links; the products themselves stay."""
        collection = self.store.collections.get(collection_uuid)
        with self.store.atomic():
            CollectionProduct.objects.filter(collection=collection).delete()
            collection.delete()
        log.info("Deleted collection %s", collection_uuid)

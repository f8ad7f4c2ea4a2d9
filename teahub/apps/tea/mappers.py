"""
Model to wire-schema mappers.

Single-entity builders issue their own association queries. The ``*_list``
builders fetch associations for a whole page in one query per relation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from .models import TeaCollection, TeaComponent, TeaProduct, TeaRelease
from .schemas import (
    TEACollection,
    TEAComponent,
    TEAComponentDetail,
    TEAIdentifier,
    TEAPagination,
    TEAProduct,
    TEARelease,
    TEAReleaseSummary,
)

if TYPE_CHECKING:
    from .store import Page, TeaStore


def build_pagination(page: Page) -> TEAPagination:
    return TEAPagination(
        total=page.total,
        pageOffset=page.page_offset,
        pageSize=page.page_size,
        hasNext=page.has_next,
        hasPrevious=page.has_previous,
    )


# =============================================================================
# Products
# =============================================================================


def _product(product: TeaProduct, components: list[str]) -> TEAProduct:
    return TEAProduct(
        identifier=str(product.uuid),
        name=product.name,
        barcode=product.barcode,
        sku=product.sku,
        vendorUuid=product.vendor_uuid,
        identifiers=product.identifiers,
        type=product.type,
        namespace=product.namespace,
        version=product.version,
        qualifiers=product.qualifiers,
        subpath=product.subpath,
        components=components,
    )


def build_product_response(store: TeaStore, product: TeaProduct) -> TEAProduct:
    return _product(product, store.relationships.components_of_product(str(product.uuid)))


def build_product_list(store: TeaStore, products: Sequence[TeaProduct]) -> list[TEAProduct]:
    components = store.relationships.components_of_products_map(p.uuid for p in products)
    return [_product(p, components.get(str(p.uuid), [])) for p in products]


# =============================================================================
# Components
# =============================================================================


def _component(component: TeaComponent, versions: list[str], releases: list[str]) -> TEAComponent:
    return TEAComponent(
        uuid=str(component.uuid),
        name=component.name,
        identifiers=component.identifiers,
        versions=versions,
        releases=releases,
    )


def build_component_response(store: TeaStore, component: TeaComponent) -> TEAComponent:
    uuid = str(component.uuid)
    return _component(
        component,
        store.relationships.component_versions_map([uuid]).get(uuid, []),
        store.relationships.releases_of_component(uuid),
    )


def build_component_detail_response(store: TeaStore, component: TeaComponent) -> TEAComponentDetail:
    summary = build_component_response(store, component)
    return TEAComponentDetail(
        **summary.model_dump(),
        identifier=summary.uuid,
        barcode=component.barcode,
        sku=component.sku,
        vendor=component.vendor,
        type=component.type,
        namespace=component.namespace,
        version=component.version,
        qualifiers=component.qualifiers,
        subpath=component.subpath,
    )


def build_component_list(store: TeaStore, components: Sequence[TeaComponent]) -> list[TEAComponent]:
    uuids = [c.uuid for c in components]
    versions = store.relationships.component_versions_map(uuids)
    releases = store.relationships.releases_of_components_map(uuids)
    return [
        _component(c, versions.get(str(c.uuid), []), releases.get(str(c.uuid), [])) for c in components
    ]


# =============================================================================
# Releases
# =============================================================================


def build_release_response(store: TeaStore, release: TeaRelease) -> TEARelease:
    uuid = str(release.uuid)
    return TEARelease(
        uuid=uuid,
        identifier=uuid,
        productUuid=str(release.product_id),
        tag=release.tag,
        version=release.version,
        name=release.name,
        description=release.description,
        releaseDate=release.release_date,
        validUntilDate=release.valid_until_date,
        prerelease=release.prerelease,
        draft=release.draft,
        components=store.relationships.components_of_release(uuid),
    )


def _merge_identifiers(components: list[TeaComponent]) -> list[TEAIdentifier]:
    seen: set[tuple[str, str]] = set()
    merged: list[TEAIdentifier] = []
    for component in components:
        for identifier in component.identifiers:
            key = (identifier.idType, identifier.idValue)
            if key not in seen:
                seen.add(key)
                merged.append(identifier)
    return merged


def build_release_list(store: TeaStore, releases: Sequence[TeaRelease]) -> list[TEAReleaseSummary]:
    """
    Build list/get release summaries.

    ``identifiers`` is the union of the release components' identifiers and
    ``collectionReferences`` the collections covering the release's product.
    """
    component_ids = store.relationships.components_of_releases_map(r.uuid for r in releases)
    all_component_ids = {cid for ids in component_ids.values() for cid in ids}
    components = {
        str(c.uuid): c
        for c in TeaComponent.objects.filter(uuid__in=all_component_ids).prefetch_related("identifier_rows")
    }
    collections = store.relationships.collections_of_products_map({r.product_id for r in releases})

    results = []
    for release in releases:
        release_components = [
            components[cid] for cid in component_ids.get(str(release.uuid), []) if cid in components
        ]
        results.append(
            TEAReleaseSummary(
                uuid=str(release.uuid),
                version=release.version,
                releaseDate=release.release_date,
                preRelease=release.prerelease,
                identifiers=_merge_identifiers(release_components),
                collectionReferences=collections.get(str(release.product_id), []),
            )
        )
    return results


def build_release_summary(store: TeaStore, release: TeaRelease) -> TEAReleaseSummary:
    return build_release_list(store, [release])[0]


# =============================================================================
# Collections
# =============================================================================


def _collection(collection: TeaCollection, products: list[str]) -> TEACollection:
    uuid = str(collection.uuid)
    return TEACollection(
        uuid=uuid,
        identifier=uuid,
        name=collection.name,
        description=collection.description,
        version=1,
        releaseDate=collection.created_at,
        updateReason=collection.update_reason,
        artifacts=collection.artifacts,
        lifecycle=collection.lifecycle,
        products=products,
    )


def build_collection_response(store: TeaStore, collection: TeaCollection) -> TEACollection:
    return _collection(collection, store.relationships.products_of_collection(str(collection.uuid)))


def build_collection_list(store: TeaStore, collections: Sequence[TeaCollection]) -> list[TEACollection]:
    products = store.relationships.products_of_collections_map(c.uuid for c in collections)
    return [_collection(c, products.get(str(c.uuid), [])) for c in collections]

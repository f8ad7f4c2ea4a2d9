"""
TEA (Transparency Exchange API) endpoints.

Every endpoint except ``/health`` requires a Django session. The store
handle is built per request for the caller's current team and passed to the
orchestrators in ``teahub.apps.tea.services``; domain errors raised there are
turned into ``{"error": ...}`` responses by the handlers in ``teahub.apis``.
"""

from __future__ import annotations

from django.conf import settings
from django.http import HttpRequest
from ninja import Query, Router
from ninja.security import django_auth

from teahub.apps.core.domain.exceptions import AuthenticationRequiredError
from teahub.apps.teams.utils import get_current_team_id
from teahub.logging import getLogger

from .mappers import (
    build_collection_list,
    build_collection_response,
    build_component_detail_response,
    build_component_list,
    build_component_response,
    build_pagination,
    build_product_list,
    build_product_response,
    build_release_list,
    build_release_response,
    build_release_summary,
)
from .schemas import (
    CollectionCreateSchema,
    CollectionPatchSchema,
    ComponentCreateSchema,
    ComponentPatchSchema,
    HealthResponse,
    IdentifierType,
    ProductCreateSchema,
    ProductPatchSchema,
    ReleaseCreateSchema,
    ReleasePatchSchema,
    TEACollection,
    TEAComponent,
    TEAComponentDetail,
    TEAErrorResponse,
    TEAPaginatedCollectionResponse,
    TEAPaginatedComponentResponse,
    TEAPaginatedProductResponse,
    TEAPaginatedReleaseResponse,
    TEAProduct,
    TEARelease,
    TEAReleaseSummary,
)
from .services import collections as collection_service
from .services import components as component_service
from .services import products as product_service
from .services import releases as release_service
from .store import TeaStore

log = getLogger(__name__)

router = Router(tags=["TEA"], auth=django_auth)

DEFAULT_PAGE_SIZE = settings.TEA_DEFAULT_PAGE_SIZE

_ERRORS = {400: TEAErrorResponse, 401: TEAErrorResponse, 403: TEAErrorResponse, 404: TEAErrorResponse}


def _get_store(request: HttpRequest) -> TeaStore:
    """Build the store handle for the team the request acts on behalf of."""
    team_id = get_current_team_id(request)
    if team_id is None:
        raise AuthenticationRequiredError("No workspace selected for the current user")
    return TeaStore(team_id)


@router.get("/health", response={200: HealthResponse}, auth=None, summary="Health check")
def health(request: HttpRequest):
    return 200, HealthResponse(status="ok")


# =============================================================================
# Product Endpoints
# =============================================================================


@router.post("/product", response={201: TEAProduct, **_ERRORS}, summary="Create product")
def create_product(request: HttpRequest, payload: ProductCreateSchema):
    store = _get_store(request)
    product = product_service.create_product(store, payload)
    return 201, build_product_response(store, product)


@router.get("/product", response={200: TEAPaginatedProductResponse, **_ERRORS}, summary="List products")
def list_products(
    request: HttpRequest,
    pageOffset: int = Query(0, ge=0, description="Number of items to skip"),
    pageSize: int = Query(DEFAULT_PAGE_SIZE, ge=1, description="Page size, capped at the configured maximum"),
    barcode: str | None = Query(None, max_length=255),
    sku: str | None = Query(None, max_length=255),
    vendorUuid: str | None = Query(None, max_length=255),
    idType: IdentifierType | None = Query(None, description="Type of identifier to filter by"),
    idValue: str | None = Query(None, max_length=2048, description="Identifier value to filter by"),
):
    store = _get_store(request)
    page = product_service.list_products(
        store,
        page_offset=pageOffset,
        page_size=pageSize,
        barcode=barcode,
        sku=sku,
        vendor_uuid=vendorUuid,
        id_type=idType,
        id_value=idValue,
    )
    return 200, TEAPaginatedProductResponse(
        data=build_product_list(store, page.items),
        pagination=build_pagination(page),
    )


@router.get("/product/{uuid}", response={200: TEAProduct, **_ERRORS}, summary="Get product")
def get_product(request: HttpRequest, uuid: str):
    store = _get_store(request)
    return 200, build_product_response(store, product_service.get_product(store, uuid))


@router.patch("/product/{uuid}", response={200: TEAProduct, **_ERRORS}, summary="Update product")
def update_product(request: HttpRequest, uuid: str, payload: ProductPatchSchema):
    store = _get_store(request)
    product = product_service.update_product(store, uuid, payload)
    return 200, build_product_response(store, product)


@router.delete("/product/{uuid}", response={204: None, **_ERRORS}, summary="Delete product")
def delete_product(request: HttpRequest, uuid: str):
    product_service.delete_product(_get_store(request), uuid)
    return 204, None


# =============================================================================
# Component Endpoints
# =============================================================================


@router.post("/component", response={201: TEAComponentDetail, **_ERRORS}, summary="Create component")
def create_component(request: HttpRequest, payload: ComponentCreateSchema):
    store = _get_store(request)
    component = component_service.create_component(store, payload)
    return 201, build_component_detail_response(store, component)


@router.get("/component", response={200: TEAPaginatedComponentResponse, **_ERRORS}, summary="List components")
def list_components(
    request: HttpRequest,
    pageOffset: int = Query(0, ge=0),
    pageSize: int = Query(DEFAULT_PAGE_SIZE, ge=1),
    idType: IdentifierType | None = Query(None),
    idValue: str | None = Query(None, max_length=2048),
):
    store = _get_store(request)
    page = component_service.list_components(
        store, page_offset=pageOffset, page_size=pageSize, id_type=idType, id_value=idValue
    )
    return 200, TEAPaginatedComponentResponse(
        data=build_component_list(store, page.items),
        pagination=build_pagination(page),
    )


@router.get("/component/{uuid}", response={200: TEAComponent, **_ERRORS}, summary="Get component")
def get_component(request: HttpRequest, uuid: str):
    store = _get_store(request)
    return 200, build_component_response(store, component_service.get_component(store, uuid))


@router.patch("/component/{uuid}", response={200: TEAComponentDetail, **_ERRORS}, summary="Update component")
def update_component(request: HttpRequest, uuid: str, payload: ComponentPatchSchema):
    store = _get_store(request)
    component = component_service.update_component(store, uuid, payload)
    return 200, build_component_detail_response(store, component)


@router.delete("/component/{uuid}", response={204: None, **_ERRORS}, summary="Delete component")
def delete_component(request: HttpRequest, uuid: str):
    component_service.delete_component(_get_store(request), uuid)
    return 204, None


# =============================================================================
# Release Endpoints
# =============================================================================


@router.post("/release", response={201: TEARelease, **_ERRORS}, summary="Create release")
def create_release(request: HttpRequest, payload: ReleaseCreateSchema):
    store = _get_store(request)
    release = release_service.create_release(store, payload)
    return 201, build_release_response(store, release)


@router.get("/release", response={200: TEAPaginatedReleaseResponse, **_ERRORS}, summary="List releases")
def list_releases(
    request: HttpRequest,
    pageOffset: int = Query(0, ge=0),
    pageSize: int = Query(DEFAULT_PAGE_SIZE, ge=1),
    idType: IdentifierType | None = Query(None),
    idValue: str | None = Query(None, max_length=2048),
):
    store = _get_store(request)
    page = release_service.list_releases(
        store, page_offset=pageOffset, page_size=pageSize, id_type=idType, id_value=idValue
    )
    return 200, TEAPaginatedReleaseResponse(
        data=build_release_list(store, page.items),
        pagination=build_pagination(page),
    )


@router.get("/release/{uuid}", response={200: TEAReleaseSummary, **_ERRORS}, summary="Get release")
def get_release(request: HttpRequest, uuid: str):
    store = _get_store(request)
    return 200, build_release_summary(store, release_service.get_release(store, uuid))


@router.patch("/release/{uuid}", response={200: TEARelease, **_ERRORS}, summary="Update release")
def update_release(request: HttpRequest, uuid: str, payload: ReleasePatchSchema):
    store = _get_store(request)
    release = release_service.update_release(store, uuid, payload)
    return 200, build_release_response(store, release)


@router.delete("/release/{uuid}", response={204: None, **_ERRORS}, summary="Delete release")
def delete_release(request: HttpRequest, uuid: str):
    release_service.delete_release(_get_store(request), uuid)
    return 204, None


# =============================================================================
# Collection Endpoints
# =============================================================================


@router.post("/collection", response={201: TEACollection, **_ERRORS}, summary="Create collection")
def create_collection(request: HttpRequest, payload: CollectionCreateSchema):
    store = _get_store(request)
    collection = collection_service.create_collection(store, payload)
    return 201, build_collection_response(store, collection)


@router.get("/collection", response={200: TEAPaginatedCollectionResponse, **_ERRORS}, summary="List collections")
def list_collections(
    request: HttpRequest,
    pageOffset: int = Query(0, ge=0),
    pageSize: int = Query(DEFAULT_PAGE_SIZE, ge=1),
):
    store = _get_store(request)
    page = collection_service.list_collections(store, page_offset=pageOffset, page_size=pageSize)
    return 200, TEAPaginatedCollectionResponse(
        data=build_collection_list(store, page.items),
        pagination=build_pagination(page),
    )


@router.get("/collection/{uuid}", response={200: TEACollection, **_ERRORS}, summary="Get collection")
def get_collection(request: HttpRequest, uuid: str):
    store = _get_store(request)
    return 200, build_collection_response(store, collection_service.get_collection(store, uuid))


@router.patch("/collection/{uuid}", response={200: TEACollection, **_ERRORS}, summary="Update collection")
def update_collection(request: HttpRequest, uuid: str, payload: CollectionPatchSchema):
    store = _get_store(request)
    collection = collection_service.update_collection(store, uuid, payload)
    return 200, build_collection_response(store, collection)


@router.delete("/collection/{uuid}", response={204: None, **_ERRORS}, summary="Delete collection")
def delete_collection(request: HttpRequest, uuid: str):
    collection_service.delete_collection(_get_store(request), uuid)
    return 204, None

"""Product orchestration: create, read, patch and cascade delete."""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db.models import Q

from teahub.apps.core.services.logging import log_info
from teahub.logging import getLogger

from ..models import TeaProduct
from ..schemas import ProductCreateSchema, ProductPatchSchema
from ..validators import require_uuid
from .common import normalize_page, patch_changes, require_fields

if TYPE_CHECKING:
    from ..store import Page, TeaStore

log = getLogger(__name__)

PRODUCT_PATCH_FIELDS = {
    "name": "name",
    "type": "type",
    "namespace": "namespace",
    "version": "version",
    "barcode": "barcode",
    "sku": "sku",
    "vendorUuid": "vendor_uuid",
    "subpath": "subpath",
    "qualifiers": "qualifiers",
    "identifiers": "identifiers",
}
PRODUCT_REQUIRED_FIELDS = ("name", "type", "qualifiers", "identifiers")


def create_product(store: TeaStore, payload: ProductCreateSchema) -> TeaProduct:
    require_fields(payload, "name", "type")

    with store.atomic():
        product = store.products.create(
            name=payload.name,
            type=payload.type,
            namespace=payload.namespace or "",
            version=payload.version,
            barcode=payload.barcode,
            sku=payload.sku,
            vendor_uuid=payload.vendorUuid,
            subpath=payload.subpath,
            qualifiers=payload.qualifiers or [],
            identifiers=payload.identifiers or [],
        )

    log_info(log, "tea.product.created", product=product.uuid, team=store.team_id)
    return product


def get_product(store: TeaStore, product_uuid: str) -> TeaProduct:
    return store.products.get(require_uuid(product_uuid, "product UUID"))


def list_products(
    store: TeaStore,
    *,
    page_offset: int = 0,
    page_size: int = 100,
    barcode: str | None = None,
    sku: str | None = None,
    vendor_uuid: str | None = None,
    id_type: str | None = None,
    id_value: str | None = None,
) -> Page[TeaProduct]:
    filters = Q()
    if barcode:
        filters &= Q(barcode=barcode)
    if sku:
        filters &= Q(sku=sku)
    if vendor_uuid:
        filters &= Q(vendor_uuid=vendor_uuid)
    if id_type and id_value:
        filters &= store.products.identifier_filter(id_type, id_value)

    page_offset, page_size = normalize_page(page_offset, page_size)
    return store.products.list(filters, page_offset, page_size)


def update_product(store: TeaStore, product_uuid: str, payload: ProductPatchSchema) -> TeaProduct:
    product = get_product(store, product_uuid)
    changes = patch_changes(
        payload,
        PRODUCT_PATCH_FIELDS,
        required=PRODUCT_REQUIRED_FIELDS,
        empty_as={"namespace": ""},
    )

    with store.atomic():
        product = store.products.update(product, changes)

    log_info(log, "tea.product.updated", product=product.uuid, fields=",".join(sorted(changes)) or None)
    return product


def delete_product(store: TeaStore, product_uuid: str) -> None:
    store.relationships.cascade_delete_product(require_uuid(product_uuid, "product UUID"))

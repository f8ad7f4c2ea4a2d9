"""Component orchestration; a component is always created inside a product."""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db.models import Q

from teahub.apps.core.services.logging import log_info
from teahub.logging import getLogger

from ..models import TeaComponent
from ..schemas import ComponentCreateSchema, ComponentPatchSchema
from ..validators import require_uuid
from .common import normalize_page, patch_changes, require_fields

if TYPE_CHECKING:
    from ..store import Page, TeaStore

log = getLogger(__name__)

COMPONENT_PATCH_FIELDS = {
    "name": "name",
    "type": "type",
    "namespace": "namespace",
    "version": "version",
    "barcode": "barcode",
    "sku": "sku",
    "vendor": "vendor",
    "subpath": "subpath",
    "qualifiers": "qualifiers",
    "identifiers": "identifiers",
}
COMPONENT_REQUIRED_FIELDS = ("name", "type", "qualifiers", "identifiers")


def create_component(store: TeaStore, payload: ComponentCreateSchema) -> TeaComponent:
    """
    Create a component and its association with the owning product.

    The component row and the association row are written in one
    transaction, so a failed association never leaves an orphan component.
    """
    require_fields(payload, "name", "type", "productIdentifier")
    product = store.products.get(require_uuid(payload.productIdentifier, "productIdentifier"))

    with store.atomic():
        component = store.components.create(
            name=payload.name,
            type=payload.type,
            namespace=payload.namespace or "",
            version=payload.version,
            barcode=payload.barcode,
            sku=payload.sku,
            vendor=payload.vendor,
            subpath=payload.subpath,
            qualifiers=payload.qualifiers or [],
            identifiers=payload.identifiers or [],
        )
        store.relationships.link_product_component(product, component)

    log_info(log, "tea.component.created", component=component.uuid, product=product.uuid, team=store.team_id)
    return component


def get_component(store: TeaStore, component_uuid: str) -> TeaComponent:
    return store.components.get(require_uuid(component_uuid, "component UUID"))


def list_components(
    store: TeaStore,
    *,
    page_offset: int = 0,
    page_size: int = 100,
    id_type: str | None = None,
    id_value: str | None = None,
) -> Page[TeaComponent]:
    filters = Q()
    if id_type and id_value:
        filters &= store.components.identifier_filter(id_type, id_value)

    page_offset, page_size = normalize_page(page_offset, page_size)
    return store.components.list(filters, page_offset, page_size)


def update_component(store: TeaStore, component_uuid: str, payload: ComponentPatchSchema) -> TeaComponent:
    component = get_component(store, component_uuid)
    changes = patch_changes(
        payload,
        COMPONENT_PATCH_FIELDS,
        required=COMPONENT_REQUIRED_FIELDS,
        empty_as={"namespace": ""},
    )

    with store.atomic():
        component = store.components.update(component, changes)

    log_info(log, "tea.component.updated", component=component.uuid, fields=",".join(sorted(changes)) or None)
    return component


def delete_component(store: TeaStore, component_uuid: str) -> None:
    store.relationships.cascade_delete_component(require_uuid(component_uuid, "component UUID"))

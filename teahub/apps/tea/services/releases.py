"""Release orchestration; releases are attributed to the product owning their component."""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db.models import Q

from teahub.apps.core.services.logging import log_info
from teahub.logging import getLogger

from ..models import TeaRelease
from ..schemas import ReleaseCreateSchema, ReleasePatchSchema
from ..validators import require_uuid
from .common import normalize_page, patch_changes, require_fields

if TYPE_CHECKING:
    from ..store import Page, TeaStore

log = getLogger(__name__)

RELEASE_PATCH_FIELDS = {
    "version": "version",
    "releaseDate": "release_date",
    "tag": "tag",
    "name": "name",
    "description": "description",
    "validUntilDate": "valid_until_date",
    "prerelease": "prerelease",
    "draft": "draft",
}
RELEASE_REQUIRED_FIELDS = ("version", "releaseDate", "tag", "prerelease", "draft")


def derive_tag(version: str) -> str:
    return f"v{version}"


def create_release(store: TeaStore, payload: ReleaseCreateSchema) -> TeaRelease:
    require_fields(payload, "componentIdentifier", "version", "releaseDate")
    component = store.components.get(require_uuid(payload.componentIdentifier, "componentIdentifier"))

    product_hint = None
    if payload.productIdentifier:
        product_hint = require_uuid(payload.productIdentifier, "productIdentifier")
    product_uuid = store.relationships.resolve_release_product(str(component.uuid), product_hint)
    product = store.products.get(product_uuid)

    prerelease = payload.preRelease if payload.preRelease is not None else payload.prerelease

    with store.atomic():
        release = store.releases.create(
            product=product,
            tag=payload.tag or derive_tag(payload.version),
            version=payload.version,
            name=payload.name,
            description=payload.description,
            release_date=payload.releaseDate,
            valid_until_date=payload.validUntilDate,
            prerelease=bool(prerelease),
            draft=bool(payload.draft),
        )
        store.relationships.link_release_component(release, component)

    log_info(
        log,
        "tea.release.created",
        release=release.uuid,
        component=component.uuid,
        product=product.uuid,
        tag=release.tag,
    )
    return release


def get_release(store: TeaStore, release_uuid: str) -> TeaRelease:
    return store.releases.get(require_uuid(release_uuid, "release UUID"))


def list_releases(
    store: TeaStore,
    *,
    page_offset: int = 0,
    page_size: int = 100,
    id_type: str | None = None,
    id_value: str | None = None,
) -> Page[TeaRelease]:
    filters = Q()
    if id_type and id_value:
        filters &= store.components.identifier_filter(id_type, id_value, prefix="component_links__component__")

    page_offset, page_size = normalize_page(page_offset, page_size)
    return store.releases.list(filters, page_offset, page_size)


def update_release(store: TeaStore, release_uuid: str, payload: ReleasePatchSchema) -> TeaRelease:
    """
    Patch a release.

    A tag that still equals the one derived from the old version follows a
    version change unless the same request sets the tag explicitly.
    """
    release = get_release(store, release_uuid)
    changes = patch_changes(payload, RELEASE_PATCH_FIELDS, required=RELEASE_REQUIRED_FIELDS)

    if "version" in changes and "tag" not in changes and release.tag == derive_tag(release.version):
        changes["tag"] = derive_tag(changes["version"])

    with store.atomic():
        release = store.releases.update(release, changes)

    log_info(log, "tea.release.updated", release=release.uuid, fields=",".join(sorted(changes)) or None)
    return release


def delete_release(store: TeaStore, release_uuid: str) -> None:
    store.relationships.cascade_delete_release(require_uuid(release_uuid, "release UUID"))

"""
Collection orchestration.

Collections are spawned from a release, cover that release's product and
carry the lifecycle value governed by ``teahub.apps.tea.lifecycle``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.utils import timezone

from teahub.apps.core.domain.exceptions import ValidationError
from teahub.apps.core.services.logging import log_info
from teahub.logging import getLogger

from .. import lifecycle
from ..models import TeaCollection, TeaRelease
from ..schemas import CollectionCreateSchema, CollectionPatchSchema, TEAArtifact, TEAUpdateReason
from ..validators import require_uuid
from .common import is_missing, normalize_page, require_fields

if TYPE_CHECKING:
    from ..store import Page, TeaStore

log = getLogger(__name__)


def default_collection_name(release: TeaRelease) -> str:
    return f"Collection for {release.product.name} v{release.version}"


def default_collection_description(release: TeaRelease, update_reason: TEAUpdateReason) -> str:
    description = f"Collection created for release {release.uuid}. Update reason: {update_reason.type}"
    if update_reason.comment:
        description += f" - {update_reason.comment}"
    return description


def derive_update_reason(old: list[TEAArtifact], new: list[TEAArtifact]) -> TEAUpdateReason:
    """Classify an artifact list replacement by how the list length changed."""
    if len(new) > len(old):
        return TEAUpdateReason(type="ARTIFACT_ADDED")
    if len(new) < len(old):
        return TEAUpdateReason(type="ARTIFACT_REMOVED")
    return TEAUpdateReason(type="ARTIFACT_UPDATED")


def create_collection(store: TeaStore, payload: CollectionCreateSchema) -> TeaCollection:
    require_fields(payload, "releaseIdentifier")
    if payload.updateReason is None or is_missing(payload.updateReason.type):
        raise ValidationError("Missing required field: updateReason.type")

    release = store.releases.get(require_uuid(payload.releaseIdentifier, "releaseIdentifier"))
    update_reason = TEAUpdateReason(type=payload.updateReason.type, comment=payload.updateReason.comment)
    now = timezone.now()

    with store.atomic():
        collection = store.collections.create(
            name=payload.name or default_collection_name(release),
            description=payload.description or default_collection_description(release, update_reason),
            artifacts=payload.artifacts or [],
            lifecycle=lifecycle.create_initial_lifecycle(str(release.uuid), now=now),
            update_reason=update_reason,
            created_at=now,
            updated_at=now,
        )
        store.relationships.link_collection_product(collection, release.product)

    log_info(
        log,
        "tea.collection.created",
        collection=collection.uuid,
        release=release.uuid,
        reason=update_reason.type,
    )
    return collection


def get_collection(store: TeaStore, collection_uuid: str) -> TeaCollection:
    return store.collections.get(require_uuid(collection_uuid, "collection UUID"))


def list_collections(store: TeaStore, *, page_offset: int = 0, page_size: int = 100) -> Page[TeaCollection]:
    page_offset, page_size = normalize_page(page_offset, page_size)
    return store.collections.list(None, page_offset, page_size)


def update_collection(store: TeaStore, collection_uuid: str, payload: CollectionPatchSchema) -> TeaCollection:
    """
    Patch a collection.

    An explicit ``lifecycle`` runs the transition table. Without one, a new
    ``artifacts`` list forces the lifecycle into ``updated`` and, unless an
    ``updateReason`` is sent too, derives the update reason from the change.
    """
    collection = get_collection(store, collection_uuid)
    sent = payload.model_fields_set
    changes: dict = {}

    for field in ("name", "artifacts", "updateReason", "lifecycle"):
        if field in sent and getattr(payload, field) is None:
            raise ValidationError(f"Field '{field}' cannot be null or empty")

    if "name" in sent:
        if not payload.name:
            raise ValidationError("Field 'name' cannot be null or empty")
        changes["name"] = payload.name
    if "description" in sent:
        changes["description"] = payload.description

    if "artifacts" in sent:
        changes["artifacts"] = payload.artifacts
        if "updateReason" not in sent:
            changes["update_reason"] = derive_update_reason(collection.artifacts, payload.artifacts)
    if "updateReason" in sent:
        changes["update_reason"] = payload.updateReason

    if "lifecycle" in sent:
        changes["lifecycle"] = lifecycle.transition(
            collection.lifecycle, payload.lifecycle.phase, payload.lifecycle.description
        )
    elif "artifacts" in sent:
        changes["lifecycle"] = lifecycle.artifacts_updated(collection.lifecycle)

    with store.atomic():
        collection = store.collections.update(collection, changes)

    log_info(
        log,
        "tea.collection.updated",
        collection=collection.uuid,
        phase=collection.lifecycle.phase,
        fields=",".join(sorted(changes)) or None,
    )
    return collection


def delete_collection(store: TeaStore, collection_uuid: str) -> None:
    store.relationships.delete_collection(require_uuid(collection_uuid, "collection UUID"))

"""
Team scoped store handle for TEA entities.

A ``TeaStore`` is built once per request by the API layer for the team the
caller acts on behalf of and handed to the orchestrators. Nothing in this
module keeps state between requests.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Generic, Iterable, Iterator, TypeVar

from django.db import DatabaseError, models, transaction
from django.db.models import Q, QuerySet
from django.utils import timezone

from teahub.apps.core.domain.exceptions import AccessDeniedError, InternalError, NotFoundError
from teahub.apps.core.services.logging import log_warning
from teahub.logging import getLogger

from .models import (
    ComponentIdentifier,
    ProductIdentifier,
    TeaCollection,
    TeaComponent,
    TeaProduct,
    TeaRelease,
)
from .relationships import RelationshipManager
from .schemas import TEAIdentifier

log = getLogger(__name__)

M = TypeVar("M", bound=models.Model)


@dataclass(frozen=True)
class Page(Generic[M]):
    items: list[M]
    total: int
    page_offset: int
    page_size: int

    @property
    def has_next(self) -> bool:
        return self.page_offset + self.page_size < self.total

    @property
    def has_previous(self) -> bool:
        return self.page_offset > 0


class EntityStore(Generic[M]):
    """CRUD and list operations for one entity model, scoped to a team."""

    def __init__(
        self,
        model: type[M],
        team_id: int,
        *,
        label: str,
        select_related: Iterable[str] = (),
        prefetch_related: Iterable[str] = (),
    ) -> None:
        self.model = model
        self.team_id = team_id
        self.label = label
        self.select_related = tuple(select_related)
        self.prefetch_related = tuple(prefetch_related)

    def queryset(self) -> QuerySet[M]:
        qs = self.model.objects.filter(team_id=self.team_id)
        if self.select_related:
            qs = qs.select_related(*self.select_related)
        if self.prefetch_related:
            qs = qs.prefetch_related(*self.prefetch_related)
        return qs

    def create(self, **fields: Any) -> M:
        now = timezone.now()
        fields.setdefault("created_at", now)
        fields.setdefault("updated_at", now)
        instance = self.model(team_id=self.team_id, **fields)
        instance.save(force_insert=True)
        return instance

    def get(self, uuid: str) -> M:
        """
        Fetch one entity.

        Raises:
            NotFoundError: If no entity has this uuid
            AccessDeniedError: If the entity belongs to another team
        """
        qs = self.model.objects.all()
        if self.select_related:
            qs = qs.select_related(*self.select_related)
        if self.prefetch_related:
            qs = qs.prefetch_related(*self.prefetch_related)
        try:
            instance = qs.get(pk=uuid)
        except self.model.DoesNotExist:
            raise NotFoundError(f"{self.label} not found")

        if instance.team_id != self.team_id:
            log_warning(log, "tea.access.denied", entity=self.label.lower(), uuid=uuid, team=self.team_id)
            raise AccessDeniedError(f"Access denied to {self.label.lower()}")
        return instance

    def list(self, filters: Q | None = None, page_offset: int = 0, page_size: int = 100) -> Page[M]:
        qs = self.queryset()
        if filters is not None:
            qs = qs.filter(filters).distinct()

        total = qs.count()
        items = list(qs[page_offset : page_offset + page_size])
        return Page(items=items, total=total, page_offset=page_offset, page_size=page_size)

    def update(self, entity: M | str, changes: dict[str, Any]) -> M:
        """Apply ``changes`` (model field names) to an entity given by uuid or instance."""
        instance = entity if isinstance(entity, self.model) else self.get(entity)
        for field, value in changes.items():
            setattr(instance, field, value)
        instance.updated_at = timezone.now()
        instance.save(update_fields=[*changes.keys(), "updated_at"])
        return instance

    def delete(self, uuid: str) -> None:
        """Delete the entity row only; association rows are the relationship manager's job."""
        instance = self.get(uuid)
        instance.delete()


class PackageEntityStore(EntityStore[M]):
    """Store for products and components, which keep identifiers as ordered child rows."""

    def __init__(
        self,
        model: type[M],
        team_id: int,
        *,
        label: str,
        identifier_model: type[models.Model],
        owner_field: str,
    ) -> None:
        super().__init__(model, team_id, label=label, prefetch_related=("identifier_rows",))
        self.identifier_model = identifier_model
        self.owner_field = owner_field

    def _write_identifiers(self, instance: M, identifiers: Iterable[TEAIdentifier]) -> None:
        self.identifier_model.objects.filter(**{self.owner_field: instance}).delete()
        self.identifier_model.objects.bulk_create(
            [
                self.identifier_model(
                    **{self.owner_field: instance},
                    id_type=identifier.idType,
                    id_value=identifier.idValue,
                    position=position,
                )
                for position, identifier in enumerate(identifiers)
            ]
        )
        # Drop any prefetched rows so readers see the new list.
        getattr(instance, "_prefetched_objects_cache", {}).pop("identifier_rows", None)

    def create(self, identifiers: Iterable[TEAIdentifier] = (), **fields: Any) -> M:
        with transaction.atomic():
            instance = super().create(**fields)
            self._write_identifiers(instance, identifiers)
        return instance

    def update(self, entity: M | str, changes: dict[str, Any]) -> M:
        changes = dict(changes)
        identifiers = changes.pop("identifiers", None)
        with transaction.atomic():
            instance = super().update(entity, changes)
            if identifiers is not None:
                self._write_identifiers(instance, identifiers)
        return instance

    @staticmethod
    def identifier_filter(id_type: str, id_value: str, prefix: str = "") -> Q:
        """Match entities carrying the identifier; ``prefix`` walks relations first."""
        return Q(**{f"{prefix}identifier_rows__id_type": id_type, f"{prefix}identifier_rows__id_value": id_value})


class TeaStore:
    """
    Per-request store handle.

    Bundles the entity stores and the relationship manager for one team and
    owns the transaction boundary used for multi-row writes.
    """

    def __init__(self, team_id: int) -> None:
        self.team_id = team_id
        self.products: PackageEntityStore[TeaProduct] = PackageEntityStore(
            TeaProduct, team_id, label="Product", identifier_model=ProductIdentifier, owner_field="product"
        )
        self.components: PackageEntityStore[TeaComponent] = PackageEntityStore(
            TeaComponent, team_id, label="Component", identifier_model=ComponentIdentifier, owner_field="component"
        )
        self.releases: EntityStore[TeaRelease] = EntityStore(
            TeaRelease, team_id, label="Release", select_related=("product",)
        )
        self.collections: EntityStore[TeaCollection] = EntityStore(TeaCollection, team_id, label="Collection")
        self.relationships = RelationshipManager(self)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """
        Run a multi-row write as one transaction.

        Database failures roll the whole block back and surface as
        ``InternalError``; domain errors pass through unchanged after rollback.
        """
        try:
            with transaction.atomic():
                yield
        except DatabaseError as e:
            log.exception("Store transaction failed for team %s", self.team_id)
            raise InternalError(f"Store transaction failed: {e}") from e

import uuid
from typing import get_args

from django.apps import apps
from django.db import models
from django.utils import timezone

from teahub.apps.teams.models import Team

from .fields import EmbeddedSchemaField
from .schemas import PackageType, Qualifiers, TEAArtifact, TEAIdentifier, TEALifecycle, TEAUpdateReason

PACKAGE_TYPE_CHOICES = [(value, value) for value in get_args(PackageType)]


def _table(name: str) -> str:
    return apps.get_app_config("tea").label + "_" + name


class TeaEntity(models.Model):
    """Columns shared by every top-level TEA entity."""

    uuid = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    team = models.ForeignKey(Team, on_delete=models.CASCADE)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        abstract = True

    def __str__(self) -> str:
        return str(self.uuid)


class PackageEntity(TeaEntity):
    """Identifying attributes of a software package (products and components)."""

    name = models.CharField(max_length=255)
    type = models.CharField(max_length=32, choices=PACKAGE_TYPE_CHOICES, default="generic")
    namespace = models.CharField(max_length=255, blank=True, default="")
    version = models.CharField(max_length=255, null=True, blank=True)
    barcode = models.CharField(max_length=255, null=True, blank=True)
    sku = models.CharField(max_length=255, null=True, blank=True)
    subpath = models.CharField(max_length=1024, null=True, blank=True)
    qualifiers = EmbeddedSchemaField(schema=Qualifiers, default=list, blank=True)

    class Meta:
        abstract = True

    def __str__(self) -> str:
        return f"{self.name} ({self.uuid})"

    @property
    def identifiers(self) -> list[TEAIdentifier]:
        return [row.to_schema() for row in self.identifier_rows.all()]


class TeaProduct(PackageEntity):
    vendor_uuid = models.CharField(max_length=255, null=True, blank=True)

    class Meta:
        db_table = _table("products")
        ordering = ["-created_at", "uuid"]
        indexes = [
            models.Index(fields=["team", "created_at"], name="tea_prod_team_created_idx"),
        ]


class TeaComponent(PackageEntity):
    vendor = models.CharField(max_length=255, null=True, blank=True)

    class Meta:
        db_table = _table("components")
        ordering = ["-created_at", "uuid"]
        indexes = [
            models.Index(fields=["team", "created_at"], name="tea_comp_team_created_idx"),
        ]


class IdentifierRow(models.Model):
    """One entry of an entity's ordered identifier list."""

    class IdentifierType(models.TextChoices):
        CPE = "cpe", "CPE"
        TEI = "tei", "TEI"
        PURL = "purl", "PURL"
        SWID = "swid", "SWID"

    id_type = models.CharField(max_length=8, choices=IdentifierType.choices)
    id_value = models.CharField(max_length=2048)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        abstract = True

    def to_schema(self) -> TEAIdentifier:
        return TEAIdentifier(idType=self.id_type, idValue=self.id_value)


class ProductIdentifier(IdentifierRow):
    product = models.ForeignKey(TeaProduct, on_delete=models.CASCADE, related_name="identifier_rows")

    class Meta:
        db_table = _table("product_identifiers")
        ordering = ["position", "id"]
        indexes = [models.Index(fields=["id_type", "id_value"], name="tea_product_ident_idx")]


class ComponentIdentifier(IdentifierRow):
    component = models.ForeignKey(TeaComponent, on_delete=models.CASCADE, related_name="identifier_rows")

    class Meta:
        db_table = _table("component_identifiers")
        ordering = ["position", "id"]
        indexes = [models.Index(fields=["id_type", "id_value"], name="tea_component_ident_idx")]


class TeaRelease(TeaEntity):
    product = models.ForeignKey(TeaProduct, on_delete=models.CASCADE, related_name="releases")
    tag = models.CharField(max_length=255)
    version = models.CharField(max_length=255)
    name = models.CharField(max_length=255, null=True, blank=True)
    description = models.TextField(null=True, blank=True)
    release_date = models.DateTimeField()
    valid_until_date = models.DateTimeField(null=True, blank=True)
    prerelease = models.BooleanField(default=False)
    draft = models.BooleanField(default=False)

    class Meta:
        db_table = _table("releases")
        ordering = ["-created_at", "uuid"]
        indexes = [
            models.Index(fields=["team", "created_at"], name="tea_rel_team_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.tag} ({self.uuid})"


class TeaCollection(TeaEntity):
    name = models.CharField(max_length=255)
    description = models.TextField(null=True, blank=True)
    artifacts = EmbeddedSchemaField(schema=list[TEAArtifact], default=list, blank=True)
    lifecycle = EmbeddedSchemaField(schema=TEALifecycle)
    update_reason = EmbeddedSchemaField(schema=TEAUpdateReason)
    products = models.ManyToManyField(TeaProduct, through="CollectionProduct", related_name="collections")

    class Meta:
        db_table = _table("collections")
        ordering = ["-created_at", "uuid"]
        indexes = [
            models.Index(fields=["team", "created_at"], name="tea_coll_team_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.uuid})"


# =============================================================================
# Association records
# =============================================================================


class ProductComponent(models.Model):
    product = models.ForeignKey(TeaProduct, on_delete=models.CASCADE, related_name="component_links")
    component = models.ForeignKey(TeaComponent, on_delete=models.CASCADE, related_name="product_links")
    relationship = models.CharField(max_length=64, null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = _table("product_components")
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(fields=["product", "component"], name="tea_unique_product_component"),
        ]


class ReleaseComponent(models.Model):
    release = models.ForeignKey(TeaRelease, on_delete=models.CASCADE, related_name="component_links")
    component = models.ForeignKey(TeaComponent, on_delete=models.CASCADE, related_name="release_links")
    relationship = models.CharField(max_length=64, null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = _table("release_components")
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(fields=["release", "component"], name="tea_unique_release_component"),
        ]


class CollectionProduct(models.Model):
    collection = models.ForeignKey(TeaCollection, on_delete=models.CASCADE, related_name="product_links")
    product = models.ForeignKey(TeaProduct, on_delete=models.CASCADE, related_name="collection_links")
    relationship = models.CharField(max_length=64, null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = _table("collection_products")
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(fields=["collection", "product"], name="tea_unique_collection_product"),
        ]

"""
TEA (Transparency Exchange API) Pydantic schemas.

Three groups live here:

- embedded structures (identifiers, qualifiers, artifacts, update reasons,
  lifecycle) which are also the single storage schema for the JSON columns,
- request bodies, where every field is optional so the orchestrators can
  report missing required fields by name and PATCH can tell omitted keys
  from explicit nulls,
- response bodies, whose camelCase field names are part of the wire contract.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

# Serializes to UTC with a Z suffix, e.g. 2024-01-01T00:00:00Z
TEADateTime = Annotated[
    datetime,
    PlainSerializer(
        lambda v: v.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        return_type=str,
    ),
]

# Package types follow the PURL specification
PackageType = Literal[
    "alpm",
    "apk",
    "bitbucket",
    "bitnami",
    "cargo",
    "cocoapods",
    "composer",
    "conan",
    "conda",
    "cpan",
    "cran",
    "deb",
    "docker",
    "gem",
    "generic",
    "github",
    "golang",
    "hackage",
    "hex",
    "huggingface",
    "luarocks",
    "maven",
    "mlflow",
    "npm",
    "nuget",
    "oci",
    "pub",
    "pypi",
    "qpkg",
    "rpm",
    "swid",
    "swift",
]

IdentifierType = Literal["cpe", "tei", "purl", "swid"]

ArtifactType = Literal[
    "ATTESTATION",
    "BOM",
    "BUILD_META",
    "CERTIFICATION",
    "FORMULATION",
    "LICENSE",
    "RELEASE_NOTES",
    "SECURITY_TXT",
    "THREAT_MODEL",
    "VULNERABILITIES",
    "OTHER",
]

ChecksumType = Literal[
    "MD5",
    "SHA-1",
    "SHA-256",
    "SHA-384",
    "SHA-512",
    "SHA3-256",
    "SHA3-384",
    "SHA3-512",
    "BLAKE2b-256",
    "BLAKE2b-384",
    "BLAKE2b-512",
    "BLAKE3",
]

UpdateReasonType = Literal[
    "INITIAL_RELEASE",
    "VEX_UPDATED",
    "ARTIFACT_UPDATED",
    "ARTIFACT_ADDED",
    "ARTIFACT_REMOVED",
]

LifecyclePhase = Literal["created", "in-progress", "updated", "completed", "archived", "deprecated"]

Qualifiers = list[dict[str, str]]

# =============================================================================
# Embedded Structures
# =============================================================================


class TEAIdentifier(BaseModel):
    """An identifier with a specified type."""

    model_config = ConfigDict(extra="forbid")

    idType: IdentifierType = Field(..., description="Type of identifier, e.g. purl, cpe")
    idValue: str = Field(..., min_length=1, description="Identifier value")


class TEAChecksum(BaseModel):
    model_config = ConfigDict(extra="forbid")

    algType: ChecksumType
    algValue: str


class TEAArtifactFormat(BaseModel):
    """A downloadable representation of an artifact."""

    model_config = ConfigDict(extra="forbid")

    mimeType: str
    description: str | None = None
    url: str
    signatureUrl: str | None = None
    checksums: list[TEAChecksum] = Field(default_factory=list)


class TEAArtifact(BaseModel):
    """A security-related document or file attached to a collection."""

    model_config = ConfigDict(extra="forbid")

    uuid: str | None = None
    name: str = Field(..., min_length=1)
    type: ArtifactType = "OTHER"
    downloadUrl: str | None = None
    checksums: list[TEAChecksum] = Field(default_factory=list)
    formats: list[TEAArtifactFormat] = Field(default_factory=list)


class TEAUpdateReason(BaseModel):
    """Why a collection version was produced."""

    model_config = ConfigDict(extra="forbid")

    type: UpdateReasonType
    comment: str | None = None


class TEALifecycle(BaseModel):
    """Lifecycle value object carried by every collection."""

    model_config = ConfigDict(extra="forbid")

    phase: LifecyclePhase
    name: str
    description: str | None = None
    startedOn: TEADateTime
    completedOn: TEADateTime | None = None
    lastUpdated: TEADateTime


# =============================================================================
# Request Schemas
# =============================================================================


class _EntityFieldsSchema(BaseModel):
    """Identifying attributes shared by products and components."""

    name: str | None = Field(None, max_length=255)
    type: PackageType | None = None
    namespace: str | None = Field(None, max_length=255)
    version: str | None = Field(None, max_length=255)
    barcode: str | None = Field(None, max_length=255)
    sku: str | None = Field(None, max_length=255)
    subpath: str | None = Field(None, max_length=1024)
    qualifiers: Qualifiers | None = None
    identifiers: list[TEAIdentifier] | None = None


class ProductCreateSchema(_EntityFieldsSchema):
    vendorUuid: str | None = Field(None, max_length=255)


class ProductPatchSchema(_EntityFieldsSchema):
    vendorUuid: str | None = Field(None, max_length=255)


class ComponentCreateSchema(_EntityFieldsSchema):
    vendor: str | None = Field(None, max_length=255)
    productIdentifier: str | None = None


class ComponentPatchSchema(_EntityFieldsSchema):
    vendor: str | None = Field(None, max_length=255)


class ReleaseCreateSchema(BaseModel):
    componentIdentifier: str | None = None
    productIdentifier: str | None = Field(
        None, description="Owning product, required when the component belongs to several products"
    )
    version: str | None = Field(None, max_length=255)
    releaseDate: datetime | None = None
    tag: str | None = Field(None, max_length=255)
    name: str | None = Field(None, max_length=255)
    description: str | None = None
    validUntilDate: datetime | None = None
    preRelease: bool | None = None
    prerelease: bool | None = None
    draft: bool | None = None


class ReleasePatchSchema(BaseModel):
    version: str | None = Field(None, max_length=255)
    releaseDate: datetime | None = None
    tag: str | None = Field(None, max_length=255)
    name: str | None = Field(None, max_length=255)
    description: str | None = None
    validUntilDate: datetime | None = None
    prerelease: bool | None = None
    draft: bool | None = None


class UpdateReasonInputSchema(BaseModel):
    type: UpdateReasonType | None = None
    comment: str | None = None


class CollectionCreateSchema(BaseModel):
    releaseIdentifier: str | None = None
    updateReason: UpdateReasonInputSchema | None = None
    name: str | None = Field(None, max_length=255)
    description: str | None = None
    artifacts: list[TEAArtifact] | None = None


class LifecycleRequestSchema(BaseModel):
    phase: LifecyclePhase
    description: str | None = None


class CollectionPatchSchema(BaseModel):
    name: str | None = Field(None, max_length=255)
    description: str | None = None
    artifacts: list[TEAArtifact] | None = None
    updateReason: TEAUpdateReason | None = None
    lifecycle: LifecycleRequestSchema | None = None


# =============================================================================
# Response Schemas
# =============================================================================


class TEAProduct(BaseModel):
    identifier: str
    name: str
    barcode: str | None = None
    sku: str | None = None
    vendorUuid: str | None = None
    identifiers: list[TEAIdentifier]
    type: str
    namespace: str | None = None
    version: str | None = None
    qualifiers: Qualifiers
    subpath: str | None = None
    components: list[str]


class TEAComponent(BaseModel):
    """List/get shape of a component."""

    uuid: str
    name: str
    identifiers: list[TEAIdentifier]
    versions: list[str]
    releases: list[str]


class TEAComponentDetail(TEAComponent):
    """Create/patch shape of a component."""

    identifier: str
    barcode: str | None = None
    sku: str | None = None
    vendor: str | None = None
    type: str
    namespace: str | None = None
    version: str | None = None
    qualifiers: Qualifiers
    subpath: str | None = None


class TEARelease(BaseModel):
    """Create/patch shape of a release."""

    uuid: str
    identifier: str
    productUuid: str
    tag: str
    version: str
    name: str | None = None
    description: str | None = None
    releaseDate: TEADateTime
    validUntilDate: TEADateTime | None = None
    prerelease: bool
    draft: bool
    components: list[str]


class TEAReleaseSummary(BaseModel):
    """List/get shape of a release."""

    uuid: str
    version: str
    releaseDate: TEADateTime
    preRelease: bool
    identifiers: list[TEAIdentifier]
    collectionReferences: list[str]


class TEACollection(BaseModel):
    uuid: str
    identifier: str
    name: str
    description: str | None = None
    version: int = Field(1, description="Placeholder, always 1")
    releaseDate: TEADateTime
    updateReason: TEAUpdateReason
    artifacts: list[TEAArtifact]
    lifecycle: TEALifecycle
    products: list[str]


class TEAPagination(BaseModel):
    total: int
    pageOffset: int
    pageSize: int
    hasNext: bool
    hasPrevious: bool


class TEAPaginatedProductResponse(BaseModel):
    data: list[TEAProduct]
    pagination: TEAPagination


class TEAPaginatedComponentResponse(BaseModel):
    data: list[TEAComponent]
    pagination: TEAPagination


class TEAPaginatedReleaseResponse(BaseModel):
    data: list[TEAReleaseSummary]
    pagination: TEAPagination


class TEAPaginatedCollectionResponse(BaseModel):
    data: list[TEACollection]
    pagination: TEAPagination


class TEAErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str

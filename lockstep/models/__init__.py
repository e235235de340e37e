"""Lockstep data models — all Pydantic v2, all frozen (immutable)."""

from lockstep.models.actions import (
    Action,
    ActionKind,
    UpdateManifestRevision,
    UpdatePackageManifestDigest,
    WaitForArtifact,
    order_actions,
)
from lockstep.models.references import (
    DependencyReference,
    GroundTruth,
    StructuralIssue,
    normalize_digest,
    normalize_revision,
)
from lockstep.models.registry import (
    ArtifactQuery,
    ArtifactQueryResult,
    Found,
    NotFound,
    TransientError,
)
from lockstep.models.report import ReconciliationReport, UnresolvedProducer
from lockstep.models.repository import (
    MANIFEST_KIND_ORDER,
    ManifestFile,
    ManifestKind,
    Repository,
    RepositoryManifests,
)

__all__ = [
    # repository
    "ManifestKind",
    "MANIFEST_KIND_ORDER",
    "Repository",
    "ManifestFile",
    "RepositoryManifests",
    # references
    "DependencyReference",
    "GroundTruth",
    "StructuralIssue",
    "normalize_revision",
    "normalize_digest",
    # actions
    "Action",
    "ActionKind",
    "UpdateManifestRevision",
    "UpdatePackageManifestDigest",
    "WaitForArtifact",
    "order_actions",
    # registry
    "ArtifactQuery",
    "ArtifactQueryResult",
    "Found",
    "NotFound",
    "TransientError",
    # report
    "ReconciliationReport",
    "UnresolvedProducer",
]

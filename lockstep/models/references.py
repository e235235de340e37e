"""Dependency references and revision/digest normalisation.

A ``DependencyReference`` is one pointer from a consumer manifest to a
producer repository.  Revisions are always full 40-character commit ids and
digests full 64-character sha256 hex strings once a reference exists; entries
that fail those checks become ``StructuralIssue`` records instead.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from lockstep.models.repository import ManifestKind

REVISION_LENGTH = 40
DIGEST_LENGTH = 64

_HEX_DIGITS = frozenset("0123456789abcdef")


def _normalize_hex(value: str, length: int, label: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{label} must be a string")
    normalized = value.strip().lower()
    if len(normalized) != length:
        raise ValueError(
            f"expected {length} hex characters, got {len(normalized)}"
        )
    if not set(normalized) <= _HEX_DIGITS:
        raise ValueError(f"{label} contains non-hex characters")
    return normalized


def normalize_revision(value: str) -> str:
    """Return the canonical form of a git commit id or raise ``ValueError``."""
    return _normalize_hex(value, REVISION_LENGTH, "revision")


def normalize_digest(value: str) -> str:
    """Return the canonical form of a sha256 digest or raise ``ValueError``."""
    return _normalize_hex(value, DIGEST_LENGTH, "digest")


class DependencyReference(BaseModel):
    """A declared revision pin for a producer, scoped to one manifest file."""

    model_config = ConfigDict(frozen=True)

    producer: str
    entry: str  # dependency or package name as written in the manifest
    kind: ManifestKind
    revision: str
    digest: str | None = None  # package-manifest entries only
    artifact_repo: str | None = None  # registry repo name as written, package-manifest only
    manifest: str  # root-relative path of the owning manifest
    repository: str  # owning consumer repository

    @field_validator("revision")
    @classmethod
    def _check_revision(cls, value: str) -> str:
        return normalize_revision(value)

    @field_validator("digest")
    @classmethod
    def _check_digest(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return normalize_digest(value)


class StructuralIssue(BaseModel):
    """A manifest entry that could not be turned into a reference."""

    model_config = ConfigDict(frozen=True)

    manifest: str
    entry: str
    field: str  # e.g. "rev", "sha256", "source"
    value: str
    reason: str

    def sort_key(self) -> tuple[str, str, str]:
        return (self.manifest, self.entry, self.field)


class GroundTruth(BaseModel):
    """The current commit of a producer's own checkout."""

    model_config = ConfigDict(frozen=True)

    producer: str
    revision: str
    path: str  # root-relative checkout directory

    @field_validator("revision")
    @classmethod
    def _check_revision(cls, value: str) -> str:
        return normalize_revision(value)

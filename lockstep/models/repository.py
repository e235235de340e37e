"""Repository and manifest-location models."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class ManifestKind(str, Enum):
    """The three manifest formats a reference can come from."""

    DEPENDENCY_MANIFEST = "dependency-manifest"
    LOCK_FILE = "lock-file"
    PACKAGE_MANIFEST = "package-manifest"


# Report grouping order
MANIFEST_KIND_ORDER: dict[ManifestKind, int] = {
    ManifestKind.DEPENDENCY_MANIFEST: 0,
    ManifestKind.LOCK_FILE: 1,
    ManifestKind.PACKAGE_MANIFEST: 2,
}


class Repository(BaseModel):
    """One checked-out project, a direct subdirectory of the root."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: Path


class ManifestFile(BaseModel):
    """A manifest on disk, addressed both absolutely and relative to the root."""

    model_config = ConfigDict(frozen=True)

    kind: ManifestKind
    path: Path
    relative_path: str  # POSIX, relative to the root


class RepositoryManifests(BaseModel):
    """Everything the locator found for one repository."""

    model_config = ConfigDict(frozen=True)

    repository: Repository
    dependency_manifests: list[ManifestFile] = []
    lock_file: ManifestFile | None = None
    package_manifest: ManifestFile | None = None

    def all_manifests(self) -> list[ManifestFile]:
        """Return every located manifest in kind order."""
        found = list(self.dependency_manifests)
        if self.lock_file is not None:
            found.append(self.lock_file)
        if self.package_manifest is not None:
            found.append(self.package_manifest)
        return found

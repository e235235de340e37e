"""Manifest locator — finds the manifests of every sibling repository.

The root directory holds one checkout per repository.  For each of them the
locator reports the dependency manifest (plus those of any workspace
members), the lock file, and, for the consumer of record only, the package
manifest.  Missing manifests are simply absent from the result, and a
manifest that cannot be parsed contributes no workspace members.
"""

from __future__ import annotations

import logging
from pathlib import Path

from lockstep.config import LockstepConfig
from lockstep.core.documents import ManifestReadError, load_document
from lockstep.models.repository import (
    ManifestFile,
    ManifestKind,
    Repository,
    RepositoryManifests,
)

logger = logging.getLogger(__name__)


class RootUnreadableError(RuntimeError):
    """Raised when the root path is not a readable directory."""


class ManifestLocator:
    """Discovers sibling repositories and their manifest files.

    Parameters
    ----------
    config:
        Supplies the root directory, the consumer of record and the
        manifest file names.
    """

    def __init__(self, config: LockstepConfig) -> None:
        self._config = config
        self._root = Path(config.root)

    @property
    def root(self) -> Path:
        return self._root

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    def discover_repositories(self) -> list[Repository]:
        """Return every non-hidden subdirectory of the root, sorted by name."""
        if not self._root.is_dir():
            raise RootUnreadableError(f"{self._root} is not a directory")
        try:
            children = sorted(self._root.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            raise RootUnreadableError(f"cannot list {self._root}: {exc}") from exc

        repositories = [
            Repository(name=child.name, path=child)
            for child in children
            if child.is_dir() and not child.name.startswith(".")
        ]
        logger.debug(
            "Discovered %d repositories under %s: %s",
            len(repositories),
            self._root,
            ", ".join(r.name for r in repositories),
        )
        return repositories

    # ------------------------------------------------------------------
    # Manifests
    # ------------------------------------------------------------------

    def locate(self) -> list[RepositoryManifests]:
        """Locate the manifests of every repository under the root."""
        return [self.locate_for(repo) for repo in self.discover_repositories()]

    def locate_for(self, repository: Repository) -> RepositoryManifests:
        """Locate the manifests belonging to a single repository."""
        lock_path = repository.path / self._config.lock_file_name
        package_path = repository.path / self._config.package_manifest_name

        lock_file = None
        if lock_path.is_file():
            lock_file = self._manifest(ManifestKind.LOCK_FILE, lock_path)

        package_manifest = None
        if repository.name == self._config.consumer and package_path.is_file():
            package_manifest = self._manifest(ManifestKind.PACKAGE_MANIFEST, package_path)

        return RepositoryManifests(
            repository=repository,
            dependency_manifests=self._dependency_manifests(repository.path),
            lock_file=lock_file,
            package_manifest=package_manifest,
        )

    def _dependency_manifests(self, repo_path: Path) -> list[ManifestFile]:
        """Collect the root dependency manifest and every workspace member's."""
        found: list[ManifestFile] = []
        seen: set[Path] = set()
        pending = [repo_path]

        while pending:
            directory = pending.pop(0)
            manifest_path = directory / self._config.dependency_manifest_name
            if manifest_path in seen or not manifest_path.is_file():
                continue
            seen.add(manifest_path)
            found.append(self._manifest(ManifestKind.DEPENDENCY_MANIFEST, manifest_path))
            pending.extend(self._workspace_members(directory, manifest_path))

        return found

    def _workspace_members(self, directory: Path, manifest_path: Path) -> list[Path]:
        try:
            document = load_document(manifest_path)
        except ManifestReadError as exc:
            # Reported by the reconciler when it loads the same file
            logger.debug("Skipping workspace members of %s: %s", manifest_path, exc.reason)
            return []
        workspace = document.get("workspace")
        if not isinstance(workspace, dict):
            return []

        excluded = {
            (directory / pattern)
            for pattern in workspace.get("exclude", []) or []
            if isinstance(pattern, str)
        }
        members: list[Path] = []
        for pattern in workspace.get("members", []) or []:
            if not isinstance(pattern, str):
                continue
            for match in sorted(directory.glob(pattern)):
                if match.is_dir() and match not in excluded and match != directory:
                    members.append(match)
        return members

    def _manifest(self, kind: ManifestKind, path: Path) -> ManifestFile:
        return ManifestFile(
            kind=kind,
            path=path,
            relative_path=path.relative_to(self._root).as_posix(),
        )

"""Revision extractor — parsed manifest documents to dependency references.

The three manifest formats are a closed set.  ``RevisionExtractor`` keeps one
handler per ``ManifestKind`` and dispatches on the kind recorded by the
locator, never on the shape of the document.  Every handler yields raw
candidates; normalisation and validation happen in one place so all three
formats produce identical ``DependencyReference`` records.

Only references to tracked producers are kept.  Dependencies on anything
else (crates.io packages, unrelated git repositories) are third-party and
outside the reconciliation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict

from lockstep.models.references import (
    DependencyReference,
    StructuralIssue,
    normalize_digest,
    normalize_revision,
)
from lockstep.models.repository import ManifestFile, ManifestKind

logger = logging.getLogger(__name__)

_DEPENDENCY_TABLES = ("dependencies", "dev-dependencies", "build-dependencies")
_PACKAGE_TABLES = ("external_package", "package")


def producer_from_git_url(url: str) -> str:
    """Return the repository name a git URL points at, lower-cased.

    >>> producer_from_git_url("git+https://github.com/oxidecomputer/propolis?rev=abc#abc")
    'propolis'
    """
    location = url.removeprefix("git+")
    location = location.split("#", 1)[0].split("?", 1)[0].rstrip("/")
    name = location.rsplit("/", 1)[-1].rsplit(":", 1)[-1]
    return name.removesuffix(".git").lower()


class _Candidate(NamedTuple):
    entry: str
    producer: str
    revision: Any
    revision_field: str
    digest: Any = None
    digest_field: str = "sha256"
    artifact_repo: str | None = None


class ExtractionResult(BaseModel):
    """References and structural issues from one manifest."""

    model_config = ConfigDict(frozen=True)

    references: list[DependencyReference] = []
    issues: list[StructuralIssue] = []


class RevisionExtractor:
    """Turns parsed manifests into canonical ``DependencyReference`` records.

    Parameters
    ----------
    tracked_producers:
        Repository names whose revisions are reconciled.  Matching is
        case-insensitive.
    """

    def __init__(self, tracked_producers: Iterable[str]) -> None:
        self._tracked = frozenset(name.lower() for name in tracked_producers)
        self._handlers: dict[ManifestKind, Callable[[dict[str, Any]], Iterator[_Candidate]]] = {
            ManifestKind.DEPENDENCY_MANIFEST: self._dependency_manifest_candidates,
            ManifestKind.LOCK_FILE: self._lock_file_candidates,
            ManifestKind.PACKAGE_MANIFEST: self._package_manifest_candidates,
        }

    def extract(
        self,
        document: dict[str, Any],
        manifest: ManifestFile,
        repository: str,
    ) -> ExtractionResult:
        """Extract every tracked reference declared in ``document``."""
        references: list[DependencyReference] = []
        issues: list[StructuralIssue] = []

        for candidate in self._handlers[manifest.kind](document):
            if candidate.producer not in self._tracked:
                continue
            try:
                revision = normalize_revision(candidate.revision)
            except ValueError as exc:
                issues.append(
                    self._issue(manifest, candidate, candidate.revision_field, candidate.revision, exc)
                )
                continue

            digest = None
            if candidate.digest is not None:
                try:
                    digest = normalize_digest(candidate.digest)
                except ValueError as exc:
                    issues.append(
                        self._issue(manifest, candidate, candidate.digest_field, candidate.digest, exc)
                    )
                    continue

            references.append(
                DependencyReference(
                    producer=candidate.producer,
                    entry=candidate.entry,
                    kind=manifest.kind,
                    revision=revision,
                    digest=digest,
                    artifact_repo=candidate.artifact_repo,
                    manifest=manifest.relative_path,
                    repository=repository,
                )
            )

        logger.debug(
            "%s: %d references, %d structural issues",
            manifest.relative_path,
            len(references),
            len(issues),
        )
        return ExtractionResult(references=references, issues=issues)

    @staticmethod
    def _issue(
        manifest: ManifestFile,
        candidate: _Candidate,
        field: str,
        value: Any,
        exc: ValueError,
    ) -> StructuralIssue:
        return StructuralIssue(
            manifest=manifest.relative_path,
            entry=candidate.entry,
            field=field,
            value=str(value),
            reason=str(exc),
        )

    # ------------------------------------------------------------------
    # Per-format handlers
    # ------------------------------------------------------------------

    @staticmethod
    def _dependency_manifest_candidates(document: dict[str, Any]) -> Iterator[_Candidate]:
        tables: list[Any] = [document.get(name) for name in _DEPENDENCY_TABLES]

        workspace = document.get("workspace")
        if isinstance(workspace, dict):
            tables.append(workspace.get("dependencies"))

        targets = document.get("target")
        if isinstance(targets, dict):
            for target in targets.values():
                if isinstance(target, dict):
                    tables.extend(target.get(name) for name in _DEPENDENCY_TABLES)

        for table in tables:
            if not isinstance(table, dict):
                continue
            for name, spec in table.items():
                # Branch and tag pins carry no revision to reconcile
                if not isinstance(spec, dict) or "git" not in spec or "rev" not in spec:
                    continue
                yield _Candidate(
                    entry=name,
                    producer=producer_from_git_url(str(spec["git"])),
                    revision=spec["rev"],
                    revision_field="rev",
                )

    @staticmethod
    def _lock_file_candidates(document: dict[str, Any]) -> Iterator[_Candidate]:
        for package in document.get("package", []) or []:
            if not isinstance(package, dict):
                continue
            source = package.get("source")
            if not isinstance(source, str) or not source.startswith("git+"):
                continue
            _, _, resolved = source.partition("#")
            yield _Candidate(
                entry=str(package.get("name", "")),
                producer=producer_from_git_url(source),
                revision=resolved,
                revision_field="source",
            )

    @staticmethod
    def _package_manifest_candidates(document: dict[str, Any]) -> Iterator[_Candidate]:
        for table_name in _PACKAGE_TABLES:
            table = document.get(table_name)
            if not isinstance(table, dict):
                continue
            for name, package in table.items():
                if not isinstance(package, dict):
                    continue
                source = package.get("source")
                if not isinstance(source, dict) or source.get("type") != "prebuilt":
                    continue
                repo = source.get("repo")
                if not isinstance(repo, str):
                    continue
                yield _Candidate(
                    entry=name,
                    producer=repo.lower(),
                    revision=source.get("commit", ""),
                    revision_field="commit",
                    digest=source.get("sha256"),
                    artifact_repo=repo,
                )

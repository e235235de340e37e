"""Reconciler — the central coordinator for a lockstep run.

Wires the ManifestLocator, RevisionExtractor, GroundTruthResolver,
ConsistencyChecker and ImageAvailabilityChecker into a single pass:

    locate -> extract -> resolve ground truth -> check -> report

A run reads the filesystem and queries the registry; it never writes.
Everything it loads is discarded once the report is built.  A manifest that
cannot be read or parsed is reported as a structural issue and skipped.
"""

from __future__ import annotations

import logging
from pathlib import Path

from lockstep.config import LockstepConfig
from lockstep.core.availability import ImageAvailabilityChecker
from lockstep.core.checker import ConsistencyChecker
from lockstep.core.documents import ManifestReadError, load_document
from lockstep.core.extractor import RevisionExtractor
from lockstep.core.ground_truth import GitRunner, GroundTruthResolver
from lockstep.core.locator import ManifestLocator
from lockstep.core.registry import ArtifactRegistry, OfflineRegistry, RegistryClient
from lockstep.models.references import DependencyReference, GroundTruth, StructuralIssue
from lockstep.models.report import ReconciliationReport

logger = logging.getLogger(__name__)


def build_registry(config: LockstepConfig) -> ArtifactRegistry:
    """Return the registry implied by the configuration."""
    if config.offline:
        return OfflineRegistry()
    return RegistryClient(
        config.registry_url_template,
        timeout=config.request_timeout_seconds,
        max_attempts=config.max_attempts,
        backoff_seconds=config.retry_backoff_seconds,
    )


class Reconciler:
    """Runs one reconciliation over the checkouts under ``config.root``.

    Parameters
    ----------
    config:
        Run configuration.  Uses defaults (and ``LOCKSTEP_*`` env vars)
        if not provided.
    git_runner:
        Override for how ``git rev-parse HEAD`` is executed.
    registry:
        Override for the artifact registry.
    """

    def __init__(
        self,
        config: LockstepConfig | None = None,
        *,
        git_runner: GitRunner | None = None,
        registry: ArtifactRegistry | None = None,
    ) -> None:
        self.config = config or LockstepConfig()
        root = Path(self.config.root)

        self.locator = ManifestLocator(self.config)
        self.extractor = RevisionExtractor(self.config.tracked_producers)
        self.resolver = GroundTruthResolver(
            root, self.config.tracked_producers, runner=git_runner
        )
        self.availability = ImageAvailabilityChecker(registry or build_registry(self.config))
        self.checker = ConsistencyChecker(self.availability)

    def resolve_ground_truth(self) -> dict[str, GroundTruth]:
        """Return the current commit of every tracked producer checkout."""
        return self.resolver.resolve(self.locator.discover_repositories())

    def run(self) -> ReconciliationReport:
        """Execute a full pass and return the report."""
        located = self.locator.locate()

        references: list[DependencyReference] = []
        issues: list[StructuralIssue] = []
        for repo_manifests in located:
            repository = repo_manifests.repository
            for manifest in repo_manifests.all_manifests():
                try:
                    document = load_document(manifest.path)
                except ManifestReadError as exc:
                    logger.info("Skipping %s: %s", manifest.relative_path, exc.reason)
                    issues.append(
                        StructuralIssue(
                            manifest=manifest.relative_path,
                            entry=repository.name,
                            field="document",
                            value=manifest.path.name,
                            reason=exc.reason,
                        )
                    )
                    continue
                result = self.extractor.extract(document, manifest, repository.name)
                references.extend(result.references)
                issues.extend(result.issues)

        logger.info(
            "Extracted %d references from %d repositories",
            len(references),
            len(located),
        )

        ground_truth = self.resolver.resolve(rm.repository for rm in located)
        checked = self.checker.check(references, ground_truth)

        return ReconciliationReport(
            actions=tuple(checked.actions),
            unresolved=tuple(checked.unresolved),
            issues=tuple(sorted(set(issues), key=lambda issue: issue.sort_key())),
            ground_truth={
                producer: truth.revision for producer, truth in sorted(ground_truth.items())
            },
        )

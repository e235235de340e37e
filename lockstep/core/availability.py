"""Image availability checker.

Confirms that an artifact built from a producer's ground-truth revision
exists before a package-manifest digest is touched.  Lookups are memoised
in an explicit per-run cache that callers pass in and get back; there is no
module-level state.
"""

from __future__ import annotations

import logging

from lockstep.core.registry import ArtifactRegistry
from lockstep.models.actions import (
    Action,
    UpdatePackageManifestDigest,
    WaitForArtifact,
)
from lockstep.models.references import DependencyReference
from lockstep.models.registry import ArtifactQuery, ArtifactQueryResult, Found

logger = logging.getLogger(__name__)

AvailabilityCache = dict[ArtifactQuery, ArtifactQueryResult]


class ImageAvailabilityChecker:
    """Decides between a digest update and a wait for one package entry."""

    def __init__(self, registry: ArtifactRegistry) -> None:
        self._registry = registry

    def check(
        self,
        reference: DependencyReference,
        revision: str,
        cache: AvailabilityCache,
    ) -> tuple[list[Action], AvailabilityCache]:
        """Check the artifact for ``reference`` built from ``revision``.

        Returns the resulting actions and the updated cache.  ``Found``
        with the recorded digest yields nothing; a different digest yields
        an ``UpdatePackageManifestDigest``; anything else yields a
        ``WaitForArtifact`` carrying the registry's reported status.
        """
        query = ArtifactQuery(
            repo=reference.artifact_repo or reference.producer,
            revision=revision,
            artifact=reference.entry,
        )
        cache = dict(cache)
        result = cache.get(query)
        if result is None:
            result = self._registry.query(query)
            cache[query] = result
        else:
            logger.debug("Reusing registry result for %s@%s", query.artifact, revision)

        if isinstance(result, Found):
            if result.digest == reference.digest:
                return [], cache
            return [
                UpdatePackageManifestDigest(
                    manifest=reference.manifest,
                    producer=reference.producer,
                    package=reference.entry,
                    from_digest=reference.digest,
                    to_digest=result.digest,
                )
            ], cache

        return [
            WaitForArtifact(
                manifest=reference.manifest,
                producer=reference.producer,
                package=reference.entry,
                revision=query.revision,
                reason=result.detail,
            )
        ], cache

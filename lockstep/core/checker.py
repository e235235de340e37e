"""Consistency checker — the reconciliation core.

For every producer referenced anywhere:

1. No ground truth (not checked out): one ``UnresolvedProducer`` report and
   no update actions.
2. Every dependency-manifest, lock-file and package-manifest reference whose
   revision differs from ground truth gets an ``UpdateManifestRevision``
   scoped to its own manifest.  References that agree with each other but
   not with ground truth are each updated; the lock file is not inferred
   from the dependency manifest or the other way round.
3. Every package-manifest reference triggers an availability check for the
   ground-truth revision, which either confirms the recorded digest
   (nothing to do), proposes a digest update, or asks to wait.

The result is deduplicated and ordered, so applying every update action and
re-running yields no actions.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import NamedTuple

from lockstep.core.availability import AvailabilityCache, ImageAvailabilityChecker
from lockstep.models.actions import Action, UpdateManifestRevision, order_actions
from lockstep.models.references import DependencyReference, GroundTruth
from lockstep.models.report import UnresolvedProducer
from lockstep.models.repository import ManifestKind

logger = logging.getLogger(__name__)


class CheckResult(NamedTuple):
    actions: list[Action]
    unresolved: list[UnresolvedProducer]
    cache: AvailabilityCache


class ConsistencyChecker:
    """Compares declared revisions against ground truth.

    Parameters
    ----------
    availability:
        Consulted for every package-manifest reference whose producer
        has ground truth.
    """

    def __init__(self, availability: ImageAvailabilityChecker) -> None:
        self._availability = availability

    def check(
        self,
        references: Iterable[DependencyReference],
        ground_truth: Mapping[str, GroundTruth],
        cache: AvailabilityCache | None = None,
    ) -> CheckResult:
        """Return the ordered actions and unresolved producers."""
        cache = dict(cache or {})
        actions: list[Action] = []
        unresolved: list[UnresolvedProducer] = []

        by_producer: dict[str, list[DependencyReference]] = defaultdict(list)
        for reference in references:
            by_producer[reference.producer].append(reference)

        for producer in sorted(by_producer):
            producer_refs = sorted(
                by_producer[producer], key=lambda r: (r.manifest, r.entry)
            )
            truth = ground_truth.get(producer)
            if truth is None:
                referenced_by = tuple(sorted({r.manifest for r in producer_refs}))
                logger.info(
                    "Cannot reconcile %s: not checked out (referenced by %d manifests)",
                    producer,
                    len(referenced_by),
                )
                unresolved.append(
                    UnresolvedProducer(producer=producer, referenced_by=referenced_by)
                )
                continue

            for reference in producer_refs:
                if reference.revision != truth.revision:
                    actions.append(
                        UpdateManifestRevision(
                            manifest_kind=reference.kind,
                            manifest=reference.manifest,
                            producer=producer,
                            from_revision=reference.revision,
                            to_revision=truth.revision,
                        )
                    )
                if reference.kind is ManifestKind.PACKAGE_MANIFEST:
                    found, cache = self._availability.check(reference, truth.revision, cache)
                    actions.extend(found)

        return CheckResult(
            actions=order_actions(actions),
            unresolved=unresolved,
            cache=cache,
        )

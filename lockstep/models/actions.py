"""Reconciliation actions — immutable instructions produced by the checker.

Actions are pure output.  They compare by full content, which is what
deduplication relies on, and sort by (manifest kind, manifest path,
producer, action kind) so two runs over the same state print the same lines.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict

from lockstep.models.repository import MANIFEST_KIND_ORDER, ManifestKind


class ActionKind(str, Enum):
    UPDATE_MANIFEST_REVISION = "update_manifest_revision"
    UPDATE_PACKAGE_MANIFEST_DIGEST = "update_package_manifest_digest"
    WAIT_FOR_ARTIFACT = "wait_for_artifact"


_ACTION_KIND_ORDER: dict[ActionKind, int] = {
    ActionKind.UPDATE_MANIFEST_REVISION: 0,
    ActionKind.UPDATE_PACKAGE_MANIFEST_DIGEST: 1,
    ActionKind.WAIT_FOR_ARTIFACT: 2,
}


class UpdateManifestRevision(BaseModel):
    """Change the pinned revision of ``producer`` in one manifest file."""

    model_config = ConfigDict(frozen=True)

    action_kind: Literal[ActionKind.UPDATE_MANIFEST_REVISION] = (
        ActionKind.UPDATE_MANIFEST_REVISION
    )
    manifest_kind: ManifestKind
    manifest: str
    producer: str
    from_revision: str
    to_revision: str

    def sort_key(self) -> tuple:
        return (
            MANIFEST_KIND_ORDER[self.manifest_kind],
            self.manifest,
            self.producer,
            _ACTION_KIND_ORDER[self.action_kind],
            self.from_revision,
            self.to_revision,
        )


class UpdatePackageManifestDigest(BaseModel):
    """Change the pinned artifact digest of a package-manifest entry."""

    model_config = ConfigDict(frozen=True)

    action_kind: Literal[ActionKind.UPDATE_PACKAGE_MANIFEST_DIGEST] = (
        ActionKind.UPDATE_PACKAGE_MANIFEST_DIGEST
    )
    manifest: str
    producer: str
    package: str
    from_digest: str | None
    to_digest: str

    def sort_key(self) -> tuple:
        return (
            MANIFEST_KIND_ORDER[ManifestKind.PACKAGE_MANIFEST],
            self.manifest,
            self.producer,
            _ACTION_KIND_ORDER[self.action_kind],
            self.package,
            self.from_digest or "",
            self.to_digest,
        )


class WaitForArtifact(BaseModel):
    """The artifact for ``revision`` is not (yet) available; try again later."""

    model_config = ConfigDict(frozen=True)

    action_kind: Literal[ActionKind.WAIT_FOR_ARTIFACT] = ActionKind.WAIT_FOR_ARTIFACT
    manifest: str
    producer: str
    package: str
    revision: str
    reason: str

    def sort_key(self) -> tuple:
        return (
            MANIFEST_KIND_ORDER[ManifestKind.PACKAGE_MANIFEST],
            self.manifest,
            self.producer,
            _ACTION_KIND_ORDER[self.action_kind],
            self.package,
            self.revision,
            self.reason,
        )


Action = Union[UpdateManifestRevision, UpdatePackageManifestDigest, WaitForArtifact]


def order_actions(actions: Iterable[Action]) -> list[Action]:
    """Deduplicate by content and return actions in report order."""
    return sorted(set(actions), key=lambda action: action.sort_key())

"""Tests for the Pydantic data models — validation, immutability, ordering."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from lockstep.models.actions import (
    UpdateManifestRevision,
    UpdatePackageManifestDigest,
    WaitForArtifact,
    order_actions,
)
from lockstep.models.references import normalize_digest, normalize_revision
from lockstep.models.registry import ArtifactQuery, Found
from lockstep.models.report import ReconciliationReport, UnresolvedProducer
from lockstep.models.repository import ManifestKind
from tests._fixtures.workspace import (
    CRUCIBLE_DIGEST_NEW,
    CRUCIBLE_DIGEST_OLD,
    CRUCIBLE_NEW,
    CRUCIBLE_OLD,
    PROPOLIS_NEW,
    PROPOLIS_OLD,
)


class TestRevisionNormalization:
    def test_full_commit_accepted(self):
        assert normalize_revision(PROPOLIS_OLD) == PROPOLIS_OLD

    def test_uppercase_and_whitespace_normalized(self):
        assert normalize_revision(f"  {PROPOLIS_OLD.upper()}\n") == PROPOLIS_OLD

    def test_short_revision_rejected(self):
        with pytest.raises(ValueError, match="expected 40 hex characters"):
            normalize_revision(PROPOLIS_OLD[:12])

    def test_non_hex_rejected(self):
        with pytest.raises(ValueError, match="non-hex"):
            normalize_revision("z" * 40)

    def test_non_string_rejected(self):
        with pytest.raises(ValueError):
            normalize_revision(1234)  # type: ignore[arg-type]

    def test_digest_length(self):
        assert normalize_digest(CRUCIBLE_DIGEST_OLD) == CRUCIBLE_DIGEST_OLD
        with pytest.raises(ValueError):
            normalize_digest(PROPOLIS_OLD)


class TestDependencyReference:
    def test_revision_validated(self, make_reference):
        with pytest.raises(ValidationError):
            make_reference(revision="main")

    def test_digest_validated(self, make_reference):
        with pytest.raises(ValidationError):
            make_reference(kind=ManifestKind.PACKAGE_MANIFEST, digest="abc")

    def test_frozen(self, make_reference):
        ref = make_reference()
        with pytest.raises(Exception):
            ref.revision = PROPOLIS_NEW


class TestActions:
    def _revision_update(self, **overrides) -> UpdateManifestRevision:
        fields = {
            "manifest_kind": ManifestKind.DEPENDENCY_MANIFEST,
            "manifest": "omicron/Cargo.toml",
            "producer": "propolis",
            "from_revision": PROPOLIS_OLD,
            "to_revision": PROPOLIS_NEW,
        }
        fields.update(overrides)
        return UpdateManifestRevision(**fields)

    def test_equal_content_deduplicated(self):
        actions = order_actions([self._revision_update(), self._revision_update()])
        assert len(actions) == 1

    def test_ordered_by_manifest_kind_first(self):
        lock = self._revision_update(
            manifest_kind=ManifestKind.LOCK_FILE, manifest="omicron/Cargo.lock"
        )
        package = self._revision_update(
            manifest_kind=ManifestKind.PACKAGE_MANIFEST,
            manifest="omicron/package-manifest.toml",
        )
        dependency = self._revision_update(manifest="propolis/Cargo.toml")
        assert order_actions([package, lock, dependency]) == [dependency, lock, package]

    def test_ordered_by_producer_within_manifest(self):
        propolis = self._revision_update()
        crucible = self._revision_update(
            producer="crucible", from_revision=CRUCIBLE_OLD, to_revision=CRUCIBLE_NEW
        )
        assert order_actions([propolis, crucible]) == [crucible, propolis]

    def test_package_actions_ordered_by_kind(self):
        manifest = "omicron/package-manifest.toml"
        revision = self._revision_update(
            manifest_kind=ManifestKind.PACKAGE_MANIFEST,
            manifest=manifest,
            producer="crucible",
            from_revision=CRUCIBLE_OLD,
            to_revision=CRUCIBLE_NEW,
        )
        digest = UpdatePackageManifestDigest(
            manifest=manifest,
            producer="crucible",
            package="crucible",
            from_digest=CRUCIBLE_DIGEST_OLD,
            to_digest=CRUCIBLE_DIGEST_NEW,
        )
        wait = WaitForArtifact(
            manifest=manifest,
            producer="crucible",
            package="crucible-pantry",
            revision=CRUCIBLE_NEW,
            reason="404 Not Found",
        )
        assert order_actions([wait, digest, revision]) == [revision, digest, wait]

    def test_actions_are_hashable(self):
        assert hash(self._revision_update()) == hash(self._revision_update())


class TestRegistryModels:
    def test_query_is_hashable_cache_key(self):
        q1 = ArtifactQuery(repo="crucible", revision=CRUCIBLE_NEW, artifact="crucible")
        q2 = ArtifactQuery(repo="crucible", revision=CRUCIBLE_NEW.upper(), artifact="crucible")
        assert {q1: 1}[q2] == 1

    def test_found_requires_digest(self):
        with pytest.raises(ValidationError):
            Found(digest="not-a-digest")


class TestReport:
    def test_empty_report(self):
        assert ReconciliationReport().is_empty is True

    def test_unresolved_makes_report_non_empty(self):
        report = ReconciliationReport(
            unresolved=(UnresolvedProducer(producer="dendrite"),)
        )
        assert report.is_empty is False

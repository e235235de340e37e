"""Tests for ManifestLocator — repository discovery and manifest lookup."""

from __future__ import annotations

import pytest

from lockstep.config import LockstepConfig
from lockstep.core.locator import ManifestLocator, RootUnreadableError
from lockstep.models.repository import ManifestKind
from tests._fixtures.workspace import PROPOLIS_GIT, PROPOLIS_OLD


class TestRepositoryDiscovery:
    def test_subdirectories_sorted_by_name(self, workspace, config):
        for name in ("propolis", "omicron", "crucible"):
            workspace.repo(name)
        names = [r.name for r in ManifestLocator(config).discover_repositories()]
        assert names == ["crucible", "omicron", "propolis"]

    def test_hidden_directories_and_files_skipped(self, workspace, config):
        workspace.repo("omicron")
        (workspace.root / ".cache").mkdir()
        workspace.write("notes.txt", "not a repository")
        names = [r.name for r in ManifestLocator(config).discover_repositories()]
        assert names == ["omicron"]

    def test_missing_root_raises(self, tmp_path):
        config = LockstepConfig(root=tmp_path / "nowhere")
        with pytest.raises(RootUnreadableError):
            ManifestLocator(config).discover_repositories()

    def test_root_that_is_a_file_raises(self, workspace):
        path = workspace.write("file", "x")
        with pytest.raises(RootUnreadableError):
            ManifestLocator(LockstepConfig(root=path)).locate()


class TestManifestLookup:
    def test_missing_manifests_are_not_errors(self, workspace, config):
        workspace.repo("propolis")
        (located,) = ManifestLocator(config).locate()
        assert located.dependency_manifests == []
        assert located.lock_file is None
        assert located.package_manifest is None
        assert located.all_manifests() == []

    def test_manifest_paths_relative_to_root(self, workspace, config):
        workspace.cargo_toml("propolis", {"crucible": (PROPOLIS_GIT, PROPOLIS_OLD)})
        workspace.cargo_lock("propolis", [])
        (located,) = ManifestLocator(config).locate()
        assert located.dependency_manifests[0].relative_path == "propolis/Cargo.toml"
        assert located.dependency_manifests[0].display_path == "./propolis/Cargo.toml"
        assert located.lock_file is not None
        assert located.lock_file.kind is ManifestKind.LOCK_FILE

    def test_package_manifest_only_for_consumer(self, workspace, config):
        workspace.package_manifest("omicron", [])
        workspace.package_manifest("propolis", [])
        located = {rm.repository.name: rm for rm in ManifestLocator(config).locate()}
        assert located["omicron"].package_manifest is not None
        assert located["propolis"].package_manifest is None

    def test_consumer_is_configurable(self, workspace, tmp_path):
        workspace.package_manifest("propolis", [])
        config = LockstepConfig(root=tmp_path, consumer="propolis")
        (located,) = ManifestLocator(config).locate()
        assert located.package_manifest is not None


class TestWorkspaceMembers:
    def test_members_found_recursively(self, workspace, config):
        workspace.cargo_toml("omicron", members=["sled-agent", "nexus"])
        workspace.cargo_toml("omicron/sled-agent", name="sled-agent")
        workspace.cargo_toml("omicron/nexus", members=["db-model"], name="nexus")
        workspace.cargo_toml("omicron/nexus/db-model", name="db-model")

        (located,) = ManifestLocator(config).locate()
        paths = [m.relative_path for m in located.dependency_manifests]
        assert paths == [
            "omicron/Cargo.toml",
            "omicron/sled-agent/Cargo.toml",
            "omicron/nexus/Cargo.toml",
            "omicron/nexus/db-model/Cargo.toml",
        ]

    def test_glob_members_and_exclude(self, workspace, config):
        workspace.write(
            "omicron/Cargo.toml",
            """
            [workspace]
            members = ["crates/*"]
            exclude = ["crates/experimental"]
            """,
        )
        for crate in ("b-crate", "a-crate", "experimental"):
            workspace.cargo_toml(f"omicron/crates/{crate}", name=crate)

        (located,) = ManifestLocator(config).locate()
        paths = [m.relative_path for m in located.dependency_manifests]
        assert paths == [
            "omicron/Cargo.toml",
            "omicron/crates/a-crate/Cargo.toml",
            "omicron/crates/b-crate/Cargo.toml",
        ]

    def test_member_without_manifest_skipped(self, workspace, config):
        workspace.cargo_toml("omicron", members=["missing"])
        (workspace.root / "omicron" / "missing").mkdir()
        (located,) = ManifestLocator(config).locate()
        assert len(located.dependency_manifests) == 1

    def test_unparseable_manifest_located_without_members(self, workspace, config):
        workspace.cargo_toml("omicron", members=["sled-agent"])
        workspace.cargo_toml("omicron/sled-agent", name="omicron-sled-agent")
        workspace.write("scratch/Cargo.toml", "[workspace\nmembers = [")

        omicron, scratch = ManifestLocator(config).locate()

        assert len(omicron.dependency_manifests) == 2
        assert [m.relative_path for m in scratch.dependency_manifests] == [
            "scratch/Cargo.toml"
        ]

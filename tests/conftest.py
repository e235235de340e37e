"""Shared test fixtures for lockstep."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from lockstep.config import LockstepConfig
from lockstep.models.references import DependencyReference
from lockstep.models.repository import ManifestKind
from tests._fixtures.workspace import (
    PROPOLIS_OLD,
    FakeGit,
    FakeRegistry,
    WorkspaceBuilder,
)


@pytest.fixture
def workspace(tmp_path: Path) -> WorkspaceBuilder:
    """Provide an empty workspace root in a temp directory."""
    return WorkspaceBuilder(tmp_path)


@pytest.fixture
def fake_git() -> FakeGit:
    return FakeGit()


@pytest.fixture
def fake_registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture
def config(tmp_path: Path) -> LockstepConfig:
    """Provide a config rooted at the temp workspace, never touching the network."""
    return LockstepConfig(root=tmp_path, offline=True)


@pytest.fixture
def make_reference() -> Callable[..., DependencyReference]:
    """Factory fixture: build a DependencyReference with sensible defaults."""

    def _factory(**overrides: Any) -> DependencyReference:
        defaults: dict[str, Any] = {
            "producer": "propolis",
            "entry": "propolis-client",
            "kind": ManifestKind.DEPENDENCY_MANIFEST,
            "revision": PROPOLIS_OLD,
            "manifest": "omicron/sled-agent/Cargo.toml",
            "repository": "omicron",
        }
        defaults.update(overrides)
        return DependencyReference(**defaults)

    return _factory


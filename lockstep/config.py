"""Runtime configuration — env-driven via pydantic-settings.

Every setting can be overridden with a ``LOCKSTEP_*`` environment variable
or a ``.env`` file in the working directory; the CLI overrides individual
fields on top of that.

Examples
--------
Track an extra producer and point at a different registry::

    export LOCKSTEP_PRODUCERS='["crucible", "propolis", "maghemite"]'
    export LOCKSTEP_REGISTRY_URL_TEMPLATE='https://builds.example/{repo}/{commit}/{artifact}.sha256.txt'
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REGISTRY_URL_TEMPLATE = (
    "https://buildomat.eng.oxide.computer/public/file/oxidecomputer/"
    "{repo}/image/{commit}/{artifact}.sha256.txt"
)


class LockstepConfig(BaseSettings):
    """Settings for one reconciliation run."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="LOCKSTEP_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Layout
    root: Path = Path(".")
    consumer: str = "omicron"
    producers: list[str] = ["crucible", "propolis"]

    # Manifest file names
    dependency_manifest_name: str = "Cargo.toml"
    lock_file_name: str = "Cargo.lock"
    package_manifest_name: str = "package-manifest.toml"

    # Artifact registry
    registry_url_template: str = DEFAULT_REGISTRY_URL_TEMPLATE
    request_timeout_seconds: float = 10.0
    max_attempts: int = 1
    retry_backoff_seconds: float = 2.0
    offline: bool = False

    # Observability
    log_level: str = "WARNING"

    @property
    def tracked_producers(self) -> frozenset[str]:
        """Producer names, lower-cased for matching against git URLs."""
        return frozenset(name.lower() for name in self.producers)

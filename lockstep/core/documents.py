"""Manifest document loading.

Manifests are TOML; syntax is handled entirely by ``tomllib`` and the rest
of the engine only ever sees the parsed mapping.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class ManifestReadError(RuntimeError):
    """Raised when a manifest exists but cannot be read or parsed.

    ``reason`` holds the underlying problem without the path, for reports
    that already name the manifest.
    """

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


def load_document(path: Path) -> dict[str, Any]:
    """Read and parse a TOML manifest into a plain mapping."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestReadError(path, f"cannot read: {exc}") from exc
    try:
        document = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ManifestReadError(path, f"cannot parse: {exc}") from exc
    logger.debug("Loaded %s (%d top-level keys)", path, len(document))
    return document

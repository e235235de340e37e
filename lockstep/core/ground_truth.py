"""Ground-truth resolver — the current commit of each producer checkout.

Ground truth always comes from the producer's own working copy, never from
what a consumer manifest claims.  Producers that are not checked out under
the root have no ground truth; the checker reports them as unresolved.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Iterable
from pathlib import Path

from lockstep.models.references import GroundTruth, normalize_revision
from lockstep.models.repository import Repository

logger = logging.getLogger(__name__)

GitRunner = Callable[[list[str], Path], str]


class CheckoutStateError(RuntimeError):
    """Raised when a producer checkout exists but its HEAD cannot be read."""


class GroundTruthResolver:
    """Reads ``HEAD`` of every tracked producer present under the root.

    Parameters
    ----------
    root:
        Directory holding the sibling checkouts; paths are reported
        relative to it.
    tracked_producers:
        Repository names to resolve.  Other siblings are ignored.
    runner:
        Executes a git command in a directory and returns its stdout.
        Defaults to ``subprocess.run``.
    """

    def __init__(
        self,
        root: Path,
        tracked_producers: Iterable[str],
        runner: GitRunner | None = None,
    ) -> None:
        self._root = Path(root)
        self._tracked = frozenset(name.lower() for name in tracked_producers)
        self._runner = runner or self._default_runner

    def resolve(self, repositories: Iterable[Repository]) -> dict[str, GroundTruth]:
        """Return producer name -> ground truth for each tracked sibling."""
        truths: dict[str, GroundTruth] = {}
        for repository in repositories:
            producer = repository.name.lower()
            if producer not in self._tracked:
                continue
            revision = self.read_head(repository.path)
            truths[producer] = GroundTruth(
                producer=producer,
                revision=revision,
                path=repository.path.relative_to(self._root).as_posix(),
            )
            logger.debug("Ground truth for %s is %s", producer, revision)
        return truths

    def read_head(self, path: Path) -> str:
        """Return the full commit id checked out at ``path``."""
        if not (path / ".git").exists():
            raise CheckoutStateError(f"{path} is not a git checkout")
        try:
            output = self._runner(["git", "rev-parse", "HEAD"], path)
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or "").strip()
            raise CheckoutStateError(
                f"cannot read HEAD of {path}: {stderr or exc}"
            ) from exc
        except OSError as exc:
            raise CheckoutStateError(f"cannot run git in {path}: {exc}") from exc

        try:
            return normalize_revision(output)
        except ValueError as exc:
            raise CheckoutStateError(
                f"unexpected HEAD for {path}: {output.strip()!r}"
            ) from exc

    @staticmethod
    def _default_runner(args: list[str], cwd: Path) -> str:
        completed = subprocess.run(
            args,
            cwd=cwd,
            check=True,
            capture_output=True,
            text=True,
        )
        return completed.stdout.strip()

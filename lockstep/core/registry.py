"""Artifact registry client — read-only lookups of built image digests.

The registry serves, for each (repo, commit, artifact), a small text file
holding the sha256 of the built image.  Every failure mode is folded into
an ``ArtifactQueryResult``; nothing here raises to the caller.

Retries are an explicit bounded loop with an injectable ``sleep`` so tests
never wait on a real clock.
"""

from __future__ import annotations

import http.client
import logging
import time
from collections.abc import Callable
from typing import Any, Protocol
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from pydantic import ValidationError

from lockstep.models.registry import (
    ArtifactQuery,
    ArtifactQueryResult,
    Found,
    NotFound,
    TransientError,
)

logger = logging.getLogger(__name__)


class ArtifactRegistry(Protocol):
    """Anything that can answer an ``ArtifactQuery``."""

    def query(self, query: ArtifactQuery) -> ArtifactQueryResult: ...


class RegistryClient:
    """HTTP client for the artifact registry.

    Parameters
    ----------
    url_template:
        ``str.format`` template with ``{repo}``, ``{commit}`` and
        ``{artifact}`` fields.
    timeout:
        Per-request timeout in seconds.  A timeout is a transient error.
    max_attempts:
        Upper bound on requests per query.  Only transient errors are
        retried.
    backoff_seconds:
        Delay before attempt ``n + 1`` is ``backoff_seconds * n``.
    opener:
        ``urlopen``-compatible callable, injectable for tests.
    sleep:
        ``time.sleep``-compatible callable, injectable for tests.
    """

    def __init__(
        self,
        url_template: str,
        *,
        timeout: float = 10.0,
        max_attempts: int = 1,
        backoff_seconds: float = 2.0,
        opener: Callable[..., Any] | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self._url_template = url_template
        self._timeout = timeout
        self._max_attempts = max(1, max_attempts)
        self._backoff = max(0.0, backoff_seconds)
        self._opener = opener or urlopen
        self._sleep = sleep or time.sleep

    def url_for(self, query: ArtifactQuery) -> str:
        return self._url_template.format(
            repo=query.repo,
            commit=query.revision,
            artifact=query.artifact,
        )

    def query(self, query: ArtifactQuery) -> ArtifactQueryResult:
        """Look up the artifact, retrying transient failures up to the bound."""
        url = self.url_for(query)
        result: ArtifactQueryResult = TransientError(detail="no request made")

        for attempt in range(1, self._max_attempts + 1):
            logger.debug("GET %s (attempt %d/%d)", url, attempt, self._max_attempts)
            result = self._fetch(url)
            if not isinstance(result, TransientError):
                return result
            logger.info(
                "Registry lookup for %s@%s failed (attempt %d/%d): %s",
                query.artifact,
                query.revision,
                attempt,
                self._max_attempts,
                result.detail,
            )
            if attempt < self._max_attempts:
                self._sleep(self._backoff * attempt)

        return result

    def _fetch(self, url: str) -> ArtifactQueryResult:
        request = Request(url, method="GET")
        try:
            with self._opener(request, timeout=self._timeout) as response:
                raw = response.read()
        except HTTPError as exc:
            detail = f"{exc.code} {exc.reason}"
            if exc.code == 404:
                return NotFound(detail=detail)
            return TransientError(detail=detail)
        except URLError as exc:
            return TransientError(detail=str(exc.reason))
        except TimeoutError:
            return TransientError(detail="request timed out")
        except http.client.HTTPException as exc:
            return TransientError(detail=f"{type(exc).__name__}: {exc}")
        except OSError as exc:
            return TransientError(detail=str(exc))

        text = raw.decode("utf-8", errors="replace").strip()
        # The file may carry a trailing file name after the digest
        digest = text.split()[0] if text else ""
        try:
            return Found(digest=digest)
        except ValidationError:
            return TransientError(detail="malformed digest in registry response")


class OfflineRegistry:
    """Registry stand-in used with ``--offline``: nothing can be confirmed."""

    def query(self, query: ArtifactQuery) -> ArtifactQueryResult:
        return TransientError(detail="registry queries disabled")

"""Artifact registry query outcomes.

A lookup ends in exactly one of ``Found``, ``NotFound`` or
``TransientError``.  Results are consumed immediately by the availability
checker and never persisted.
"""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, field_validator

from lockstep.models.references import normalize_digest, normalize_revision


class ArtifactQuery(BaseModel):
    """Key of one registry lookup: which artifact, built from which commit."""

    model_config = ConfigDict(frozen=True)

    repo: str
    revision: str
    artifact: str

    @field_validator("revision")
    @classmethod
    def _check_revision(cls, value: str) -> str:
        return normalize_revision(value)


class Found(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome: Literal["found"] = "found"
    digest: str

    @field_validator("digest")
    @classmethod
    def _check_digest(cls, value: str) -> str:
        return normalize_digest(value)


class NotFound(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome: Literal["not_found"] = "not_found"
    detail: str = "404 Not Found"


class TransientError(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome: Literal["transient_error"] = "transient_error"
    detail: str


ArtifactQueryResult = Union[Found, NotFound, TransientError]

"""The result of one reconciliation run."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from lockstep.models.actions import Action
from lockstep.models.references import StructuralIssue


class UnresolvedProducer(BaseModel):
    """A tracked producer is referenced but has no local checkout."""

    model_config = ConfigDict(frozen=True)

    producer: str
    referenced_by: tuple[str, ...] = ()  # root-relative manifest paths


class ReconciliationReport(BaseModel):
    """Ordered actions plus the non-fatal problems found along the way."""

    model_config = ConfigDict(frozen=True)

    actions: tuple[Action, ...] = ()
    unresolved: tuple[UnresolvedProducer, ...] = ()
    issues: tuple[StructuralIssue, ...] = ()
    ground_truth: dict[str, str] = {}

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to print."""
        return not (self.actions or self.unresolved or self.issues)

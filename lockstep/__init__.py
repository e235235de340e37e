"""Lockstep: keep interdependent repository checkouts on consistent revisions.

Given a directory of sibling checkouts, lockstep compares the git revisions
that consumer manifests (dependency manifest, lock file, package manifest)
pin for each producer against the producer's own checked-out commit, checks
that a built artifact exists for the package manifest, and reports the edits
that would bring everything into line.  It never modifies a file.
"""

__version__ = "0.2.0"

from lockstep.config import LockstepConfig
from lockstep.core.reconciler import Reconciler

__all__ = ["LockstepConfig", "Reconciler", "__version__"]

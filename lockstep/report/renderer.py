"""Plain-line renderer for reconciliation reports.

One line per action, then one per unresolved producer, then one per
structural issue.  An empty report prints nothing.  Lines are written with
markup and highlighting disabled so the output stays stable for scripts.
"""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from lockstep.models.actions import (
    Action,
    UpdateManifestRevision,
    UpdatePackageManifestDigest,
    WaitForArtifact,
)
from lockstep.models.references import StructuralIssue
from lockstep.models.report import ReconciliationReport, UnresolvedProducer


def _display(path: str) -> str:
    return f"./{path}"


def format_action(action: Action) -> str:
    """Render a single action as a human-readable instruction."""
    if isinstance(action, UpdateManifestRevision):
        return (
            f"update {_display(action.manifest)} {action.producer} rev "
            f"from {action.from_revision} to {action.to_revision}"
        )
    if isinstance(action, UpdatePackageManifestDigest):
        return (
            f"update {_display(action.manifest)} {action.package} sha256 "
            f"from {action.from_digest or '(none)'} to {action.to_digest}"
        )
    if isinstance(action, WaitForArtifact):
        return (
            f"wait for {action.package} image for {action.revision} to be built "
            f"(registry returned {action.reason})"
        )
    raise TypeError(f"unknown action type: {type(action).__name__}")


def format_unresolved(unresolved: UnresolvedProducer) -> str:
    paths = ", ".join(_display(p) for p in unresolved.referenced_by)
    return f"cannot reconcile {unresolved.producer}: not checked out (referenced by {paths})"


def format_issue(issue: StructuralIssue) -> str:
    return (
        f"malformed {issue.field} in {_display(issue.manifest)} for {issue.entry}: "
        f"{issue.value!r} ({issue.reason})"
    )


class ReportRenderer:
    """Writes reports to a Rich console.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def lines(self, report: ReconciliationReport) -> list[str]:
        """Return the report as text lines, in print order."""
        lines = [format_action(action) for action in report.actions]
        lines.extend(
            format_unresolved(u)
            for u in sorted(report.unresolved, key=lambda u: u.producer)
        )
        lines.extend(format_issue(issue) for issue in report.issues)
        return lines

    def print_report(self, report: ReconciliationReport) -> None:
        for line in self.lines(report):
            self.console.print(line, markup=False, highlight=False, soft_wrap=True)

    def print_ground_truth(self, ground_truth: dict[str, str]) -> None:
        """Print the producer -> commit table used by ``lockstep revisions``."""
        if not ground_truth:
            self.console.print("[dim]No tracked producers are checked out.[/dim]")
            return

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Producer", style="cyan")
        table.add_column("Commit", style="green")
        for producer, revision in sorted(ground_truth.items()):
            table.add_row(producer, revision)
        self.console.print(table)

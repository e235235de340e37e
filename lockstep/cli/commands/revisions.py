"""``lockstep revisions`` — show the ground-truth commit of each producer."""

from __future__ import annotations

from pathlib import Path

import typer

from lockstep.cli.commands.check import build_config
from lockstep.cli.output import console, err_console
from lockstep.core.ground_truth import CheckoutStateError
from lockstep.core.locator import RootUnreadableError
from lockstep.core.reconciler import Reconciler
from lockstep.report.renderer import ReportRenderer


def revisions_cmd(
    root: Path | None = typer.Option(
        None,
        "--root",
        "-r",
        help="Directory containing the sibling checkouts (defaults to cwd).",
    ),
) -> None:
    """Print the current commit of every tracked producer checkout."""
    config = build_config(root=root, offline=True)
    try:
        truths = Reconciler(config).resolve_ground_truth()
    except (RootUnreadableError, CheckoutStateError) as exc:
        err_console.print(f"[bold red]lockstep:[/bold red] {exc}")
        raise typer.Exit(code=1)

    ReportRenderer(console=console).print_ground_truth(
        {producer: truth.revision for producer, truth in truths.items()}
    )

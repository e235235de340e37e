"""``lockstep check`` — print the edits that bring manifests into lockstep.

Reads every sibling checkout under the root, compares declared revisions
with each producer's current commit, confirms artifact availability for the
package manifest, and prints one line per required edit.  Nothing is
written; no output means everything already agrees.
"""

from __future__ import annotations

from pathlib import Path

import typer

from lockstep.cli.output import configure_logging, console, err_console
from lockstep.config import LockstepConfig
from lockstep.core.ground_truth import CheckoutStateError
from lockstep.core.locator import RootUnreadableError
from lockstep.core.reconciler import Reconciler
from lockstep.report.renderer import ReportRenderer


def build_config(
    *,
    root: Path | None = None,
    consumer: str | None = None,
    producers: list[str] | None = None,
    timeout: float | None = None,
    max_attempts: int | None = None,
    offline: bool = False,
) -> LockstepConfig:
    """Layer CLI overrides on top of env/.env settings."""
    config = LockstepConfig()
    updates: dict[str, object] = {}
    if root is not None:
        updates["root"] = root
    if consumer:
        updates["consumer"] = consumer
    if producers:
        updates["producers"] = list(producers)
    if timeout is not None:
        updates["request_timeout_seconds"] = timeout
    if max_attempts is not None:
        updates["max_attempts"] = max_attempts
    if offline:
        updates["offline"] = True
    return config.model_copy(update=updates) if updates else config


def run_check(config: LockstepConfig) -> None:
    """Run a reconciliation and print its report; exit 1 on fatal errors."""
    try:
        report = Reconciler(config).run()
    except (RootUnreadableError, CheckoutStateError) as exc:
        err_console.print(f"[bold red]lockstep:[/bold red] {exc}")
        raise typer.Exit(code=1)

    ReportRenderer(console=console).print_report(report)


def check_cmd(
    root: Path | None = typer.Option(
        None,
        "--root",
        "-r",
        help="Directory containing the sibling checkouts (defaults to cwd).",
    ),
    consumer: str | None = typer.Option(
        None,
        "--consumer",
        "-c",
        help="Repository that owns the package manifest.",
    ),
    producer: list[str] | None = typer.Option(
        None,
        "--producer",
        "-p",
        help="Tracked producer repository (repeatable).",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        help="Registry request timeout in seconds.",
    ),
    max_attempts: int | None = typer.Option(
        None,
        "--max-attempts",
        min=1,
        help="Registry requests per artifact before reporting a wait.",
    ),
    offline: bool = typer.Option(
        False,
        "--offline",
        help="Skip registry queries; every artifact check reports a wait.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log discovery and registry details to stderr.",
    ),
) -> None:
    """Print the manifest edits needed to match the checked-out producers.

    Exit code is 0 whether or not edits are needed; 1 only when the root
    or a producer checkout cannot be read.
    """
    config = build_config(
        root=root,
        consumer=consumer,
        producers=producer,
        timeout=timeout,
        max_attempts=max_attempts,
        offline=offline,
    )
    configure_logging(config.log_level, verbose=verbose)
    run_check(config)

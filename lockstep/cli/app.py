"""Main Typer application — registers the lockstep commands.

Entry point: ``lockstep`` (configured via pyproject.toml project.scripts).
Running ``lockstep`` with no subcommand is the same as ``lockstep check``.
"""

from __future__ import annotations

import typer

from lockstep.cli.commands.check import build_config, check_cmd, run_check
from lockstep.cli.commands.revisions import revisions_cmd
from lockstep.cli.output import configure_logging

app = typer.Typer(
    name="lockstep",
    help="Keep sibling checkouts pinned to consistent git revisions.",
    add_completion=False,
)

app.command(name="check", help="Print the manifest edits needed (default).")(check_cmd)
app.command(name="revisions", help="Show each producer's checked-out commit.")(revisions_cmd)


@app.callback(invoke_without_command=True)
def default_cmd(ctx: typer.Context) -> None:
    """Print the manifest edits needed to keep producers and consumers in lockstep."""
    if ctx.invoked_subcommand is not None:
        return
    config = build_config()
    configure_logging(config.log_level)
    run_check(config)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()

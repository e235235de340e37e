"""Lockstep CLI — Typer-based command-line interface.

Provides the ``lockstep`` command.  Run without a subcommand (or with
``check``) from the directory holding the sibling checkouts to print the
edits needed to bring every manifest in line with the checked-out producers.
"""

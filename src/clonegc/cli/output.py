"""Output utilities for CLI commands with clear intent.

user_output() is for human-facing messages and goes to stderr so stdout
stays free for machine output (JSON reports). Logging is configured here as
well since both commands share the same switches.
"""

import logging
import os

import click
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from clonegc.core.cleanup import CleanupRun
from clonegc.core.config import CleanupConfig

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def user_output(message: str = "") -> None:
    """Output informational message for human users (stderr)."""
    click.echo(message, err=True)


def machine_output(message: str = "") -> None:
    """Output structured data for scripts and pipes (stdout)."""
    click.echo(message)


def configure_logging(verbose: bool) -> None:
    """Set up root logging once per process.

    DEBUG when --verbose is passed or CLONEGC_DEBUG is set, WARNING otherwise.
    """
    if verbose or os.getenv("CLONEGC_DEBUG"):
        level = logging.DEBUG
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)


def format_cleanup_summary(run: CleanupRun, config: CleanupConfig) -> Panel:
    """Format the final summary box for a cleanup run.

    Args:
        run: Result of run_cleanup()
        config: Configuration the run used

    Returns:
        Rich Panel with status line, counts and the per-tree table

    Example:
        >>> panel = format_cleanup_summary(run, ctx.config)
        >>> Console(stderr=True).print(panel)
    """
    lines: list[Text | Table] = []
    lines.append(Text(f"Pool: {config.pool}"))
    lines.append(Text(f"Resources discovered: {run.discovered}"))

    report = run.report
    if report is None:
        lines.append(Text("Cleanup disabled, nothing was evaluated", style="yellow"))
        return Panel(Group(*lines), title="clonegc", border_style="yellow")

    if report.complete:
        lines.append(Text("Status: complete", style="green"))
        border = "green"
    else:
        lines.append(Text("Status: incomplete", style="red"))
        border = "red"

    mode = "dry run" if config.dry_run else "applied"
    lines.append(Text(f"Deleted: {len(report.deleted)} ({mode})"))
    lines.append(Text(f"Edges cut: {len(report.cuts)}"))

    if report.trees:
        lines.append(Text(""))
        lines.append(format_tree_table(run))

    return Panel(Group(*lines), title="clonegc", border_style=border)


def format_tree_table(run: CleanupRun) -> Table:
    """One row per cleaned tree: generations, deletions and final state."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("root")
    table.add_column("generations", justify="right")
    table.add_column("deleted", justify="right")
    table.add_column("split off", justify="right")
    table.add_column("state")

    if run.report is None:
        return table

    for tree in run.report.trees:
        if tree.error is not None:
            phase = tree.error.phase.value if tree.error.phase is not None else "unknown"
            state = Text(f"failed ({phase})", style="red")
        elif not tree.complete:
            state = Text("incomplete", style="yellow")
        else:
            state = Text("complete", style="green")
        table.add_row(
            tree.root.name,
            str(tree.generations),
            str(len(tree.deleted)),
            str(len(tree.new_roots)),
            state,
        )
    return table

"""Clean command: prune dead clone lineages and flatten tall trees."""

from pathlib import Path

import click
from rich.console import Console

from clonegc.cli.core import resolve_cleanup_context
from clonegc.cli.ensure import cli_error_boundary
from clonegc.cli.json_output import CleanupReportModel, emit_json, json_error_boundary
from clonegc.cli.output import configure_logging, format_cleanup_summary, user_output
from clonegc.core.cleanup import run_cleanup
from clonegc.core.context import CleanupContext
from clonegc.core.errors import ConfigurationError

EXIT_INCOMPLETE = 2


@click.command("clean")
@click.option("--pool", help="Pool to clean (overrides CEPH_POOL).")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Config file (default: ~/.clonegc/config.toml).",
)
@click.option("--max-height", type=int, help="Split off subtrees deeper than this; 0 disables.")
@click.option("--max-generations", type=int, help="Generation cap per tree.")
@click.option("--no-clean", is_flag=True, help="Only discover and export the graph.")
@click.option("--no-graph", is_flag=True, help="Do not write DOT files.")
@click.option("--graph-dir", type=click.Path(path_type=Path, file_okay=False))
@click.option(
    "--deleted-list",
    type=click.Path(path_type=Path, dir_okay=False),
    help="File listing logically deleted resources.",
)
@click.option("--dry-run/--no-dry-run", default=True, show_default=True)
@click.option("--continue-on-error", is_flag=True, help="Skip trees that fail instead of aborting.")
@click.option("--allow-incomplete", is_flag=True, help="Exit 0 even if a tree hit the cap.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
)
@click.option("-v", "--verbose", is_flag=True, help="Log at DEBUG level.")
@click.pass_obj
@cli_error_boundary
@json_error_boundary
def clean_cmd(
    ctx: CleanupContext | None,
    pool: str | None,
    config_path: Path | None,
    max_height: int | None,
    max_generations: int | None,
    no_clean: bool,
    no_graph: bool,
    graph_dir: Path | None,
    deleted_list: Path | None,
    dry_run: bool,
    continue_on_error: bool,
    allow_incomplete: bool,
    output_format: str,
    verbose: bool,
) -> None:
    """Garbage-collect logically deleted volumes and snapshots.

    Builds the clone dependency forest of the pool, deletes dead leaves
    bottom-up generation by generation and, with --max-height, cuts
    subtrees deeper than the bound into separate trees.

    Only dry runs are supported: the plan is logged, storage is not touched.

    Exit codes: 0 done, 1 error (including trees skipped by --continue-on-error),
    2 a tree hit the generation cap while still changing (unless --allow-incomplete).

    Example:
        $ clonegc clean --pool volumes --deleted-list deleted.txt --max-height 8
    """
    configure_logging(verbose)
    if not dry_run:
        raise ConfigurationError("Applying changes is not supported; run with --dry-run")

    cleanup_ctx = resolve_cleanup_context(
        ctx,
        config_path=config_path,
        overrides={
            "pool": pool,
            "max_height": max_height,
            "max_generations": max_generations,
            "clean": False if no_clean else None,
            "graph": False if no_graph else None,
            "graph_dir": graph_dir,
            "deleted_list": deleted_list,
            "continue_on_error": True if continue_on_error else None,
        },
    )
    config = cleanup_ctx.config
    if not config.dry_run:
        raise ConfigurationError(
            "Applying changes is not supported; set dry_run = true in the config"
        )

    run = run_cleanup(cleanup_ctx)

    if output_format == "json":
        model = CleanupReportModel.from_run(run, pool=config.pool, dry_run=config.dry_run)
        emit_json(model.model_dump(mode="json"))
    else:
        Console(stderr=True).print(format_cleanup_summary(run, config))
        if run.report is not None:
            for edge in run.report.cuts:
                user_output(f"would flatten {edge.target} (cut {edge})")
            for resource in run.report.deleted:
                user_output(f"would delete {resource.kind.value} {resource.name}")

    report = run.report
    if report is None or report.complete:
        return

    if output_format == "text":
        for tree in report.failed:
            user_output(click.style("Failed: ", fg="red") + f"{tree.root.name}: {tree.error}")
        for tree in report.incomplete:
            user_output(
                click.style("Incomplete: ", fg="yellow")
                + f"{tree.root.name} still changing after {tree.generations} generations"
            )
    if report.failed:
        raise SystemExit(1)
    if not allow_incomplete:
        raise SystemExit(EXIT_INCOMPLETE)

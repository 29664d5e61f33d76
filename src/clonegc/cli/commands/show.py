"""Show command: print the clone dependency forest."""

from pathlib import Path

import click

from clonegc.cli.core import resolve_cleanup_context
from clonegc.cli.ensure import Ensure, cli_error_boundary
from clonegc.cli.output import configure_logging, user_output
from clonegc.core.context import CleanupContext
from clonegc.core.forest import build_forest
from clonegc.core.tree_display import format_forest_as_tree


@click.command("show")
@click.option("--pool", help="Pool to inspect (overrides CEPH_POOL).")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Config file (default: ~/.clonegc/config.toml).",
)
@click.option(
    "--deleted-list",
    type=click.Path(path_type=Path, dir_okay=False),
    help="File listing logically deleted resources.",
)
@click.option("--root", "root_name", help="Only show the tree under this resource.")
@click.option("-v", "--verbose", is_flag=True, help="Log at DEBUG level.")
@click.pass_obj
@cli_error_boundary
def show_cmd(
    ctx: CleanupContext | None,
    pool: str | None,
    config_path: Path | None,
    deleted_list: Path | None,
    root_name: str | None,
    verbose: bool,
) -> None:
    """Display the clone forest of a pool with alive/dead markers.

    Example:
        $ clonegc show --pool volumes --deleted-list deleted.txt
        base [vol] alive
        └─ base@gold [snap] alive
           ├─ vm-1 [vol] alive
           └─ vm-2 [vol] dead
    """
    configure_logging(verbose)
    cleanup_ctx = resolve_cleanup_context(
        ctx,
        config_path=config_path,
        overrides={"pool": pool, "deleted_list": deleted_list},
    )

    forest = build_forest(cleanup_ctx.storage, cleanup_ctx.oracle)
    if root_name is not None:
        Ensure.invariant(root_name in forest.graph, f"Resource '{root_name}' not found")

    user_output(format_forest_as_tree(forest.graph, forest.roots, root_name=root_name))

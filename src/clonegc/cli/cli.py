import click

from clonegc.cli.commands.clean import clean_cmd
from clonegc.cli.commands.show import show_cmd

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="clonegc")
def cli() -> None:
    """Garbage-collect copy-on-write clone lineages in a Ceph RBD pool."""
    # Commands resolve their own context from options; tests inject one via obj


cli.add_command(clean_cmd)
cli.add_command(show_cmd)


def main() -> None:
    """CLI entry point used by the `clonegc` console script."""
    cli()

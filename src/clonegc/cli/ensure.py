"""CLI error handling utilities with styled output.

This module provides the Ensure class for asserting invariants in CLI commands
and the cli_error_boundary decorator that turns clonegc errors raised below
the CLI into the same red "Error:" line and exit code 1.
"""

import functools
from collections.abc import Callable
from typing import Any, TypeVar

import click

from clonegc.cli.output import user_output
from clonegc.core.errors import CloneGCError

T = TypeVar("T", bound=Callable[..., Any])


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def invariant(condition: bool, error_message: str) -> None:
        """Ensure condition is true, otherwise output styled error and exit.

        Args:
            condition: Boolean condition to check
            error_message: Error message to display if condition is false.
                          "Error: " prefix will be added automatically in red.

        Raises:
            SystemExit: If condition is false (with exit code 1)
        """
        if not condition:
            user_output(click.style("Error: ", fg="red") + error_message)
            raise SystemExit(1)


def cli_error_boundary(func: T) -> T:
    """Decorator that catches clonegc errors and displays clean error messages.

    Catches CloneGCError (configuration, discovery and graph invariant
    failures). All other exceptions bubble up normally with full stack traces.

    Example:
        @click.command()
        @cli_error_boundary
        def my_command():
            ...
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except CloneGCError as e:
            user_output(click.style("Error: ", fg="red") + str(e))
            raise SystemExit(1) from None

    return wrapper  # type: ignore[return-value]

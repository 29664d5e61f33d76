"""JSON output utilities for CLI commands with machine-parseable output."""

import json
from collections.abc import Callable
from functools import wraps
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from clonegc.cli.output import machine_output
from clonegc.core.cleanup import CleanupRun
from clonegc.core.pruning import TreeOutcome
from clonegc.core.resources import Resource


class ErrorResponse(BaseModel):
    """Pydantic model for error JSON responses.

    Attributes:
        error: Error message
        error_type: Error class name (e.g., "DiscoveryError")
        exit_code: Exit code for the process
    """

    model_config = ConfigDict(strict=True)

    error: str
    error_type: str
    exit_code: int = Field(default=1, ge=0, le=255)


class ResourceModel(BaseModel):
    """A deleted volume or snapshot."""

    model_config = ConfigDict(strict=True)

    name: str
    kind: str

    @classmethod
    def from_resource(cls, resource: Resource) -> "ResourceModel":
        return cls(name=resource.name, kind=resource.kind.value)


class TreeModel(BaseModel):
    """Outcome for one tree root."""

    model_config = ConfigDict(strict=True)

    root: str
    generations: int = Field(ge=0)
    deleted: list[str]
    new_roots: list[str]
    complete: bool
    error: str | None = None
    phase: str | None = None

    @classmethod
    def from_outcome(cls, tree: TreeOutcome) -> "TreeModel":
        phase = None
        if tree.error is not None and tree.error.phase is not None:
            phase = tree.error.phase.value
        return cls(
            root=tree.root.name,
            generations=tree.generations,
            deleted=[r.name for r in tree.deleted],
            new_roots=[r.name for r in tree.new_roots],
            complete=tree.complete,
            error=str(tree.error) if tree.error is not None else None,
            phase=phase,
        )


class CleanupReportModel(BaseModel):
    """Full report of a cleanup run.

    `complete` is None when cleaning was disabled.
    """

    model_config = ConfigDict(strict=True)

    run: str
    pool: str | None
    dry_run: bool
    resources: int = Field(ge=0)
    complete: bool | None
    deleted: list[ResourceModel]
    cuts: list[str]
    trees: list[TreeModel]

    @classmethod
    def from_run(
        cls, run: CleanupRun, *, pool: str | None, dry_run: bool
    ) -> "CleanupReportModel":
        report = run.report
        if report is None:
            return cls(
                run=run.prefix,
                pool=pool,
                dry_run=dry_run,
                resources=run.discovered,
                complete=None,
                deleted=[],
                cuts=[],
                trees=[],
            )
        return cls(
            run=run.prefix,
            pool=pool,
            dry_run=dry_run,
            resources=run.discovered,
            complete=report.complete,
            deleted=[ResourceModel.from_resource(r) for r in report.deleted],
            cuts=[str(edge) for edge in report.cuts],
            trees=[TreeModel.from_outcome(t) for t in report.trees],
        )


def emit_json(data: dict[str, Any]) -> None:
    """Output JSON data to stdout for machine consumption.

    For Pydantic models, call model.model_dump(mode='json') before
    passing to this function.
    """
    machine_output(json.dumps(data, indent=2))


def emit_json_error(error: str, error_type: str, exit_code: int = 1) -> None:
    """Output error as JSON and exit.

    Raises:
        SystemExit: Always raises to terminate with specified exit code
    """
    error_response = ErrorResponse(
        error=error,
        error_type=error_type,
        exit_code=exit_code,
    )
    emit_json(error_response.model_dump(mode="json"))
    raise SystemExit(exit_code)


def json_error_boundary(func: Callable) -> Callable:
    """Decorator to emit JSON errors when the command runs with --format json.

    Inspects function kwargs for 'output_format'. In JSON mode, clonegc errors
    are emitted as an ErrorResponse; otherwise they bubble up for the text
    error handling.

    Example:
        @click.command()
        @click.option("--format", "output_format", type=click.Choice(["text", "json"]))
        @json_error_boundary
        def my_command(output_format: str) -> None:
            ...
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except SystemExit:
            raise
        except Exception as e:
            if kwargs.get("output_format", "text") == "json":
                emit_json_error(str(e), type(e).__name__, exit_code=1)
            else:
                raise

    return wrapper

"""Context resolution shared by the CLI commands."""

import os
from dataclasses import replace
from pathlib import Path
from typing import Any

from clonegc.core.config import apply_overrides, resolve_config
from clonegc.core.context import CleanupContext, create_context


def resolve_cleanup_context(
    injected: CleanupContext | None,
    *,
    config_path: Path | None,
    overrides: dict[str, Any],
) -> CleanupContext:
    """Return the context a command runs with.

    An injected context (tests) keeps its dependencies and only has the
    command-line overrides layered onto its config. Otherwise the config is
    resolved from file, environment and options and real dependencies are
    created.

    Raises:
        ConfigurationError: If the resolved configuration is invalid
    """
    if injected is not None:
        return replace(injected, config=apply_overrides(injected.config, overrides))

    config = resolve_config(config_path=config_path, env=os.environ, cli_overrides=overrides)
    return create_context(config)

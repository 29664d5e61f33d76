"""Cleanup configuration data structures and loading.

Configuration is resolved once at the CLI entry point from, in increasing
precedence: built-in defaults, the TOML config file, the CEPH_* environment
variables, and command-line options.

Example config (~/.clonegc/config.toml):

    pool = "volumes"
    conf_file = "/etc/ceph/ceph.conf"
    keyring = "/etc/ceph/ceph.client.admin.keyring"
    deleted_list = "/var/lib/clonegc/deleted.txt"
    max_height = 8
    max_generations = 5
"""

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from clonegc.core.errors import ConfigurationError
from clonegc.core.pruning import DEFAULT_MAX_GENERATIONS

_PATH_FIELDS = {"conf_file", "keyring", "graph_dir", "deleted_list"}
_BOOL_FIELDS = {"dry_run", "clean", "graph", "continue_on_error"}
_INT_FIELDS = {"max_height", "max_generations"}


@dataclass(frozen=True)
class CleanupConfig:
    """Immutable configuration for one cleanup run.

    All fields are read-only after construction.
    """

    pool: str | None = None
    conf_file: Path | None = None
    keyring: Path | None = None
    dry_run: bool = True
    clean: bool = True
    graph: bool = True
    graph_dir: Path = Path("graphs")
    max_height: int = 0  # 0 = no flattening
    max_generations: int = DEFAULT_MAX_GENERATIONS
    deleted_list: Path | None = None
    continue_on_error: bool = False


def default_config_path() -> Path:
    """Get the path to the user config file.

    Returns:
        Path to ~/.clonegc/config.toml
    """
    return Path.home() / ".clonegc" / "config.toml"


def _coerce(key: str, value: Any, source: str) -> Any:
    if key in _PATH_FIELDS:
        if not isinstance(value, (str, Path)):
            raise ConfigurationError(f"'{key}' in {source} must be a path")
        return Path(value).expanduser()
    if key in _BOOL_FIELDS:
        if not isinstance(value, bool):
            raise ConfigurationError(f"'{key}' in {source} must be true or false")
        return value
    if key in _INT_FIELDS:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(f"'{key}' in {source} must be an integer")
        return value
    if not isinstance(value, str):
        raise ConfigurationError(f"'{key}' in {source} must be a string")
    return value


def load_config_file(path: Path) -> dict[str, Any]:
    """Load overrides from a TOML config file.

    A missing file yields no overrides.

    Raises:
        ConfigurationError: If the file is malformed or has unknown keys
    """
    if not path.exists():
        return {}

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Malformed config file {path}: {e}") from e

    known = {f.name for f in fields(CleanupConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown keys in {path}: {', '.join(unknown)}", details={"path": str(path)}
        )
    return {key: _coerce(key, value, str(path)) for key, value in data.items()}


def env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    """Read overrides from the CEPH_* environment variables.

    CEPH_NOCLEAN and CEPH_NOGRAPH disable their feature when set to any
    non-empty value.

    Raises:
        ConfigurationError: If CEPH_MAX_HEIGHT is not an integer
    """
    overrides: dict[str, Any] = {}
    if env.get("CEPH_CONF"):
        overrides["conf_file"] = Path(env["CEPH_CONF"]).expanduser()
    if env.get("CEPH_KEYRING"):
        overrides["keyring"] = Path(env["CEPH_KEYRING"]).expanduser()
    if env.get("CEPH_POOL"):
        overrides["pool"] = env["CEPH_POOL"]
    if env.get("CEPH_MAX_HEIGHT"):
        try:
            overrides["max_height"] = int(env["CEPH_MAX_HEIGHT"])
        except ValueError:
            raise ConfigurationError(
                f"CEPH_MAX_HEIGHT must be an integer, got '{env['CEPH_MAX_HEIGHT']}'"
            ) from None
    if env.get("CEPH_NOCLEAN"):
        overrides["clean"] = False
    if env.get("CEPH_NOGRAPH"):
        overrides["graph"] = False
    return overrides


def validate_config(config: CleanupConfig) -> CleanupConfig:
    """Check value ranges.

    Raises:
        ConfigurationError: If a value is out of range
    """
    if config.max_height < 0:
        raise ConfigurationError(f"max_height must be 0 or greater, got {config.max_height}")
    if config.max_generations < 1:
        raise ConfigurationError(
            f"max_generations must be at least 1, got {config.max_generations}"
        )
    return config


def apply_overrides(config: CleanupConfig, overrides: Mapping[str, Any]) -> CleanupConfig:
    """Return a validated copy of `config` with non-None overrides applied."""
    return validate_config(
        replace(config, **{k: v for k, v in overrides.items() if v is not None})
    )


def resolve_config(
    *,
    config_path: Path | None,
    env: Mapping[str, str],
    cli_overrides: Mapping[str, Any],
) -> CleanupConfig:
    """Resolve the effective configuration.

    Args:
        config_path: Config file to read, or None for the default location
        env: Environment variables
        cli_overrides: Command-line values; None entries mean "not given"

    Returns:
        Validated CleanupConfig
    """
    if config_path is not None and not config_path.exists():
        raise ConfigurationError(f"Config file not found at {config_path}")
    path = config_path if config_path is not None else default_config_path()
    config = CleanupConfig()
    config = replace(config, **load_config_file(path))
    config = replace(config, **env_overrides(env))
    return apply_overrides(config, cli_overrides)

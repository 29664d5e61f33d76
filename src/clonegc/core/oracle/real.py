"""Liveness oracle backed by an exported deletion list."""

import logging
from pathlib import Path

from clonegc.core.errors import ConfigurationError
from clonegc.core.oracle.abc import LivenessOracle
from clonegc.core.resources import ResourceKind

logger = logging.getLogger(__name__)


def parse_deletion_list(content: str) -> set[str]:
    """Parse a deletion list: one name per line, `#` starts a comment.

    Example:
        >>> sorted(parse_deletion_list("img2\\n# retired\\nimg4@daily\\n"))
        ['img2', 'img4@daily']
    """
    names: set[str] = set()
    for line in content.splitlines():
        name = line.split("#", 1)[0].strip()
        if name:
            names.add(name)
    return names


class DeletionListOracle(LivenessOracle):
    """Production oracle reading names the application layer has released.

    The list is read once at construction so every query within a run sees
    the same answer.
    """

    def __init__(self, path: Path) -> None:
        """Load the deletion list.

        Raises:
            ConfigurationError: If the file does not exist
        """
        if not path.exists():
            raise ConfigurationError(
                f"Deletion list not found at {path}", details={"path": str(path)}
            )
        self.path = path
        self._deleted = parse_deletion_list(path.read_text(encoding="utf-8"))
        logger.info("loaded %d logically deleted names from %s", len(self._deleted), path)

    def is_logically_deleted(self, name: str, kind: ResourceKind) -> bool:
        return name in self._deleted

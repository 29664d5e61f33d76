"""Production storage discovery using the rbd CLI."""

import logging
from pathlib import Path

from clonegc.core.resources import ParentSnapshot
from clonegc.core.storage.abc import StorageDiscovery
from clonegc.core.storage.parsing import (
    parse_children,
    parse_image_list,
    parse_parent,
    parse_snapshot_names,
)
from clonegc.core.subprocess import run_subprocess_with_context

logger = logging.getLogger(__name__)


class RealRbdStorage(StorageDiscovery):
    """Production implementation using `rbd --format json`.

    All queries execute actual rbd commands via subprocess and raise
    RuntimeError with the command's stderr when rbd fails.
    """

    def __init__(
        self,
        pool: str,
        *,
        conf_file: Path | None = None,
        keyring: Path | None = None,
    ) -> None:
        """Create discovery for a single pool.

        Args:
            pool: Pool to inspect
            conf_file: Optional ceph.conf path, passed as --conf
            keyring: Optional keyring path, passed as --keyring
        """
        self.pool = pool
        self.conf_file = conf_file
        self.keyring = keyring

    def _rbd(self, args: list[str], operation_context: str) -> str:
        cmd = ["rbd"]
        if self.conf_file is not None:
            cmd.extend(["--conf", str(self.conf_file)])
        if self.keyring is not None:
            cmd.extend(["--keyring", str(self.keyring)])
        cmd.extend(args)
        cmd.extend(["--format", "json"])
        logger.debug("running %s", " ".join(cmd))
        result = run_subprocess_with_context(cmd, operation_context)
        return result.stdout

    def _spec(self, image: str, snapshot: str | None = None) -> str:
        spec = f"{self.pool}/{image}"
        if snapshot is not None:
            spec += f"@{snapshot}"
        return spec

    def list_volumes(self) -> list[str]:
        stdout = self._rbd(["ls", "--pool", self.pool], f"list images in pool {self.pool}")
        return parse_image_list(stdout)

    def get_parent_snapshot(self, volume: str) -> ParentSnapshot | None:
        stdout = self._rbd(["info", self._spec(volume)], f"get info for image {volume}")
        return parse_parent(stdout)

    def list_snapshots(self, volume: str) -> list[str]:
        stdout = self._rbd(["snap", "ls", self._spec(volume)], f"list snapshots of {volume}")
        return parse_snapshot_names(stdout)

    def list_clone_children(self, volume: str) -> list[str]:
        """List children across every snapshot of the volume.

        rbd reports children per snapshot, so this costs one call per snapshot.
        """
        children: list[str] = []
        for snapshot in self.list_snapshots(volume):
            stdout = self._rbd(
                ["children", self._spec(volume, snapshot)],
                f"list children of {volume}@{snapshot}",
            )
            for child in parse_children(stdout):
                if child not in children:
                    children.append(child)
        return children

"""Tests for RealRbdStorage command construction.

subprocess is replaced by a stub keyed on the rbd arguments, so these tests
check which commands are issued and how their output is combined.
"""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from clonegc.core.errors import DiscoveryError, Phase
from clonegc.core.forest import discover_facts
from clonegc.core.resources import ParentSnapshot
from clonegc.core.storage.real import RealRbdStorage


def _completed(cmd: list[str], stdout: str) -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(args=cmd, returncode=0, stdout=stdout, stderr="")


def test_list_volumes_command() -> None:
    """Test that rbd ls is run for the pool with JSON output and config paths."""
    storage = RealRbdStorage(
        "volumes", conf_file=Path("/etc/ceph/ceph.conf"), keyring=Path("/etc/ceph/keyring")
    )

    with patch("clonegc.core.storage.real.run_subprocess_with_context") as mock_run:
        mock_run.side_effect = lambda cmd, ctx: _completed(cmd, '["base"]')
        volumes = storage.list_volumes()

    assert volumes == ["base"]
    cmd = mock_run.call_args.args[0]
    assert cmd == [
        "rbd",
        "--conf",
        "/etc/ceph/ceph.conf",
        "--keyring",
        "/etc/ceph/keyring",
        "ls",
        "--pool",
        "volumes",
        "--format",
        "json",
    ]


def test_get_parent_snapshot_uses_image_spec() -> None:
    """Test that rbd info is addressed as pool/image."""
    storage = RealRbdStorage("volumes")
    stdout = '{"name": "vm", "parent": {"pool": "volumes", "image": "base", "snapshot": "gold"}}'

    with patch("clonegc.core.storage.real.run_subprocess_with_context") as mock_run:
        mock_run.side_effect = lambda cmd, ctx: _completed(cmd, stdout)
        parent = storage.get_parent_snapshot("vm")

    assert parent == ParentSnapshot(volume="base", snapshot="gold")
    assert mock_run.call_args.args[0] == ["rbd", "info", "volumes/vm", "--format", "json"]


def test_list_clone_children_queries_every_snapshot() -> None:
    """Test that children are gathered per snapshot and de-duplicated."""
    storage = RealRbdStorage("volumes")
    outputs = {
        "snap": '[{"name": "gold"}, {"name": "silver"}]',
        "volumes/base@gold": '[{"pool": "volumes", "image": "vm-1"}]',
        "volumes/base@silver": '["volumes/vm-2", "volumes/vm-1"]',
    }

    def fake_run(cmd: list[str], operation_context: str) -> subprocess.CompletedProcess[str]:
        key = cmd[1] if cmd[1] == "snap" else cmd[2]
        return _completed(cmd, outputs[key])

    with patch("clonegc.core.storage.real.run_subprocess_with_context", side_effect=fake_run):
        children = storage.list_clone_children("base")

    assert children == ["vm-1", "vm-2"]


def test_rbd_failure_surfaces_as_runtime_error() -> None:
    """Test that a failing rbd command raises RuntimeError with context."""
    storage = RealRbdStorage("volumes")

    with patch("clonegc.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = subprocess.CalledProcessError(
            returncode=2,
            cmd=["rbd"],
            stderr="rbd: error opening pool 'volumes': (2) No such file or directory",
        )
        with pytest.raises(RuntimeError) as exc_info:
            storage.list_volumes()

    message = str(exc_info.value)
    assert "list images in pool volumes" in message
    assert "No such file or directory" in message


def test_malformed_snapshot_listing_is_discovery_error() -> None:
    """Test that unexpected rbd snap ls output aborts discovery naming the volume."""
    storage = RealRbdStorage("volumes")
    outputs = {
        "ls": '["base"]',
        "info": '{"name": "base"}',
        "snap": '[{"id": 4, "size": 1024}]',
    }

    def fake_run(cmd: list[str], operation_context: str) -> subprocess.CompletedProcess[str]:
        return _completed(cmd, outputs[cmd[1]])

    with patch("clonegc.core.storage.real.run_subprocess_with_context", side_effect=fake_run):
        with pytest.raises(DiscoveryError) as exc_info:
            discover_facts(storage)

    assert exc_info.value.resource == "base"
    assert exc_info.value.phase == Phase.DISCOVERY
    assert "Snapshot entry without a name" in str(exc_info.value)

"""Tests for the show command."""

from click.testing import CliRunner

from clonegc.cli.cli import cli
from clonegc.core.context import CleanupContext
from clonegc.core.oracle.fake import FakeOracle
from clonegc.core.storage.fake import FakeStorage
from tests.test_utils.builders import chain_storage


def test_show_prints_forest() -> None:
    """Test that show renders every tree with liveness markers."""
    ctx = CleanupContext.for_test(
        storage=chain_storage(2),
        oracle=FakeOracle(deleted={"v2"}),
    )
    runner = CliRunner()

    result = runner.invoke(cli, ["show"], obj=ctx, color=False)

    assert result.exit_code == 0, result.output
    assert "v1 [vol] alive" in result.output
    assert "└─ v1@s1 [snap] alive" in result.output
    assert "   └─ v2 [vol] dead" in result.output


def test_show_single_root() -> None:
    """Test that --root limits output to one subtree."""
    ctx = CleanupContext.for_test(storage=chain_storage(3))
    runner = CliRunner()

    result = runner.invoke(cli, ["show", "--root", "v2"], obj=ctx, color=False)

    assert result.exit_code == 0, result.output
    assert "v1 [vol]" not in result.output
    assert "v2 [vol] alive" in result.output
    assert "└─ v2@s2 [snap] alive" in result.output


def test_show_unknown_root() -> None:
    """Test that an unknown --root is an error."""
    ctx = CleanupContext.for_test(storage=chain_storage(2))
    runner = CliRunner()

    result = runner.invoke(cli, ["show", "--root", "nope"], obj=ctx)

    assert result.exit_code == 1
    assert "Error: Resource 'nope' not found" in result.output


def test_show_empty_pool() -> None:
    """Test that an empty pool prints a notice."""
    ctx = CleanupContext.for_test(storage=FakeStorage())
    runner = CliRunner()

    result = runner.invoke(cli, ["show"], obj=ctx)

    assert result.exit_code == 0
    assert "No volumes found" in result.output


def test_show_discovery_error() -> None:
    """Test that an unreadable image is reported as an error."""
    ctx = CleanupContext.for_test(storage=FakeStorage(volumes=["vm"], unreadable={"vm"}))
    runner = CliRunner()

    result = runner.invoke(cli, ["show"], obj=ctx)

    assert result.exit_code == 1
    assert "Error: Cannot read parent of volume vm" in result.output


def test_help_lists_commands() -> None:
    """Test that the group help lists both commands."""
    runner = CliRunner()

    result = runner.invoke(cli, ["-h"])

    assert result.exit_code == 0
    assert "clean" in result.output
    assert "show" in result.output

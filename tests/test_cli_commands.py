"""Tests for the typer CLI."""

from typer.testing import CliRunner

from snapshotmcp import __version__
from snapshotmcp.cli.commands import app

runner = CliRunner()


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_tools_table_lists_catalog():
    result = runner.invoke(app, ["tools"])
    assert result.exit_code == 0
    for name in ("get_space", "cast_vote", "unfollow_space"):
        assert name in result.stdout


def test_bad_config_exits_nonzero(tmp_path):
    bad = tmp_path / "config.json"
    bad.write_text("[]")
    result = runner.invoke(app, ["stdio", "--config", str(bad)])
    assert result.exit_code == 1

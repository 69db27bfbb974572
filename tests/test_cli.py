"""Tests for the root farmctl CLI."""

from pathlib import Path

from click.testing import CliRunner

from farmctl import __version__
from farmctl.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "farmctl" in result.output
    for command in ("animal", "barn", "rebalance", "verify", "reset"):
        assert command in result.output
    assert "--root" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


# --- Global flags ---


def test_json_flag_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--json", "--version"])
    assert result.exit_code == 0


def test_quiet_flag_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-q", "--version"])
    assert result.exit_code == 0


def test_log_json_flag_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--log-json", "--version"])
    assert result.exit_code == 0


def test_config_option_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-c", "/tmp/farmctl-missing.toml", "--version"])
    assert result.exit_code == 0


def test_invalid_toml_reported(cli_runner: CliRunner, tmp_path: Path) -> None:
    bad = tmp_path / "farmctl.toml"
    bad.write_text("[barns\n", encoding="utf-8")
    result = cli_runner.invoke(cli, ["-c", str(bad), "verify"])
    assert result.exit_code == 1
    assert "Invalid TOML" in result.output


def test_root_option_places_farm(cli_runner: CliRunner, tmp_path: Path) -> None:
    root = tmp_path / "meadow"
    result = cli_runner.invoke(
        cli, ["--root", str(root), "animal", "add", "Daisy", "--color", "red"]
    )
    assert result.exit_code == 0
    assert (root / ".farmctl" / "farmctl.db").is_file()

"""Tests for the barn command group."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from farmctl.cli import cli


@pytest.mark.usefixtures("_isolated_farm")
class TestBarnList:
    def test_empty(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["barn", "list"])
        assert result.exit_code == 0
        assert "No barns." in result.output

    def test_lists_barns(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["animal", "populate", "25", "--seed", "1"])
        result = cli_runner.invoke(cli, ["barn", "list"])
        assert result.exit_code == 0
        assert "Occupants" in result.output
        assert "barns" in result.output

    def test_color_filter_json(self, cli_runner: CliRunner) -> None:
        for i in range(25):
            cli_runner.invoke(cli, ["animal", "add", f"R{i}", "--color", "red"])
        cli_runner.invoke(cli, ["animal", "add", "B", "--color", "blue"])
        result = cli_runner.invoke(cli, ["--json", "barn", "list", "--color", "red"])
        data = json.loads(result.output)
        assert data["data"]["count"] == 3
        assert sorted(item["occupants"] for item in data["data"]["items"]) == [8, 8, 9]

    def test_capacity_from_env(
        self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("FARMCTL_BARNS__CAPACITY", "4")
        cli_runner.invoke(cli, ["animal", "populate", "1", "--seed", "1"])
        data = json.loads(cli_runner.invoke(cli, ["--json", "barn", "list"]).output)
        assert data["data"]["items"][0]["capacity"] == 4

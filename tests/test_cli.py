"""Tests for the root edgewalk CLI."""

import pytest
from click.testing import CliRunner

from edgewalk import __version__
from edgewalk.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "edgewalk" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


@pytest.mark.usefixtures("_isolated_root")
def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


@pytest.mark.parametrize("flag", ["--json", "-q", "-v", "--log-json"])
def test_global_flags_accepted(cli_runner: CliRunner, flag: str) -> None:
    result = cli_runner.invoke(cli, [flag, "--version"])
    assert result.exit_code == 0


@pytest.mark.parametrize(
    "command",
    ["setup", "index", "seed", "add-user", "add-group", "link", "groups", "users", "traverse", "count"],
)
def test_commands_registered(cli_runner: CliRunner, command: str) -> None:
    result = cli_runner.invoke(cli, [command, "--help"])
    assert result.exit_code == 0


@pytest.mark.parametrize("command", ["setup", "seed", "groups", "traverse"])
def test_examples_flag(cli_runner: CliRunner, command: str) -> None:
    result = cli_runner.invoke(cli, [command, "--examples"])
    assert result.exit_code == 0
    assert "Examples for" in result.output
    assert f"edgewalk {command}" in result.output
    assert "$ edgewalk" in result.output


def test_help_lists_commands_in_workflow_order(cli_runner: CliRunner) -> None:
    output = cli_runner.invoke(cli, ["--help"]).output
    positions = [output.index(f"  {name} ") for name in ("setup", "seed", "link", "groups", "count")]
    assert positions == sorted(positions)


@pytest.mark.usefixtures("_isolated_root")
def test_missing_config_file_is_an_error(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-c", "missing.toml", "setup"])
    assert result.exit_code == 1
    assert "Config file not found" in result.output


@pytest.mark.integration
@pytest.mark.usefixtures("_isolated_root")
def test_sample_workflow(cli_runner: CliRunner) -> None:
    """setup, seed 100/10/100, then walk user 6 a page of 16 at a time."""
    import json

    assert cli_runner.invoke(cli, ["setup"]).exit_code == 0
    seeded = cli_runner.invoke(cli, ["--json", "seed", "--seed", "2024"])
    assert seeded.exit_code == 0, seeded.output

    scan = json.loads(cli_runner.invoke(cli, ["--json", "traverse", "edges_all"]).output)
    expected = sorted(i["group_id"] for i in scan["data"]["items"] if i["user_id"] == 6)

    groups = json.loads(cli_runner.invoke(cli, ["--json", "groups", "6"]).output)
    assert sorted(groups["data"]["related_ids"]) == expected
    assert groups["data"]["pages"] == max(1, -(-len(expected) // 16))

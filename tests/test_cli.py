import json
import os

import pytest
from asyncclick.testing import CliRunner

from fbxclient.cli.main import cli

from .conftest import MOCK_BASE_URL, MockFreebox


@pytest.fixture
def runner():
    """Runner fixture that unsets the FBX_ environment variables for tests."""
    fbx_vars = {k: None for k in os.environ if k.startswith("FBX_")}
    return CliRunner(env=fbx_vars)


@pytest.fixture
def cli_args(config):
    return [
        "--auth-file",
        config.auth_file,
        "--ca-file",
        config.ca_file,
        "--poll-interval",
        "0",
    ]


async def test_help(runner):
    res = await runner.invoke(cli, ["--help"])
    assert res.exit_code == 0
    assert "pair" in res.output


async def test_default_lists_devices(runner, cli_args, mock_freebox):
    device = mock_freebox()

    res = await runner.invoke(cli, cli_args)

    assert res.exit_code == 0, res.output
    assert "3 devices, 2 connected." in res.output
    assert device.calls["POST login/authorize"] == 1


async def test_devices_active(runner, cli_args, mock_freebox):
    mock_freebox()

    res = await runner.invoke(cli, [*cli_args, "devices", "--active"])

    assert res.exit_code == 0, res.output
    assert "Freebox Player" in res.output
    assert "Laptop" not in res.output


async def test_pair_command(runner, cli_args, config, mock_freebox):
    device = mock_freebox()

    res = await runner.invoke(cli, [*cli_args, "pair"])

    assert res.exit_code == 0, res.output
    assert f"Paired, api at {MOCK_BASE_URL}" in res.output
    assert device.calls["POST login/session"] == 0
    assert os.path.exists(config.auth_file)


async def test_players_json(runner, cli_args, mock_freebox):
    mock_freebox()

    res = await runner.invoke(cli, [*cli_args, "--json", "players"])

    assert res.exit_code == 0, res.output
    players = json.loads(res.stdout)
    assert players[0]["id"] == 1
    assert players[0]["device_name"] == "Freebox Player POP"


async def test_player_status_and_launch(runner, cli_args, mock_freebox):
    device = mock_freebox()

    res = await runner.invoke(cli, [*cli_args, "player-status", "1"])
    assert res.exit_code == 0, res.output
    assert "Power: running" in res.output

    res = await runner.invoke(cli, [*cli_args, "launch", "1", "tv:?channel=2"])
    assert res.exit_code == 0, res.output
    assert "Opened tv:?channel=2 on player 1" in res.output
    assert device.calls["POST player/1/api/v6/control/open"] == 1


async def test_error_without_stacktrace(runner, cli_args, mock_freebox):
    mock_freebox(MockFreebox(statuses=["denied"]))

    res = await runner.invoke(cli, cli_args)

    assert res.exit_code == 1
    assert "Raised error: Authorization status = denied" in res.output
    assert "Run with --debug enabled to see stacktrace" in res.output

"""Main module for cli tool."""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any

import asyncclick as click

from fbxclient import ClientConfig, Freebox, LanHost, Player, PlayerStatus

from .common import (
    CatchAllExceptions,
    echo,
    json_formatter_cb,
    pass_fbx,
)

# Commands which manage the pairing themselves instead of connecting first
SKIP_CONNECT_COMMANDS = ["pair"]


@click.group(
    invoke_without_command=True,
    cls=CatchAllExceptions(click.Group),
    result_callback=json_formatter_cb,
)
@click.option(
    "--host",
    envvar="FBX_HOST",
    default=ClientConfig.host,
    show_default=True,
    help="The well-known name of the appliance.",
)
@click.option(
    "--auth-file",
    envvar="FBX_AUTH_FILE",
    default=ClientConfig.auth_file,
    show_default=True,
    type=click.Path(dir_okay=False),
    help="File storing the pairing result.",
)
@click.option(
    "--ca-file",
    envvar="FBX_CA_FILE",
    default=ClientConfig.ca_file,
    show_default=True,
    type=click.Path(dir_okay=False),
    help="Root certificate of the appliance.",
)
@click.option(
    "--timeout",
    envvar="FBX_TIMEOUT",
    default=ClientConfig.DEFAULT_TIMEOUT,
    show_default=True,
    type=int,
    help="Timeout for a single request.",
)
@click.option(
    "--pairing-timeout",
    envvar="FBX_PAIRING_TIMEOUT",
    default=None,
    type=float,
    help="Give up waiting for the manual confirmation after this many seconds.",
)
@click.option(
    "--poll-interval",
    envvar="FBX_POLL_INTERVAL",
    default=ClientConfig.DEFAULT_POLL_INTERVAL,
    show_default=True,
    type=float,
    help="Delay between two pairing status checks.",
)
@click.option(
    "-d",
    "--debug",
    envvar="FBX_DEBUG",
    default=False,
    is_flag=True,
    help="Print debug output",
)
@click.option(
    "--json/--no-json",
    envvar="FBX_JSON",
    default=False,
    is_flag=True,
    help="Output results as JSON.",
)
@click.version_option(package_name="python-fbxclient")
@click.pass_context
async def cli(
    ctx,
    host,
    auth_file,
    ca_file,
    timeout,
    pairing_timeout,
    poll_interval,
    debug,
    json,
):
    """A tool for pairing with and querying a Freebox."""
    # no need to perform any checks if we are just displaying the help
    if "--help" in sys.argv:
        # Context object is required to avoid crashing on sub-groups
        ctx.obj = object()
        return

    logging_config: dict[str, Any] = {
        "level": logging.DEBUG if debug else logging.INFO
    }
    try:
        from rich.logging import RichHandler

        logging_config["handlers"] = [RichHandler(show_time=False)]
        logging_config["format"] = "%(message)s"
    except ImportError:
        pass

    logging.basicConfig(**logging_config)

    config = ClientConfig(
        host=host,
        timeout=timeout,
        ca_file=ca_file,
        auth_file=auth_file,
        poll_interval=poll_interval,
        pairing_timeout=pairing_timeout,
    )

    @asynccontextmanager
    async def async_wrapped_freebox(fbx: Freebox):
        try:
            yield fbx
        finally:
            await fbx.close()

    fbx = await ctx.with_async_resource(async_wrapped_freebox(Freebox(config)))
    ctx.obj = fbx

    if ctx.invoked_subcommand in SKIP_CONNECT_COMMANDS:
        return

    await fbx.connect()

    if ctx.invoked_subcommand is None:
        return await ctx.invoke(devices)


@cli.command()
@pass_fbx
async def pair(fbx: Freebox):
    """Pair with the appliance, replacing any stored pairing."""
    echo("Pairing, confirm the request on the appliance...")
    persisted = await fbx.pair()
    echo(f"Paired, api at {persisted.infos.base_url}")
    return persisted.infos


@cli.command()
@click.option("--interface", default="pub", show_default=True)
@click.option("--active", is_flag=True, help="Only list connected hosts.")
@pass_fbx
async def devices(fbx: Freebox, interface="pub", active=False) -> list[LanHost]:
    """List the hosts seen on the lan."""
    hosts = await fbx.get_lan_hosts(interface)
    connected = [host for host in hosts if host.active]
    if active:
        for host in connected:
            echo(f"{host.primary_name} ({host.id})")
        return connected

    echo(f"{len(hosts)} devices, {len(connected)} connected.")
    return hosts


@cli.command()
@pass_fbx
async def players(fbx: Freebox) -> list[Player]:
    """List the player units."""
    found = await fbx.get_players()
    for player in found:
        state = "reachable" if player.reachable else "unreachable"
        echo(f"{player.id}: {player.device_name} ({player.device_model}, {state})")
    return found


@cli.command()
@click.argument("player_id", type=int)
@pass_fbx
async def player_status(fbx: Freebox, player_id: int) -> PlayerStatus:
    """Show the state of a player."""
    status = await fbx.get_player_status(player_id)
    echo(f"Power: {status.power_state}")
    if status.foreground_app:
        echo(f"Foreground app: {status.foreground_app.get('package')}")
    return status


@cli.command()
@click.argument("player_id", type=int)
@click.argument("url")
@pass_fbx
async def launch(fbx: Freebox, player_id: int, url: str):
    """Open an url on a player."""
    await fbx.launch(player_id, url)
    echo(f"Opened {url} on player {player_id}")

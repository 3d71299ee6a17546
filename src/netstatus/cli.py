"""CLI commands for the network status monitor.

This module provides Click commands for watching a ledger network's
voting power, rebroadcasting representatives, block counts and peers.

Usage:
    netstatus watch [--refresh SECONDS] [--top N]
    netstatus show [--json] [--top N]
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import click

from netstatus import create_view
from netstatus.config import ConfigError, StatusConfig, load_config
from netstatus.poller import RepeatingTask
from netstatus.rpc import RequestsAPIClient
from netstatus.utils.logging import make_logger, setup_logging
from netstatus.view import DEFAULT_TOP_REPRESENTATIVES, StatusView, console

logger = make_logger(__name__)


def _create_client(config: StatusConfig) -> RequestsAPIClient:
    return RequestsAPIClient(config.api_url, timeout=config.request_timeout)


async def _watch(config: StatusConfig, refresh: float, top: int) -> None:
    """Poll counters and the feed in the background, redraw until cancelled."""
    with _create_client(config) as client:
        view = create_view(config, api=client)
        poller = view.poller
        feed_task = RepeatingTask(
            lambda token: view.feed.refresh(client),
            config.poll_interval,
            name="network-data-feed",
        )
        poller.start()
        feed_task.start()
        try:
            while True:
                console.clear()
                view.render(console, top=top)
                await asyncio.sleep(refresh)
        finally:
            poller.stop()
            feed_task.stop()
            await asyncio.gather(poller.join(), feed_task.join())


async def _show(config: StatusConfig) -> tuple[StatusView, bool]:
    """Run one poll cycle and one feed refresh concurrently."""
    with _create_client(config) as client:
        view = create_view(config, api=client)
        polled, _ = await asyncio.gather(
            view.poller.poll_once(), view.feed.refresh(client)
        )
        return view, polled


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    envvar="NETSTATUS_CONFIG",
    help="Client config JSON file (env: NETSTATUS_CONFIG)",
)
@click.option(
    "--api-url",
    default=None,
    envvar="NETSTATUS_API_URL",
    help="Explorer API base URL (env: NETSTATUS_API_URL)",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    help="Log level",
)
@click.pass_context
def netstatus(
    ctx: click.Context,
    config_path: Path | None,
    api_url: str | None,
    log_level: str,
) -> None:
    """Monitor the health of a ledger's representative network.

    Examples:

        # Live view, counters refreshed every 10 seconds
        netstatus watch

        # One-shot status against a specific explorer API
        netstatus --api-url https://api.example.org show

        # Machine-readable output
        netstatus show --json
    """
    setup_logging(log_level.upper(), logger)

    try:
        config = load_config(config_path, api_url=api_url)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@netstatus.command()
@click.option(
    "--refresh",
    type=click.FloatRange(min=0.1),
    default=1.0,
    show_default=True,
    help="Seconds between screen redraws",
)
@click.option(
    "--top",
    type=click.IntRange(min=0),
    default=DEFAULT_TOP_REPRESENTATIVES,
    show_default=True,
    help="Number of online representatives to list (0 to hide)",
)
@click.pass_context
def watch(ctx: click.Context, refresh: float, top: int) -> None:
    """Continuously display network status until interrupted."""
    config: StatusConfig = ctx.obj["config"]
    logger.info(f"Watching {config.api_url}")

    try:
        asyncio.run(_watch(config, refresh, top))
    except KeyboardInterrupt:
        console.print("\n\n[bold yellow]Monitoring stopped by user[/bold yellow]")


@netstatus.command()
@click.option("--json", "as_json", is_flag=True, help="Print metrics as JSON")
@click.option(
    "--top",
    type=click.IntRange(min=0),
    default=DEFAULT_TOP_REPRESENTATIVES,
    show_default=True,
    help="Number of online representatives to list (0 to hide)",
)
@click.pass_context
def show(ctx: click.Context, as_json: bool, top: int) -> None:
    """Fetch the network status once and print it."""
    config: StatusConfig = ctx.obj["config"]

    view, polled = asyncio.run(_show(config))

    if as_json:
        click.echo(json.dumps(view.compute().to_dict(), indent=2))
    else:
        view.render(console, top=top)

    if not polled:
        error = view.poller.last_error
        raise click.ClickException(f"Could not fetch network counters: {error}")


def main() -> None:
    netstatus(obj={})


if __name__ == "__main__":
    main()

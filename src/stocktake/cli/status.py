"""Status and reset commands."""

from __future__ import annotations

import logging

import click

from stocktake.app import Stocktake
from stocktake.cli.exit_codes import ExitCode
from stocktake.cli.output import echo_json, format_option
from stocktake.cli.runtime import run_with_stocktake
from stocktake.core.datetime_utils import format_timestamp

logger = logging.getLogger(__name__)


@click.command("status")
@format_option
@click.pass_context
def status_command(ctx: click.Context, output_format: str) -> None:
    """Show the database location, known lists and last sync time.

    Examples:

    \b
        stocktake status
        stocktake status --format json
    """
    config = ctx.obj["config"]
    json_output = output_format == "json"

    async def body(stocktake: Stocktake) -> dict:
        lists = await stocktake.service.load_inventory_lists()
        known_ids = {inventory_list.id for inventory_list in lists}
        counted = await stocktake.repository.get_counted_list_ids()
        return {
            "database": str(config.database_path),
            "lists": len(lists),
            "lists_in_progress": len(known_ids.intersection(counted)),
            "last_sync": await stocktake.service.get_last_sync_timestamp(),
            "probe_url": config.sync.probe_url,
            "connected": await stocktake.coordinator.is_connected(),
        }

    data = run_with_stocktake(ctx, body, json_output=json_output)

    if json_output:
        echo_json(data)
        return

    click.echo(f"Database:   {data['database']}")
    click.echo(
        f"Lists:      {data['lists']} ({data['lists_in_progress']} with scans)"
    )
    click.echo(f"Last sync:  {format_timestamp(data['last_sync'])}")
    if data["probe_url"]:
        state = "online" if data["connected"] else "offline"
        click.echo(f"Network:    {state} ({data['probe_url']})")
    else:
        click.echo("Network:    no probe URL configured")


@click.command("reset")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def reset_command(ctx: click.Context, yes: bool) -> None:
    """Delete every list, scan, report and the sync state on this device."""
    if not yes and not click.confirm("Delete ALL stocktake data on this device?"):
        click.echo("Operation cancelled.")
        raise SystemExit(ExitCode.INTERRUPTED)

    async def body(stocktake: Stocktake) -> None:
        await stocktake.service.clear_all_data()

    run_with_stocktake(ctx, body)
    click.echo("All stocktake data was deleted.")

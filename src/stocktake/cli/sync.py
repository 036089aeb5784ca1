"""Sync command."""

from __future__ import annotations

import logging

import click

from stocktake.app import Stocktake
from stocktake.cli.exit_codes import ExitCode
from stocktake.cli.output import echo_json, format_option
from stocktake.cli.runtime import activate_list, run_with_stocktake
from stocktake.core.datetime_utils import format_timestamp
from stocktake.domain.enums import SyncOutcome

logger = logging.getLogger(__name__)

_MESSAGES = {
    SyncOutcome.SYNCED: "Synced",
    SyncOutcome.NOTHING_TO_PUSH: "Nothing to push; list definitions refreshed",
    SyncOutcome.NOT_CONNECTED: "Not connected; counts stay on this device",
    SyncOutcome.SYNC_FAILED: "Sync failed; counts stay on this device",
}


@click.command("sync")
@click.argument("list_id", required=False)
@format_option
@click.pass_context
def sync_command(ctx: click.Context, list_id: str | None, output_format: str) -> None:
    """Push the counts of LIST_ID to the remote and pull list definitions.

    Without LIST_ID only list definitions are pulled. Offline or failed
    syncs are not errors for local data; they exit with NOT_SYNCED so that
    scripts can retry later.
    """
    json_output = output_format == "json"

    async def body(stocktake: Stocktake) -> tuple[SyncOutcome, str | None]:
        if list_id is not None:
            await activate_list(stocktake, list_id)
        outcome = await stocktake.service.sync()
        return outcome, await stocktake.service.get_last_sync_timestamp()

    outcome, last_sync = run_with_stocktake(ctx, body, json_output=json_output)

    if json_output:
        echo_json({"outcome": outcome.value, "last_sync": last_sync})
    else:
        click.echo(_MESSAGES[outcome])
        click.echo(f"Last sync: {format_timestamp(last_sync)}")

    if outcome in (SyncOutcome.NOT_CONNECTED, SyncOutcome.SYNC_FAILED):
        raise SystemExit(ExitCode.NOT_SYNCED)

"""Inventory list provisioning commands."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from stocktake.app import Stocktake
from stocktake.cli.output import echo_json, format_option
from stocktake.cli.runtime import run_with_stocktake
from stocktake.repository.importer import load_inventory_lists_file
from stocktake.repository.json_schemas import InventoryListSchema

logger = logging.getLogger(__name__)


@click.group("lists")
def lists_group() -> None:
    """Provision and inspect inventory lists."""


@lists_group.command("import")
@click.argument(
    "file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--replace",
    is_flag=True,
    help="Replace every stored list instead of merging by id.",
)
@click.pass_context
def import_command(ctx: click.Context, file: Path, replace: bool) -> None:
    """Import inventory lists from a JSON FILE.

    By default lists are merged by id: a list in FILE replaces the stored
    list with the same id and new lists are added. Scan counts are kept.

    Examples:

    \b
        stocktake lists import lists.json
        stocktake lists import lists.json --replace
    """

    async def body(stocktake: Stocktake) -> int:
        incoming = load_inventory_lists_file(file)
        if replace:
            await stocktake.repository.save_inventory_lists(incoming)
            return len(incoming)
        merged = await stocktake.repository.merge_inventory_lists(incoming)
        return len(merged)

    stored = run_with_stocktake(ctx, body)
    click.echo(f"Imported lists from {file} ({stored} list(s) stored)")


@lists_group.command("show")
@format_option
@click.pass_context
def show_command(ctx: click.Context, output_format: str) -> None:
    """Show the inventory lists known on this device."""

    async def body(stocktake: Stocktake) -> list[dict]:
        rows = []
        for inventory_list in await stocktake.service.load_inventory_lists():
            ledger = await stocktake.repository.get_scan_ledger(inventory_list.id)
            rows.append(
                {
                    "list": inventory_list,
                    "expected": sum(
                        item.expected_quantity for item in inventory_list.items
                    ),
                    "scanned": ledger.total,
                }
            )
        return rows

    json_output = output_format == "json"
    rows = run_with_stocktake(ctx, body, json_output=json_output)

    if json_output:
        echo_json(
            [
                InventoryListSchema.from_domain(row["list"]).model_dump(by_alias=True)
                for row in rows
            ]
        )
        return

    if not rows:
        click.echo("No inventory lists. Use 'stocktake lists import FILE'.")
        return

    click.echo(f"{'ID':<20} {'ITEMS':>5} {'EXPECTED':>8} {'SCANNED':>7}  NAME")
    for row in rows:
        inventory_list = row["list"]
        click.echo(
            f"{inventory_list.id:<20} {len(inventory_list.items):>5} "
            f"{row['expected']:>8} {row['scanned']:>7}  {inventory_list.name}"
        )

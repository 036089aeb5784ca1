"""Counting commands: scan, missing and clear."""

from __future__ import annotations

import dataclasses
import logging

import click

from stocktake.app import Stocktake
from stocktake.cli.exit_codes import ExitCode
from stocktake.cli.output import echo_json, format_option
from stocktake.cli.runtime import activate_list, run_with_stocktake
from stocktake.domain.enums import ScanResult
from stocktake.domain.models import MissingItem
from stocktake.reconciliation.report import summarize_report
from stocktake.repository.json_schemas import MissingItemSchema

logger = logging.getLogger(__name__)


def _read_articles(articles: tuple[str, ...]) -> list[str]:
    """Trim manual input, skip blanks, and expand "-" to stdin lines."""
    values: list[str] = []
    for article in articles:
        if article == "-":
            values.extend(click.get_text_stream("stdin").read().splitlines())
        else:
            values.append(article)
    return [value.strip() for value in values if value.strip()]


@click.command("scan")
@click.argument("list_id")
@click.argument("articles", nargs=-1, required=True)
@click.pass_context
def scan_command(ctx: click.Context, list_id: str, articles: tuple[str, ...]) -> None:
    """Record scans of ARTICLES against inventory list LIST_ID.

    Each article number counts as one observation. Pass "-" to read one
    article number per line from stdin, as a keyboard-wedge scanner writes
    them.

    Examples:

    \b
        stocktake scan L1 100 100 200
        stocktake scan L1 - < scans.txt
    """
    article_numbers = _read_articles(articles)

    async def body(stocktake: Stocktake) -> list[tuple[str, ScanResult, int]]:
        await activate_list(stocktake, list_id)
        service = stocktake.service
        results = []
        for article_number in article_numbers:
            result = await service.scan(article_number)
            results.append(
                (article_number, result, service.get_scanned_count(article_number))
            )
        return results

    results = run_with_stocktake(ctx, body)

    not_found = 0
    for article_number, result, count in results:
        if result is ScanResult.RECORDED:
            click.echo(f"recorded   {article_number} (count {count})")
        else:
            not_found += 1
            click.echo(f"not found  {article_number}")

    if not_found:
        raise SystemExit(ExitCode.ARTICLE_NOT_FOUND)


def _summary_dict(items: list[MissingItem]) -> dict:
    summary = summarize_report(items)
    data = dataclasses.asdict(summary)
    data["is_complete"] = summary.is_complete
    return data


@click.command("missing")
@click.argument("list_id")
@format_option
@click.option(
    "--discrepancies",
    is_flag=True,
    help="Only show articles whose count differs from the expected quantity.",
)
@click.pass_context
def missing_command(
    ctx: click.Context, list_id: str, output_format: str, discrepancies: bool
) -> None:
    """Show the missing-items report for LIST_ID.

    MISSING is expected minus scanned; a negative value means more items
    were scanned than expected.
    """
    json_output = output_format == "json"

    async def body(stocktake: Stocktake) -> list[MissingItem]:
        await activate_list(stocktake, list_id)
        return await stocktake.service.get_missing_items()

    items = run_with_stocktake(ctx, body, json_output=json_output)
    shown = [item for item in items if item.missing != 0] if discrepancies else items

    if json_output:
        echo_json(
            {
                "list_id": list_id,
                "items": [
                    MissingItemSchema.from_domain(item).model_dump(by_alias=True)
                    for item in shown
                ],
                "summary": _summary_dict(items),
            }
        )
        return

    click.echo(f"{'ARTICLE':<16} {'EXPECTED':>8} {'SCANNED':>7} {'MISSING':>7}  DESCRIPTION")
    for item in shown:
        click.echo(
            f"{item.article_number:<16} {item.expected_quantity:>8} "
            f"{item.scanned_quantity:>7} {item.missing:>7}  {item.description}"
        )

    summary = summarize_report(items)
    click.echo()
    click.echo(
        f"{summary.article_count} article(s): {summary.scanned_total}/"
        f"{summary.expected_total} scanned, {summary.missing_total} missing"
    )
    if summary.over_scanned_articles:
        click.echo(f"{summary.over_scanned_articles} article(s) over-scanned")
    if summary.is_complete:
        click.echo("Count complete.")


@click.command("clear")
@click.argument("list_id")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def clear_command(ctx: click.Context, list_id: str, yes: bool) -> None:
    """Discard all scans recorded for LIST_ID and restart the count."""
    if not yes and not click.confirm(f"Discard all scans for list {list_id}?"):
        click.echo("Operation cancelled.")
        raise SystemExit(ExitCode.INTERRUPTED)

    async def body(stocktake: Stocktake) -> None:
        await activate_list(stocktake, list_id)
        await stocktake.service.clear_current_list_data()

    run_with_stocktake(ctx, body)
    click.echo(f"Cleared scan data for list {list_id}")

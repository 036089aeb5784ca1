"""Glue between synchronous click commands and the async service layer."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import click

from stocktake.app import Stocktake, build_stocktake
from stocktake.cli.exit_codes import ExitCode
from stocktake.cli.output import error_exit
from stocktake.domain.enums import ListSelection
from stocktake.exceptions import InvalidInventoryListError, StorageFailure

T = TypeVar("T")


class CommandError(Exception):
    """Raised inside a command body to exit with a specific code."""

    def __init__(self, message: str, code: ExitCode) -> None:
        super().__init__(message)
        self.code = code


def run_with_stocktake(
    ctx: click.Context,
    body: Callable[[Stocktake], Awaitable[T]],
    *,
    json_output: bool = False,
) -> T:
    """Wire the object graph from ctx.obj and run an async command body.

    ctx.obj may carry "remote" and "connectivity" entries, which are passed
    to build_stocktake() unchanged.

    CommandError and stocktake errors are mapped to exit codes; anything
    else propagates.
    """
    stocktake = build_stocktake(
        ctx.obj["config"],
        remote=ctx.obj.get("remote"),
        connectivity=ctx.obj.get("connectivity"),
    )

    async def runner() -> T:
        try:
            return await body(stocktake)
        finally:
            await stocktake.aclose()

    try:
        return asyncio.run(runner())
    except CommandError as e:
        error_exit(str(e), e.code, json_output)
    except InvalidInventoryListError as e:
        error_exit(str(e), ExitCode.INVALID_LIST_FILE, json_output)
    except StorageFailure as e:
        error_exit(str(e), ExitCode.STORAGE_FAILURE, json_output)


async def activate_list(stocktake: Stocktake, list_id: str) -> None:
    """Make list_id the active list.

    Raises:
        CommandError: With LIST_NOT_FOUND if no list has this id.
    """
    selection = await stocktake.service.set_current_list(list_id)
    if selection is ListSelection.NOT_FOUND:
        raise CommandError(f"Inventory list not found: {list_id}", ExitCode.LIST_NOT_FOUND)

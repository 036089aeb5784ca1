"""CLI module for stocktake."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click

from stocktake import __version__
from stocktake.cli.exit_codes import ExitCode
from stocktake.cli.output import error_exit

if TYPE_CHECKING:
    from stocktake.config.models import StocktakeConfig

logger = logging.getLogger(__name__)


def _load_config(
    config_path: Path | None,
    database_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> "StocktakeConfig":
    """Resolve configuration from CLI options, environment and config file.

    An explicitly passed config file must parse; the default one may be
    missing or broken, in which case defaults apply.
    """
    from stocktake.config import ConfigFileError, get_config

    try:
        return get_config(
            config_path=config_path,
            database_path=database_path,
            log_level=log_level,
            log_file=log_file,
            log_format="json" if log_json else None,
            strict=config_path is not None,
        )
    except (ConfigFileError, ValueError) as e:
        error_exit(f"Invalid configuration: {e}", ExitCode.CONFIG_ERROR)


@click.group()
@click.version_option(version=__version__, prog_name="stocktake")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.stocktake/config.toml).",
)
@click.option(
    "--db",
    "database_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Database file (default: ~/.stocktake/stocktake.db).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level from config.",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Override log file path from config.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    database_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Offline-first stock counting: scan articles against inventory lists."""
    ctx.ensure_object(dict)

    # Tests pass a ready-made config in obj; don't override it.
    if "config" in ctx.obj:
        return

    config = _load_config(config_path, database_path, log_level, log_file, log_json)

    from stocktake.logging import configure_logging

    configure_logging(config.logging)
    logger.debug("Using database %s", config.database_path)
    ctx.obj["config"] = config


def _register_commands() -> None:
    """Register all subcommands with the main CLI group."""
    from stocktake.cli.count import clear_command, missing_command, scan_command
    from stocktake.cli.lists import lists_group
    from stocktake.cli.status import reset_command, status_command
    from stocktake.cli.sync import sync_command

    main.add_command(lists_group)
    main.add_command(scan_command)
    main.add_command(missing_command)
    main.add_command(clear_command)
    main.add_command(sync_command)
    main.add_command(status_command)
    main.add_command(reset_command)


_register_commands()

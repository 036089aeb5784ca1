"""Tests for stocktake CLI commands."""

import json
from pathlib import Path
from unittest.mock import AsyncMock

from click.testing import CliRunner

from stocktake.cli import main
from stocktake.cli.exit_codes import ExitCode
from stocktake.config.models import StocktakeConfig
from stocktake.sync.connectivity import StaticConnectivity


def _invoke(runner: CliRunner, config: StocktakeConfig, args: list[str], **obj):
    return runner.invoke(main, args, obj={"config": config, **obj})


def _import(runner: CliRunner, config: StocktakeConfig, lists_file: Path) -> None:
    result = _invoke(runner, config, ["lists", "import", str(lists_file)])
    assert result.exit_code == 0, result.output


class TestListsCommands:
    """Tests for 'lists import' and 'lists show'."""

    def test_import_and_show(
        self, runner: CliRunner, config: StocktakeConfig, lists_file: Path
    ) -> None:
        result = _invoke(runner, config, ["lists", "import", str(lists_file)])
        assert result.exit_code == 0
        assert "2 list(s) stored" in result.output

        result = _invoke(runner, config, ["lists", "show"])
        assert result.exit_code == 0
        assert "Shelf A" in result.output
        assert "Shelf B" in result.output

    def test_show_json(
        self, runner: CliRunner, config: StocktakeConfig, lists_file: Path
    ) -> None:
        _import(runner, config, lists_file)
        result = _invoke(runner, config, ["lists", "show", "--format", "json"])
        data = json.loads(result.output)
        assert [entry["id"] for entry in data] == ["L1", "L2"]
        assert data[0]["items"][0]["articleNumber"] == "100"

    def test_show_empty(self, runner: CliRunner, config: StocktakeConfig) -> None:
        result = _invoke(runner, config, ["lists", "show"])
        assert result.exit_code == 0
        assert "No inventory lists" in result.output

    def test_import_merges_by_id(
        self,
        runner: CliRunner,
        config: StocktakeConfig,
        lists_file: Path,
        temp_dir: Path,
    ) -> None:
        _import(runner, config, lists_file)
        update = temp_dir / "update.json"
        update.write_text('[{"id": "L2", "name": "Shelf B v2"}, {"id": "L3", "name": "C"}]')

        result = _invoke(runner, config, ["lists", "import", str(update)])
        assert "3 list(s) stored" in result.output

        result = _invoke(runner, config, ["lists", "show", "--format", "json"])
        names = [entry["name"] for entry in json.loads(result.output)]
        assert names == ["Shelf A", "Shelf B v2", "C"]

    def test_import_replace(
        self,
        runner: CliRunner,
        config: StocktakeConfig,
        lists_file: Path,
        temp_dir: Path,
    ) -> None:
        _import(runner, config, lists_file)
        update = temp_dir / "update.json"
        update.write_text('[{"id": "L3", "name": "C"}]')

        result = _invoke(runner, config, ["lists", "import", "--replace", str(update)])
        assert "1 list(s) stored" in result.output

    def test_import_invalid_file(
        self, runner: CliRunner, config: StocktakeConfig, temp_dir: Path
    ) -> None:
        bad = temp_dir / "bad.json"
        bad.write_text(
            '[{"id": "L1", "name": "A", "items": '
            '[{"articleNumber": "1"}, {"articleNumber": "1"}]}]'
        )
        result = _invoke(runner, config, ["lists", "import", str(bad)])
        assert result.exit_code == ExitCode.INVALID_LIST_FILE
        assert "duplicate article numbers" in result.output


class TestScanCommand:
    """Tests for 'scan'."""

    def test_records_and_reports_unknown(
        self, runner: CliRunner, config: StocktakeConfig, lists_file: Path
    ) -> None:
        _import(runner, config, lists_file)

        result = _invoke(runner, config, ["scan", "L1", "100", " 100 ", "999"])

        assert result.exit_code == ExitCode.ARTICLE_NOT_FOUND
        assert "recorded   100 (count 1)" in result.output
        assert "recorded   100 (count 2)" in result.output
        assert "not found  999" in result.output

    def test_reads_stdin(
        self, runner: CliRunner, config: StocktakeConfig, lists_file: Path
    ) -> None:
        _import(runner, config, lists_file)

        result = runner.invoke(
            main,
            ["scan", "L1", "-"],
            input="100\n\n  200\n",
            obj={"config": config},
        )

        assert result.exit_code == 0
        assert "recorded   100 (count 1)" in result.output
        assert "recorded   200 (count 1)" in result.output

    def test_blank_articles_are_skipped(
        self, runner: CliRunner, config: StocktakeConfig, lists_file: Path
    ) -> None:
        _import(runner, config, lists_file)
        result = _invoke(runner, config, ["scan", "L1", "  ", "200"])
        assert result.exit_code == 0
        assert result.output.count("recorded") == 1

    def test_unknown_list(self, runner: CliRunner, config: StocktakeConfig) -> None:
        result = _invoke(runner, config, ["scan", "nope", "100"])
        assert result.exit_code == ExitCode.LIST_NOT_FOUND
        assert "Inventory list not found: nope" in result.output

    def test_counts_persist_between_invocations(
        self, runner: CliRunner, config: StocktakeConfig, lists_file: Path
    ) -> None:
        _import(runner, config, lists_file)
        _invoke(runner, config, ["scan", "L1", "100"])
        result = _invoke(runner, config, ["scan", "L1", "100"])
        assert "recorded   100 (count 2)" in result.output


class TestMissingCommand:
    """Tests for 'missing'."""

    def test_over_scan_report(
        self, runner: CliRunner, config: StocktakeConfig, lists_file: Path
    ) -> None:
        _import(runner, config, lists_file)
        _invoke(runner, config, ["scan", "L1", "100", "100", "100"])

        result = _invoke(runner, config, ["missing", "L1", "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        first = data["items"][0]
        assert first["articleNumber"] == "100"
        assert first["scannedQuantity"] == 3
        assert first["missing"] == -1
        assert data["summary"]["over_scanned_articles"] == 1
        assert data["summary"]["missing_total"] == 1
        assert data["summary"]["is_complete"] is False

    def test_text_report(
        self, runner: CliRunner, config: StocktakeConfig, lists_file: Path
    ) -> None:
        _import(runner, config, lists_file)
        _invoke(runner, config, ["scan", "L1", "100", "100", "200"])

        result = _invoke(runner, config, ["missing", "L1"])

        assert result.exit_code == 0
        assert "3/3 scanned, 0 missing" in result.output
        assert "Count complete." in result.output

    def test_discrepancies_only(
        self, runner: CliRunner, config: StocktakeConfig, lists_file: Path
    ) -> None:
        _import(runner, config, lists_file)
        _invoke(runner, config, ["scan", "L1", "100", "100"])

        result = _invoke(
            runner, config, ["missing", "L1", "--discrepancies", "--format", "json"]
        )

        items = json.loads(result.output)["items"]
        assert [item["articleNumber"] for item in items] == ["200"]


class TestClearAndResetCommands:
    """Tests for 'clear' and 'reset'."""

    def test_clear_restarts_count(
        self, runner: CliRunner, config: StocktakeConfig, lists_file: Path
    ) -> None:
        _import(runner, config, lists_file)
        _invoke(runner, config, ["scan", "L1", "100"])

        result = _invoke(runner, config, ["clear", "L1", "--yes"])
        assert result.exit_code == 0

        result = _invoke(runner, config, ["missing", "L1", "--format", "json"])
        items = json.loads(result.output)["items"]
        assert all(item["missing"] == item["expectedQuantity"] for item in items)

    def test_clear_cancelled(
        self, runner: CliRunner, config: StocktakeConfig, lists_file: Path
    ) -> None:
        _import(runner, config, lists_file)
        result = runner.invoke(
            main, ["clear", "L1"], input="n\n", obj={"config": config}
        )
        assert result.exit_code == ExitCode.INTERRUPTED

    def test_reset(
        self, runner: CliRunner, config: StocktakeConfig, lists_file: Path
    ) -> None:
        _import(runner, config, lists_file)

        result = _invoke(runner, config, ["reset", "--yes"])
        assert result.exit_code == 0

        result = _invoke(runner, config, ["lists", "show"])
        assert "No inventory lists" in result.output


class TestSyncAndStatusCommands:
    """Tests for 'sync' and 'status'."""

    def test_sync_offline(
        self, runner: CliRunner, config: StocktakeConfig, lists_file: Path
    ) -> None:
        _import(runner, config, lists_file)
        result = _invoke(runner, config, ["sync", "L1", "--format", "json"])
        assert result.exit_code == ExitCode.NOT_SYNCED
        assert json.loads(result.output) == {
            "outcome": "not_connected",
            "last_sync": None,
        }

    def test_sync_with_injected_remote(
        self, runner: CliRunner, config: StocktakeConfig, lists_file: Path
    ) -> None:
        _import(runner, config, lists_file)
        _invoke(runner, config, ["scan", "L1", "100"])
        remote = AsyncMock()
        remote.push_pending_changes.return_value = True
        remote.pull_latest_lists.return_value = []

        result = _invoke(
            runner,
            config,
            ["sync", "L1"],
            remote=remote,
            connectivity=StaticConnectivity(connected=True),
        )

        assert result.exit_code == 0
        assert "Synced" in result.output
        payload = remote.push_pending_changes.await_args.args[0]
        assert payload.scanned_items == {"100": 1}

    def test_sync_unknown_list(self, runner: CliRunner, config: StocktakeConfig) -> None:
        result = _invoke(runner, config, ["sync", "nope"])
        assert result.exit_code == ExitCode.LIST_NOT_FOUND

    def test_status(
        self, runner: CliRunner, config: StocktakeConfig, lists_file: Path
    ) -> None:
        _import(runner, config, lists_file)
        _invoke(runner, config, ["scan", "L2", "300"])

        result = _invoke(runner, config, ["status", "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["database"] == str(config.database_path)
        assert data["lists"] == 2
        assert data["lists_in_progress"] == 1
        assert data["last_sync"] is None
        assert data["connected"] is False

    def test_status_after_clear(
        self, runner: CliRunner, config: StocktakeConfig, lists_file: Path
    ) -> None:
        _import(runner, config, lists_file)
        _invoke(runner, config, ["scan", "L1", "100"])
        _invoke(runner, config, ["scan", "L2", "300"])
        _invoke(runner, config, ["clear", "L2", "--yes"])

        result = _invoke(runner, config, ["status", "--format", "json"])

        assert json.loads(result.output)["lists_in_progress"] == 1

    def test_status_text(self, runner: CliRunner, config: StocktakeConfig) -> None:
        result = _invoke(runner, config, ["status"])
        assert result.exit_code == 0
        assert "Last sync:  never" in result.output
        assert "no probe URL configured" in result.output


class TestMainGroup:
    """Tests for global options and configuration loading."""

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "stocktake" in result.output

    def test_db_option(self, runner: CliRunner, temp_dir: Path, lists_file: Path) -> None:
        db = temp_dir / "cli.db"
        result = runner.invoke(main, ["--db", str(db), "lists", "import", str(lists_file)])
        assert result.exit_code == 0
        assert db.exists()

    def test_invalid_config_file(self, runner: CliRunner, temp_dir: Path) -> None:
        config_file = temp_dir / "config.toml"
        config_file.write_text("[sync]\ntimeout_seconds = -5\n")
        result = runner.invoke(main, ["--config", str(config_file), "status"])
        assert result.exit_code == ExitCode.CONFIG_ERROR
        assert "Invalid configuration" in result.output

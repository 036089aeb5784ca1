"""Fixtures for CLI tests."""

import json
import logging
from pathlib import Path

import pytest
from click.testing import CliRunner

from stocktake.config.models import StocktakeConfig

LISTS_DOCUMENT = [
    {
        "id": "L1",
        "name": "Shelf A",
        "items": [
            {"articleNumber": "100", "description": "Widget", "expectedQuantity": 2},
            {"articleNumber": "200", "description": "Gadget", "expectedQuantity": 1},
        ],
    },
    {
        "id": "L2",
        "name": "Shelf B",
        "items": [{"articleNumber": "300", "expectedQuantity": 5}],
    },
]


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def config(temp_db: Path) -> StocktakeConfig:
    """Configuration pointing at a temporary database."""
    return StocktakeConfig(database_path=temp_db)


@pytest.fixture
def lists_file(temp_dir: Path) -> Path:
    path = temp_dir / "lists.json"
    path.write_text(json.dumps(LISTS_DOCUMENT))
    return path


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo configure_logging() calls made by invoking the main group."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)

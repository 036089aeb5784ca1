"""Shared test fixtures for stocktake."""

import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
import pytest_asyncio

from stocktake.domain.models import ExpectedItem, InventoryList
from stocktake.reconciliation.service import ReconciliationService
from stocktake.repository.lists import ListRepository
from stocktake.store.records import PersistentStore


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture
def temp_db(temp_dir: Path) -> Path:
    """Create a temporary database path."""
    return temp_dir / "test_stocktake.db"


@pytest.fixture(autouse=True)
def stocktake_data_dir(temp_dir: Path):
    """Point STOCKTAKE_DATA_DIR at a temporary directory for every test.

    Keeps the CLI and config loader away from the real ~/.stocktake.
    """
    data_dir = temp_dir / ".stocktake"
    data_dir.mkdir(parents=True, exist_ok=True)
    with patch.dict(os.environ, {"STOCKTAKE_DATA_DIR": str(data_dir)}):
        yield data_dir


@pytest.fixture
def store(temp_db: Path) -> PersistentStore:
    """A record store backed by a temporary database."""
    return PersistentStore(temp_db)


@pytest.fixture
def repository(store: PersistentStore) -> ListRepository:
    """A list repository over the temporary store."""
    return ListRepository(store)


@pytest.fixture
def service(repository: ListRepository) -> ReconciliationService:
    """A reconciliation service with no sync coordinator."""
    return ReconciliationService(repository)


@pytest.fixture
def shelf_a() -> InventoryList:
    """List L1: article 100 expected twice, article 200 once."""
    return InventoryList(
        id="L1",
        name="Shelf A",
        items=(
            ExpectedItem("100", description="Widget", expected_quantity=2),
            ExpectedItem("200", description="Gadget", expected_quantity=1),
        ),
    )


@pytest.fixture
def shelf_b() -> InventoryList:
    """List L2: article 300 expected five times."""
    return InventoryList(
        id="L2",
        name="Shelf B",
        items=(ExpectedItem("300", description="Sprocket", expected_quantity=5),),
    )


@pytest_asyncio.fixture
async def provisioned(
    repository: ListRepository, shelf_a: InventoryList, shelf_b: InventoryList
) -> ListRepository:
    """Repository with lists L1 and L2 stored."""
    await repository.save_inventory_lists([shelf_a, shelf_b])
    return repository

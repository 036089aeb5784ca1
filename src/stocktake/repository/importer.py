"""Provisioning of inventory lists from JSON documents.

An import document is a JSON array of lists in the persisted camelCase
layout:

    [{"id": "L1", "name": "Shelf A", "items": [
        {"articleNumber": "100", "expectedQuantity": 2}
    ]}]
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from stocktake.domain.models import InventoryList
from stocktake.exceptions import InvalidInventoryListError
from stocktake.repository.json_schemas import InventoryListsRecord

logger = logging.getLogger(__name__)


def parse_inventory_lists(raw: bytes | str, *, source: str = "<input>") -> list[InventoryList]:
    """Parse and validate an import document.

    Unlike repository reads, provisioning is strict: any invalid entry
    rejects the whole document.

    Args:
        raw: JSON document.
        source: Name used in error messages.

    Returns:
        The validated inventory lists, in document order.

    Raises:
        InvalidInventoryListError: If the document is not valid JSON or
            does not match the inventory list schema.
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidInventoryListError(f"{source}: invalid JSON: {e}") from e

    try:
        record = InventoryListsRecord.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        location = ".".join(str(loc) for loc in first.get("loc", ()))
        message = first.get("msg", "validation error")
        raise InvalidInventoryListError(f"{source}: {location}: {message}") from e

    lists = [schema.to_domain() for schema in record.root]
    logger.debug("Parsed %d inventory list(s) from %s", len(lists), source)
    return lists


def load_inventory_lists_file(path: Path) -> list[InventoryList]:
    """Read and validate an import document from disk.

    Raises:
        InvalidInventoryListError: If the file cannot be read or is invalid.
    """
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise InvalidInventoryListError(f"Cannot read {path}: {e}") from e
    return parse_inventory_lists(raw, source=str(path))

"""Shared utilities for stocktake."""

from stocktake.core.datetime_utils import (
    format_timestamp,
    parse_iso_timestamp,
    utc_now,
    utc_now_iso,
)
from stocktake.core.json_utils import (
    JsonParseResult,
    dump_json_bytes,
    parse_json_with_schema,
)

__all__ = [
    "JsonParseResult",
    "dump_json_bytes",
    "format_timestamp",
    "parse_iso_timestamp",
    "parse_json_with_schema",
    "utc_now",
    "utc_now_iso",
]

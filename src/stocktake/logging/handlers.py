"""JSON log output for stocktake.

One JSON object per line:

    {"ts": "...", "level": "INFO", "logger": "stocktake.reconciliation.service",
     "list_id": "L1", "message": "Activated list 'Shelf A' ..."}

list_id is present only for records emitted inside list_context() and
passed through ListContextFilter.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone


class JSONFormatter(logging.Formatter):
    """Render each record as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
        }
        list_id = getattr(record, "list_id", None)
        if list_id:
            entry["list_id"] = list_id
        entry["message"] = record.getMessage()
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)

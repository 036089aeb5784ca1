"""Safe JSON utilities with consistent error handling.

Parsing functions return a JsonParseResult rather than raising, so read
paths can fall back to a default value while still logging what went wrong.
Serialization raises, because a value that cannot be written must not be
silently dropped.

Example usage:
    result = parse_json_with_schema(raw_bytes, ScanLedgerRecord, context=key)
    if result.success and result.value is not None:
        counts = result.value.root
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JsonParseResult(Generic[T]):
    """Result of a JSON parsing operation.

    Attributes:
        success: True if parsing succeeded, False otherwise.
        value: The parsed value if successful, None otherwise.
        error: Error message if parsing failed, None otherwise.
    """

    success: bool
    value: T | None
    error: str | None = None


def parse_json_with_schema(
    raw: bytes | str | None,
    schema: type[M],
    *,
    context: str = "",
) -> JsonParseResult[M]:
    """Parse JSON and validate against a Pydantic schema.

    Args:
        raw: JSON document to parse.
        schema: Pydantic model class for validation.
        context: Context string for error messages (e.g., record key).

    Returns:
        JsonParseResult with validated model instance or error information.
        If raw is None/empty, returns success with None value.
    """
    if raw is None or len(raw) == 0:
        return JsonParseResult(success=True, value=None, error=None)

    context_prefix = f"{context}: " if context else ""

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        error_msg = f"{context_prefix}Invalid JSON at position {e.pos}: {e.msg}"
        logger.warning(error_msg)
        return JsonParseResult(success=False, value=None, error=error_msg)
    except (TypeError, UnicodeDecodeError) as e:
        error_msg = f"{context_prefix}Cannot decode JSON: {e}"
        logger.warning(error_msg)
        return JsonParseResult(success=False, value=None, error=error_msg)

    try:
        validated = schema.model_validate(data)
        return JsonParseResult(success=True, value=validated, error=None)
    except ValidationError as e:
        errors = e.errors()
        first_error = errors[0] if errors else {}
        field = ".".join(str(loc) for loc in first_error.get("loc", []))
        msg = first_error.get("msg", "validation error")
        error_msg = (
            f"{context_prefix}Schema validation failed "
            f"({len(errors)} error(s)): {field}: {msg}"
        )
        logger.warning(error_msg)
        return JsonParseResult(success=False, value=None, error=error_msg)


def dump_json_bytes(data: Any, *, context: str = "") -> bytes:
    """Serialize data to UTF-8 JSON bytes.

    Args:
        data: JSON-serializable data.
        context: Context string for error messages.

    Returns:
        Encoded JSON document.

    Raises:
        TypeError: If data is not JSON-serializable.
    """
    try:
        return json.dumps(data, ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        context_prefix = f"{context}: " if context else ""
        error_msg = f"{context_prefix}Cannot serialize to JSON: {e}"
        logger.error(error_msg)
        raise TypeError(error_msg) from e

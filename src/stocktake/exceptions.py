"""Custom exceptions for stocktake.

Only faults that would lose data if swallowed are raised as exceptions.
Negative results such as an unknown article, a missing list or an offline
network are reported through the enums in stocktake.domain.enums.
"""


class StocktakeError(Exception):
    """Base exception for stocktake errors.

    All stocktake exceptions inherit from this class, allowing callers
    to catch them with a single except clause.
    """


class StorageFailure(StocktakeError):
    """Raised when a durability-critical write or clear cannot complete.

    The operation that raised it has aborted and local state is unchanged.

    Attributes:
        key: The record key involved, or None for store-wide operations.
        operation: The operation that was attempted (e.g., "write", "clear").
    """

    def __init__(self, key: str | None, operation: str, reason: str = "") -> None:
        """Initialize the exception.

        Args:
            key: The record key involved, or None.
            operation: The operation that was attempted.
            reason: Optional description of the underlying fault.
        """
        self.key = key
        self.operation = operation
        target = f"record {key!r}" if key is not None else "store"
        message = f"Cannot {operation} {target}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InvalidInventoryListError(StocktakeError):
    """Raised when inventory list definitions are rejected at provisioning.

    Covers schema violations, duplicate list ids and duplicate article
    numbers within one list.
    """

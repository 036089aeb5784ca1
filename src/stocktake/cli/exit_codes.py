"""Centralized exit codes for all CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Validation errors (input files, config)
    20-29: Lookup errors (lists, articles)
    40-49: Storage errors
    60-69: Warning states
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for stocktake CLI commands."""

    # Success (0)
    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1
    INTERRUPTED = 2  # Cancelled at a confirmation prompt

    # Validation errors (10-19)
    INVALID_LIST_FILE = 10
    CONFIG_ERROR = 11

    # Lookup errors (20-29)
    LIST_NOT_FOUND = 20
    ARTICLE_NOT_FOUND = 21

    # Storage errors (40-49)
    STORAGE_FAILURE = 40

    # Warning states (60-69)
    NOT_SYNCED = 60

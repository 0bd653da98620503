"""Exceptions shared by the ledger core and the storage backends."""

from typing import Any, Optional


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class PersistenceUnavailableError(StorageError):
    """The data file could not be read or written."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class CorruptDataError(StorageError):
    """
    The data file is damaged.

    partial holds everything that could be read before the fault:
    a Ledger or UserDirectory built from the complete records only.
    """

    def __init__(self, message: str, line_number: int, partial: Any = None):
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number
        self.partial = partial

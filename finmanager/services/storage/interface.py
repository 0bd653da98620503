"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the flat file today and swap in something else later
2. Use in-memory storage for testing
3. Keep the ledger logic decoupled from where its bytes end up

The interface is intentionally tiny: load everything, save everything.
The data set of one person's finances fits comfortably in memory.
"""

from abc import ABC, abstractmethod

from finmanager.exceptions import (
    CorruptDataError,
    PersistenceUnavailableError,
    StorageError,
)
from finmanager.ledger import Ledger, UserDirectory


class LedgerStorageInterface(ABC):
    """
    Storage for the single-ledger variant.
    """

    @abstractmethod
    def load(self) -> Ledger:
        """
        Load the ledger.

        Returns:
            The stored ledger. An empty ledger if nothing was stored
            or the data could not be read.
        """
        pass

    @abstractmethod
    def save(self, ledger: Ledger) -> None:
        """
        Replace the stored ledger.

        Raises:
            PersistenceUnavailableError: If the data could not be written
        """
        pass


class DirectoryStorageInterface(ABC):
    """
    Storage for the multi-user variant.

    The whole directory is written on every save.
    """

    @abstractmethod
    def load(self) -> UserDirectory:
        """
        Load the directory.

        Returns:
            The stored directory, not yet attached to any storage.
            An empty directory if nothing was stored or the data could
            not be read.
        """
        pass

    @abstractmethod
    def save(self, directory: UserDirectory) -> None:
        """
        Replace the stored directory.

        Raises:
            PersistenceUnavailableError: If the data could not be written
        """
        pass


__all__ = [
    "CorruptDataError",
    "DirectoryStorageInterface",
    "LedgerStorageInterface",
    "PersistenceUnavailableError",
    "StorageError",
]

"""Services package."""

from finmanager.services.storage import (
    CorruptDataError,
    DirectoryStorageInterface,
    FileDirectoryStorage,
    FileLedgerStorage,
    InMemoryDirectoryStorage,
    InMemoryLedgerStorage,
    LedgerStorageInterface,
    PersistenceUnavailableError,
    StorageError,
)

__all__ = [
    "CorruptDataError",
    "DirectoryStorageInterface",
    "FileDirectoryStorage",
    "FileLedgerStorage",
    "InMemoryDirectoryStorage",
    "InMemoryLedgerStorage",
    "LedgerStorageInterface",
    "PersistenceUnavailableError",
    "StorageError",
]

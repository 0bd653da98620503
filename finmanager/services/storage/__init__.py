"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements a flat text file as the backend, plus an in-memory
variant for tests, but designed to be swappable.
"""

from finmanager.services.storage.interface import (
    CorruptDataError,
    DirectoryStorageInterface,
    LedgerStorageInterface,
    PersistenceUnavailableError,
    StorageError,
)
from finmanager.services.storage.codec import (
    decode_directory,
    decode_ledger,
    encode_directory,
    encode_ledger,
)
from finmanager.services.storage.file_storage import (
    DataFile,
    FileDirectoryStorage,
    FileLedgerStorage,
)
from finmanager.services.storage.memory import (
    InMemoryDirectoryStorage,
    InMemoryLedgerStorage,
)

__all__ = [
    # Interfaces
    "DirectoryStorageInterface",
    "LedgerStorageInterface",
    # Exceptions
    "CorruptDataError",
    "PersistenceUnavailableError",
    "StorageError",
    # Codec
    "decode_directory",
    "decode_ledger",
    "encode_directory",
    "encode_ledger",
    # Flat-file implementation
    "DataFile",
    "FileDirectoryStorage",
    "FileLedgerStorage",
    # In-memory implementation
    "InMemoryDirectoryStorage",
    "InMemoryLedgerStorage",
]

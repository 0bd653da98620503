"""
In-Memory Storage Implementation

Keeps the encoded text instead of writing a file. Goes through the same
codec as the file backend, so what a test sees here is exactly what
would have been on disk.
"""

from typing import Optional

from finmanager.exceptions import PersistenceUnavailableError
from finmanager.ledger import Ledger, UserDirectory
from finmanager.services.storage.codec import (
    encode_directory,
    encode_ledger,
    read_directory,
    read_ledger,
)
from finmanager.services.storage.interface import (
    DirectoryStorageInterface,
    LedgerStorageInterface,
)


class InMemoryLedgerStorage(LedgerStorageInterface):
    """
    Ledger storage held in a string.

    Set available to False to make saves fail the way an unwritable
    file would.
    """

    def __init__(self, text: Optional[str] = None):
        self.text = text
        self.available = True
        self.save_count = 0

    def load(self) -> Ledger:
        return read_ledger(self.text, source="memory")

    def save(self, ledger: Ledger) -> None:
        if not self.available:
            raise PersistenceUnavailableError("In-memory ledger storage is unavailable")
        self.text = encode_ledger(ledger)
        self.save_count += 1


class InMemoryDirectoryStorage(DirectoryStorageInterface):
    """Directory storage held in a string."""

    def __init__(self, text: Optional[str] = None):
        self.text = text
        self.available = True
        self.save_count = 0

    def load(self) -> UserDirectory:
        return read_directory(self.text, source="memory")

    def save(self, directory: UserDirectory) -> None:
        if not self.available:
            raise PersistenceUnavailableError("In-memory directory storage is unavailable")
        self.text = encode_directory(directory)
        self.save_count += 1

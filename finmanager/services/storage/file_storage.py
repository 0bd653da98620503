"""
Flat-File Storage Implementation

DESIGN DECISION: One text file per ledger or directory, rewritten in
full on every save. The file is only open while it is being read or
written; nothing holds it between operations.

TRADEOFFS:
- A crash in the middle of a save can leave a damaged file. The codec
  recovers every complete record from it on the next load.
- Two processes sharing one file will overwrite each other. Only one
  instance is expected to run at a time.

A missing or unreadable file is a fresh start, not an error.
"""

from pathlib import Path
from typing import Optional, Union

import structlog
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from finmanager.config import StorageSettings
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


logger = structlog.get_logger(__name__)


class DataFile:
    """
    Low-level text file wrapper.

    Handles the absence policy on read and retry logic on write.
    """

    def __init__(
        self,
        path: Union[str, Path],
        encoding: str = "utf-8",
        save_attempts: int = 3,
        retry_wait_seconds: float = 0.5,
    ):
        self.path = Path(path)
        self.encoding = encoding
        self.save_attempts = save_attempts
        self.retry_wait_seconds = retry_wait_seconds

    def read(self) -> Optional[str]:
        """
        Read the whole file.

        Returns None if the file is missing or cannot be read.
        """
        try:
            return self.path.read_text(encoding=self.encoding)
        except FileNotFoundError:
            logger.info(
                "data_file_missing",
                path=str(self.path),
                detail="No existing data file found. Starting fresh.",
            )
        except (OSError, UnicodeError, LookupError) as e:
            logger.info(
                "data_file_unreadable",
                path=str(self.path),
                error=str(e),
                detail="Data file could not be read. Starting fresh.",
            )
        return None

    def write(self, text: str) -> None:
        """
        Replace the file contents, retrying transient OS errors.

        The text is encoded before the file is opened, so an encoding
        failure leaves the existing file untouched.

        Raises:
            PersistenceUnavailableError: If every attempt failed
        """
        try:
            data = text.encode(self.encoding)
        except (UnicodeError, LookupError) as e:
            raise PersistenceUnavailableError(
                f"Unable to encode data for {self.path} as {self.encoding}: {e}",
                path=str(self.path),
            ) from e

        retrying = Retrying(
            stop=stop_after_attempt(self.save_attempts),
            wait=wait_exponential(multiplier=self.retry_wait_seconds, max=10),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    self.path.write_bytes(data)
        except OSError as e:
            raise PersistenceUnavailableError(
                f"Unable to open {self.path} for saving data: {e}",
                path=str(self.path),
            ) from e


def _file_options(settings: StorageSettings) -> dict:
    return {
        "encoding": settings.encoding,
        "save_attempts": settings.save_attempts,
        "retry_wait_seconds": settings.save_retry_wait_seconds,
    }


class FileLedgerStorage(LedgerStorageInterface):
    """
    Flat-file storage for the single-ledger variant.
    """

    def __init__(self, path: Union[str, Path], **file_options):
        self._file = DataFile(path, **file_options)

    @classmethod
    def from_settings(cls, settings: StorageSettings) -> "FileLedgerStorage":
        return cls(settings.ledger_path, **_file_options(settings))

    @property
    def path(self) -> Path:
        return self._file.path

    def load(self) -> Ledger:
        return read_ledger(self._file.read(), source=str(self.path))

    def save(self, ledger: Ledger) -> None:
        self._file.write(encode_ledger(ledger))
        logger.debug("ledger_saved", path=str(self.path), transactions=len(ledger))


class FileDirectoryStorage(DirectoryStorageInterface):
    """
    Flat-file storage for the multi-user variant.
    """

    def __init__(self, path: Union[str, Path], **file_options):
        self._file = DataFile(path, **file_options)

    @classmethod
    def from_settings(cls, settings: StorageSettings) -> "FileDirectoryStorage":
        return cls(settings.directory_path, **_file_options(settings))

    @property
    def path(self) -> Path:
        return self._file.path

    def load(self) -> UserDirectory:
        return read_directory(self._file.read(), source=str(self.path))

    def save(self, directory: UserDirectory) -> None:
        self._file.write(encode_directory(directory))
        logger.debug(
            "directory_saved",
            path=str(self.path),
            users=len(directory),
            transactions=directory.transaction_count,
        )

"""
Tests for the flat-file storage backends.

Everything is written under pytest's tmp_path.
"""

import pytest
from decimal import Decimal

from finmanager.config import StorageSettings
from finmanager.ledger import Ledger, UserDirectory
from finmanager.services.storage import (
    DataFile,
    FileDirectoryStorage,
    FileLedgerStorage,
    PersistenceUnavailableError,
)


NO_WAIT = {"save_attempts": 2, "retry_wait_seconds": 0}


class TestDataFile:
    """Tests for the low-level file wrapper."""

    def test_missing_file_reads_as_none(self, tmp_path):
        assert DataFile(tmp_path / "nothing.data").read() is None

    def test_unreadable_path_reads_as_none(self, tmp_path):
        """Test that a path that can't be read is a fresh start."""
        folder = tmp_path / "a_folder"
        folder.mkdir()
        assert DataFile(folder).read() is None

    def test_write_then_read(self, tmp_path):
        data_file = DataFile(tmp_path / "x.data")
        data_file.write("hello\n")
        assert data_file.read() == "hello\n"

    def test_write_to_missing_folder_fails_after_retries(self, tmp_path):
        """Test that an unwritable path raises PersistenceUnavailableError."""
        data_file = DataFile(tmp_path / "no_such_folder" / "x.data", **NO_WAIT)
        with pytest.raises(PersistenceUnavailableError) as excinfo:
            data_file.write("data")
        assert excinfo.value.path == str(tmp_path / "no_such_folder" / "x.data")

    def test_unencodable_text_leaves_file_untouched(self, tmp_path):
        """Test that an encoding failure is reported before the file is opened."""
        data_file = DataFile(tmp_path / "x.data", encoding="ascii", **NO_WAIT)
        data_file.write("old contents\n")

        with pytest.raises(PersistenceUnavailableError):
            data_file.write("Caf\u00e9\n")
        assert data_file.read() == "old contents\n"


class TestFileLedgerStorage:
    """Tests for the single-ledger file backend."""

    def test_missing_file_gives_empty_ledger(self, tmp_path):
        """Test that a first run starts with zero totals."""
        ledger = FileLedgerStorage(tmp_path / "ledger.data").load()
        assert len(ledger) == 0
        assert ledger.total_income == Decimal("0")
        assert ledger.total_expense == Decimal("0")

    def test_save_and_reload(self, tmp_path):
        storage = FileLedgerStorage(tmp_path / "ledger.data")
        ledger = Ledger()
        ledger.add_income("Salary\nJanuary", 1000.00)
        ledger.add_expense("Rent", 400.00)
        storage.save(ledger)

        restored = storage.load()
        assert [(t.id, t.category, t.amount) for t in restored.list_transactions()] == [
            (1, "Salary\nJanuary", Decimal("1000.0")),
            (2, "Rent", Decimal("400.0")),
        ]
        assert restored.summary().net == Decimal("600.00")
        assert restored.add_expense("Food", 1).id == 3

    def test_corrupt_file_is_recovered(self, tmp_path):
        """Test that a damaged file loads whatever was complete."""
        path = tmp_path / "ledger.data"
        path.write_text(
            '["ledger", 3, "30", "0", 3]\n'
            '["txn", 1, "Income", "A", "10"]\n'
            '["txn", 2, "Income", "B", "20"]\n'
            '["txn", 3, "Inc',
            encoding="utf-8",
        )
        ledger = FileLedgerStorage(path).load()
        assert [t.id for t in ledger.list_transactions()] == [1, 2]
        assert ledger.total_income == Decimal("30")

    def test_save_overwrites(self, tmp_path):
        storage = FileLedgerStorage(tmp_path / "ledger.data")
        ledger = Ledger()
        txn = ledger.add_income("A", 1)
        storage.save(ledger)
        ledger.delete_transaction(txn.id)
        storage.save(ledger)
        assert len(storage.load()) == 0

    def test_save_failure_raises(self, tmp_path):
        storage = FileLedgerStorage(tmp_path / "missing" / "ledger.data", **NO_WAIT)
        with pytest.raises(PersistenceUnavailableError):
            storage.save(Ledger())

    def test_from_settings(self, tmp_path):
        settings = StorageSettings(
            ledger_file=str(tmp_path / "from_settings.data"),
            save_attempts=1,
            save_retry_wait_seconds=0,
        )
        storage = FileLedgerStorage.from_settings(settings)
        assert storage.path == tmp_path / "from_settings.data"


class TestFileDirectoryStorage:
    """Tests for the multi-user file backend."""

    def test_missing_file_gives_empty_directory(self, tmp_path):
        directory = FileDirectoryStorage(tmp_path / "finance.data").load()
        assert directory.list_users() == []

    def test_write_through_reaches_the_file(self, tmp_path):
        """Test that each change is on disk before the call returns."""
        path = tmp_path / "finance.data"
        directory = UserDirectory.load(FileDirectoryStorage(path))

        alice = directory.create_user("Alice")
        assert FileDirectoryStorage(path).load().list_users() == [(1, "Alice")]

        alice.ledger.add_income("Salary", "1000")
        on_disk = FileDirectoryStorage(path).load().get_user(1).ledger
        assert on_disk.total_income == Decimal("1000")

    def test_reload_resumes_numbering(self, tmp_path):
        path = tmp_path / "finance.data"
        first = UserDirectory.load(FileDirectoryStorage(path))
        first.create_user("Alice").ledger.add_income("Pay", 1)
        first.create_user("Bob")

        second = UserDirectory.load(FileDirectoryStorage(path))
        carol = second.create_user("Carol")
        assert carol.id == 3
        assert carol.ledger.add_expense("Food", 2).id == 2

    def test_unwritable_file_does_not_raise(self, tmp_path):
        """Test that write-through failures leave the directory usable."""
        storage = FileDirectoryStorage(tmp_path / "missing" / "finance.data", **NO_WAIT)
        directory = UserDirectory.load(storage)

        user = directory.create_user("Alice")
        assert user.id == 1
        assert directory.last_save_ok is False

    def test_from_settings(self, tmp_path):
        settings = StorageSettings(directory_file=str(tmp_path / "dir.data"))
        storage = FileDirectoryStorage.from_settings(settings)
        assert storage.path == tmp_path / "dir.data"

    def test_awkward_text_saves_in_any_encoding(self, tmp_path):
        """Test that non-ASCII and lone surrogates survive a narrow encoding."""
        path = tmp_path / "finance.data"
        directory = UserDirectory.load(FileDirectoryStorage(path, encoding="latin-1"))

        user = directory.create_user("Zoë €")
        user.ledger.add_expense("Coffee €", 3)
        user.ledger.add_expense("bad\ud800", 5)

        assert directory.last_save_ok is True
        reloaded = FileDirectoryStorage(path, encoding="latin-1").load()
        assert reloaded.list_users() == [(1, "Zoë €")]
        categories = [t.category for t in reloaded.get_user(1).ledger.list_transactions()]
        assert categories == ["Coffee €", "bad\ud800"]

    def test_existing_data_kept_when_save_fails(self, tmp_path):
        """Test that a failed write-through does not wipe earlier saves."""
        path = tmp_path / "finance.data"
        directory = UserDirectory.load(FileDirectoryStorage(path))
        directory.create_user("Alice").ledger.add_income("Salary", 10)
        before = path.read_text(encoding="utf-8")

        directory.attach_storage(FileDirectoryStorage(path, encoding="no-such-codec", **NO_WAIT))
        directory.get_user(1).ledger.add_expense("Rent", 4)

        assert directory.last_save_ok is False
        assert path.read_text(encoding="utf-8") == before

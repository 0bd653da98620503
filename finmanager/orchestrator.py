"""
Main Orchestrator for Personal Finance Manager

This module ties together all the components and defines the two ways
of running the ledger:
1. Multi-user (FinanceManager): a directory of users, written through
   to disk after every change
2. Single-ledger (LedgerSession): one ledger, written once when the
   session closes

These are the entry points an interactive front end calls. Menus,
prompts and printing stay on the caller's side.

DESIGN DECISION: The orchestrator enforces the boundaries:
- Unknown users and transactions are answered with None, never raised
- A failed save is logged and reported, never raised
- Suspicious entries are recorded and flagged, never rejected
- Every step is audited
"""

from typing import Optional

from finmanager.audit import AuditLogger, configure_logging
from finmanager.config import Settings, get_settings
from finmanager.exceptions import StorageError
from finmanager.ledger import Ledger, User, UserDirectory
from finmanager.models.transaction import (
    AmountLike,
    LedgerSummary,
    Transaction,
    TransactionKind,
)
from finmanager.services.storage import (
    DirectoryStorageInterface,
    FileDirectoryStorage,
    FileLedgerStorage,
    LedgerStorageInterface,
)
from finmanager.validation import TransactionValidator


def _describe_storage(storage: object) -> str:
    path = getattr(storage, "path", None)
    return str(path) if path is not None else type(storage).__name__


class FinanceManager:
    """
    Multi-user facade over a write-through UserDirectory.

    The directory is loaded once, at construction. Every call that
    changes it is saved before the call returns.
    """

    def __init__(
        self,
        storage: DirectoryStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[TransactionValidator] = None,
        flag_suspicious: bool = True,
    ):
        self._storage = storage
        self._source = _describe_storage(storage)
        self._audit_logger = audit_logger or AuditLogger()
        self._validator = validator or TransactionValidator()
        self._flag_suspicious = flag_suspicious

        self._directory = UserDirectory.load(storage)
        self._audit_logger.log_data_loaded(
            path=self._source,
            record_count=self._directory.transaction_count,
        )

    @property
    def directory(self) -> UserDirectory:
        return self._directory

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def create_user(self, name: str) -> User:
        """Create a user with an empty ledger. Saved immediately."""
        if self._flag_suspicious:
            result = self._validator.check_user_name(name)
            if not result.is_clean:
                self._audit_logger.log_entry_flagged(result)

        user = self._directory.create_user(name)
        self._audit_logger.log_user_created(user_id=user.id, name=user.name)
        self._check_saved()
        return user

    def get_user(self, user_id: int) -> Optional[User]:
        """Look up a user. None if there is no such ID."""
        user = self._directory.get_user(user_id)
        if user is None:
            self._audit_logger.log_user_not_found(user_id)
        return user

    def list_users(self) -> list[tuple[int, str]]:
        return self._directory.list_users()

    # -------------------------------------------------------------------------
    # Ledger operations, addressed by user
    # -------------------------------------------------------------------------

    def add_income(self, user_id: int, category: str, amount: AmountLike) -> Optional[Transaction]:
        """Record an income for a user. None if the user doesn't exist."""
        return self._add(user_id, TransactionKind.INCOME, category, amount)

    def add_expense(self, user_id: int, category: str, amount: AmountLike) -> Optional[Transaction]:
        """Record an expense for a user. None if the user doesn't exist."""
        return self._add(user_id, TransactionKind.EXPENSE, category, amount)

    def delete_transaction(self, user_id: int, transaction_id: int) -> Optional[Transaction]:
        """
        Delete one of a user's transactions.

        Returns the removed transaction, or None if either the user or
        the transaction doesn't exist (nothing changes in that case).
        """
        user = self.get_user(user_id)
        if user is None:
            return None

        txn = user.ledger.delete_transaction(transaction_id)
        if txn is None:
            self._audit_logger.log_transaction_not_found(transaction_id, owner_id=user.id)
            return None

        self._audit_logger.log_transaction_deleted(txn, owner_id=user.id)
        self._check_saved()
        return txn

    def list_transactions(self, user_id: int) -> Optional[list[Transaction]]:
        user = self.get_user(user_id)
        return None if user is None else user.ledger.list_transactions()

    def summary(self, user_id: int) -> Optional[LedgerSummary]:
        user = self.get_user(user_id)
        return None if user is None else user.ledger.summary()

    def _add(
        self,
        user_id: int,
        kind: TransactionKind,
        category: str,
        amount: AmountLike,
    ) -> Optional[Transaction]:
        user = self.get_user(user_id)
        if user is None:
            return None

        if self._flag_suspicious:
            result = self._validator.check(kind, category, amount)
            if not result.is_clean:
                self._audit_logger.log_entry_flagged(result, owner_id=user.id)

        if kind == TransactionKind.INCOME:
            txn = user.ledger.add_income(category, amount)
        else:
            txn = user.ledger.add_expense(category, amount)

        self._audit_logger.log_transaction_added(txn, owner_id=user.id)
        self._check_saved()
        return txn

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def _check_saved(self) -> None:
        if not self._directory.last_save_ok:
            self._audit_logger.log_save_failed(
                path=self._source,
                error_message="write-through save failed",
            )

    def close(self) -> bool:
        """
        Save one final time.

        Returns False if the save failed.
        """
        saved = self._directory.save()
        if saved:
            self._audit_logger.log_data_saved(
                path=self._source,
                record_count=self._directory.transaction_count,
            )
        else:
            self._audit_logger.log_save_failed(
                path=self._source,
                error_message="final save failed",
            )
        return saved

    def __enter__(self) -> "FinanceManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class LedgerSession:
    """
    Single-ledger session.

    Loads the ledger on construction and writes it back on close().
    A crash before close() loses the session's changes; changes made
    after a successful close() are not saved.
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[TransactionValidator] = None,
        flag_suspicious: bool = True,
    ):
        self._storage = storage
        self._source = _describe_storage(storage)
        self._audit_logger = audit_logger or AuditLogger()
        self._validator = validator or TransactionValidator()
        self._flag_suspicious = flag_suspicious
        self._closed = False

        self._ledger = storage.load()
        self._audit_logger.log_data_loaded(path=self._source, record_count=len(self._ledger))

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def closed(self) -> bool:
        return self._closed

    def add_income(self, category: str, amount: AmountLike) -> Transaction:
        return self._add(TransactionKind.INCOME, category, amount)

    def add_expense(self, category: str, amount: AmountLike) -> Transaction:
        return self._add(TransactionKind.EXPENSE, category, amount)

    def delete_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Delete a transaction; None (and no change) if the ID is unknown."""
        txn = self._ledger.delete_transaction(transaction_id)
        if txn is None:
            self._audit_logger.log_transaction_not_found(transaction_id)
        else:
            self._audit_logger.log_transaction_deleted(txn)
        return txn

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        return self._ledger.get_transaction(transaction_id)

    def list_transactions(self) -> list[Transaction]:
        return self._ledger.list_transactions()

    def summary(self) -> LedgerSummary:
        return self._ledger.summary()

    def _add(self, kind: TransactionKind, category: str, amount: AmountLike) -> Transaction:
        if self._flag_suspicious:
            result = self._validator.check(kind, category, amount)
            if not result.is_clean:
                self._audit_logger.log_entry_flagged(result)

        if kind == TransactionKind.INCOME:
            txn = self._ledger.add_income(category, amount)
        else:
            txn = self._ledger.add_expense(category, amount)

        self._audit_logger.log_transaction_added(txn)
        return txn

    def close(self) -> bool:
        """
        Write the ledger to storage. Once a save has succeeded, later
        calls do nothing.

        Returns False if the save failed; the failure is logged, not raised,
        and the session stays open so close() can be tried again.
        """
        if self._closed:
            return True

        try:
            self._storage.save(self._ledger)
        except StorageError as e:
            self._audit_logger.log_save_failed(path=self._source, error_message=str(e))
            return False

        self._closed = True
        self._audit_logger.log_data_saved(path=self._source, record_count=len(self._ledger))
        return True

    def __enter__(self) -> "LedgerSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def create_finance_manager(settings: Optional[Settings] = None) -> FinanceManager:
    """
    Factory for the multi-user variant, reading paths from configuration.
    """
    settings = settings or get_settings()
    app_settings = settings.app
    configure_logging(app_settings.effective_log_level)

    return FinanceManager(
        FileDirectoryStorage.from_settings(settings.storage),
        audit_logger=AuditLogger(),
        flag_suspicious=app_settings.warn_on_suspicious_entries,
    )


def open_ledger_session(settings: Optional[Settings] = None) -> LedgerSession:
    """
    Factory for the single-ledger variant, reading paths from configuration.

    Use as a context manager so the ledger is saved on the way out:

        with open_ledger_session() as session:
            session.add_income("Salary", 1000)
    """
    settings = settings or get_settings()
    app_settings = settings.app
    configure_logging(app_settings.effective_log_level)

    return LedgerSession(
        FileLedgerStorage.from_settings(settings.storage),
        audit_logger=AuditLogger(),
        flag_suspicious=app_settings.warn_on_suspicious_entries,
    )

"""
User Directory

Maps user IDs to users, each owning exactly one ledger.

DESIGN DECISION: The directory is write-through. Creating a user, or
changing any ledger it owns, saves the whole directory right away.
A failed save is logged and reported, never raised: the in-memory state
stays correct and the next successful save catches the file up.

All ledgers in a directory share one transaction ID allocator, so a
transaction ID identifies a single record across every user.
"""

from typing import TYPE_CHECKING, Iterator, Optional

import structlog

from finmanager.exceptions import StorageError
from finmanager.ledger.allocator import IdAllocator
from finmanager.ledger.ledger import Ledger

if TYPE_CHECKING:
    from finmanager.services.storage.interface import DirectoryStorageInterface


logger = structlog.get_logger(__name__)


class User:
    """A named owner of one ledger."""

    def __init__(self, user_id: int, name: str, ledger: Ledger):
        self.id = user_id
        self.name = name
        self.ledger = ledger

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, name={self.name!r}, transactions={len(self.ledger)})"


class UserDirectory:
    """
    All users and their ledgers.

    Args:
        storage: Where to write through to. If None, nothing is persisted.
        user_ids: Allocator for user IDs
        transaction_ids: Allocator shared by every user's ledger
    """

    def __init__(
        self,
        storage: Optional["DirectoryStorageInterface"] = None,
        user_ids: Optional[IdAllocator] = None,
        transaction_ids: Optional[IdAllocator] = None,
    ):
        self._storage = storage
        self._user_ids = user_ids if user_ids is not None else IdAllocator()
        self._transaction_ids = (
            transaction_ids if transaction_ids is not None else IdAllocator()
        )
        self._users: dict[int, User] = {}
        self.last_save_ok = True

    @classmethod
    def load(cls, storage: "DirectoryStorageInterface") -> "UserDirectory":
        """Read a directory from storage and write through to the same storage."""
        directory = storage.load()
        directory.attach_storage(storage)
        return directory

    def attach_storage(self, storage: Optional["DirectoryStorageInterface"]) -> None:
        self._storage = storage

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def create_user(self, name: str) -> User:
        """
        Register a new user with an empty ledger and save immediately.

        Names are not checked: empty and duplicate names are accepted.
        """
        user_id = self._user_ids.next_id()
        user = self._register(user_id, name, Ledger(owner_id=user_id, allocator=self._transaction_ids))
        self.save()
        return user

    def get_user(self, user_id: int) -> Optional[User]:
        """Look up a user; None if there is no such ID."""
        return self._users.get(user_id)

    def list_users(self) -> list[tuple[int, str]]:
        """(id, name) pairs, ascending by ID."""
        return [(user.id, user.name) for user in self.users()]

    def users(self) -> list[User]:
        return [self._users[key] for key in sorted(self._users)]

    def restore_user(self, user_id: int, name: str, ledger: Ledger) -> User:
        """
        Register a user read back from storage. Does not save.

        The ledger should have been restored with this directory's
        transaction allocator.

        Raises:
            ValueError: If the user ID is already taken
        """
        if user_id in self._users:
            raise ValueError(f"Duplicate user ID {user_id}")
        self._user_ids.advance_to(user_id)
        ledger.owner_id = user_id
        return self._register(user_id, name, ledger)

    def _register(self, user_id: int, name: str, ledger: Ledger) -> User:
        ledger.on_change = self._on_ledger_change
        user = User(user_id, name, ledger)
        self._users[user_id] = user
        return user

    def _on_ledger_change(self, ledger: Ledger) -> None:
        self.save()

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def save(self) -> bool:
        """
        Write the whole directory to storage.

        Returns False if the write failed. The failure is logged, not raised.
        """
        if self._storage is None:
            return True

        try:
            self._storage.save(self)
        except StorageError as e:
            logger.warning(
                "directory_save_failed",
                error=str(e),
                user_count=len(self._users),
            )
            self.last_save_ok = False
            return False

        self.last_save_ok = True
        return True

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def user_ids(self) -> IdAllocator:
        return self._user_ids

    @property
    def transaction_ids(self) -> IdAllocator:
        return self._transaction_ids

    @property
    def transaction_count(self) -> int:
        return sum(len(user.ledger) for user in self._users.values())

    def __len__(self) -> int:
        return len(self._users)

    def __iter__(self) -> Iterator[User]:
        return iter(self.users())

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._users

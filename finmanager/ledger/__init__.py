"""Ledger core: ID allocation, per-owner ledgers and the user directory."""

from finmanager.ledger.allocator import IdAllocator
from finmanager.ledger.ledger import Ledger
from finmanager.ledger.directory import User, UserDirectory

__all__ = [
    "IdAllocator",
    "Ledger",
    "User",
    "UserDirectory",
]

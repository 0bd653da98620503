"""
Ledger

One owner's transactions plus running income and expense totals.

DESIGN DECISION: Totals are maintained incrementally on every add and
delete, never recomputed from the records. The codec writes the totals
to disk and trusts them on reload, so whatever this class keeps is
exactly what survives a restart.

Nothing here validates input. Negative amounts and empty categories are
recorded as given; see finmanager.validation for advisory checks.
"""

from decimal import Decimal
from typing import Callable, Iterable, Optional

from finmanager.ledger.allocator import IdAllocator
from finmanager.models.transaction import (
    AmountLike,
    LedgerSummary,
    Transaction,
    TransactionKind,
    to_amount,
)


ZERO = Decimal("0")


class Ledger:
    """
    Transactions keyed by ID, with running totals.

    The ID allocator can be shared between ledgers (the user directory
    does this so transaction IDs are unique across every user).
    on_change, if set, is called after every successful add or delete.
    """

    def __init__(
        self,
        owner_id: Optional[int] = None,
        allocator: Optional[IdAllocator] = None,
        on_change: Optional[Callable[["Ledger"], None]] = None,
    ):
        self.owner_id = owner_id
        self.on_change = on_change
        self._ids = allocator if allocator is not None else IdAllocator()
        self._transactions: dict[int, Transaction] = {}
        self._total_income = ZERO
        self._total_expense = ZERO

    @classmethod
    def restore(
        cls,
        transactions: Iterable[Transaction],
        total_income: Optional[Decimal] = None,
        total_expense: Optional[Decimal] = None,
        owner_id: Optional[int] = None,
        allocator: Optional[IdAllocator] = None,
        last_transaction_id: int = 0,
    ) -> "Ledger":
        """
        Rebuild a ledger from stored records.

        Stored totals are taken as-is. If either total is missing, both
        are recomputed from the records.

        Raises:
            ValueError: If two records share an ID
        """
        ledger = cls(owner_id=owner_id, allocator=allocator)

        for txn in transactions:
            if txn.id in ledger._transactions:
                raise ValueError(f"Duplicate transaction ID {txn.id}")
            ledger._transactions[txn.id] = txn
            ledger._ids.advance_to(txn.id)
        ledger._ids.advance_to(last_transaction_id)

        if total_income is None or total_expense is None:
            ledger._total_income = sum(
                (t.amount for t in ledger._transactions.values() if t.is_income),
                ZERO,
            )
            ledger._total_expense = sum(
                (t.amount for t in ledger._transactions.values() if not t.is_income),
                ZERO,
            )
        else:
            ledger._total_income = total_income
            ledger._total_expense = total_expense

        return ledger

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_income(self, category: str, amount: AmountLike) -> Transaction:
        """Record an income. Always succeeds for a finite amount."""
        return self._record(TransactionKind.INCOME, category, amount)

    def add_expense(self, category: str, amount: AmountLike) -> Transaction:
        """Record an expense. Always succeeds for a finite amount."""
        return self._record(TransactionKind.EXPENSE, category, amount)

    def delete_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """
        Remove a transaction and take its amount off the matching total.

        Returns the removed transaction, or None if there was no such ID
        (in which case nothing changes).
        """
        txn = self._transactions.pop(transaction_id, None)
        if txn is None:
            return None

        if txn.is_income:
            self._total_income -= txn.amount
        else:
            self._total_expense -= txn.amount

        self._notify()
        return txn

    def _record(
        self,
        kind: TransactionKind,
        category: str,
        amount: AmountLike,
    ) -> Transaction:
        value = to_amount(amount)
        txn = Transaction(
            id=self._ids.next_id(),
            kind=kind,
            category=category,
            amount=value,
        )
        self._transactions[txn.id] = txn

        if kind == TransactionKind.INCOME:
            self._total_income += value
        else:
            self._total_expense += value

        self._notify()
        return txn

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_transactions(self) -> list[Transaction]:
        """All transactions, ascending by ID."""
        return [self._transactions[key] for key in sorted(self._transactions)]

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        return self._transactions.get(transaction_id)

    def summary(self) -> LedgerSummary:
        """Totals and net, rounded to two decimals."""
        return LedgerSummary.from_totals(self._total_income, self._total_expense)

    @property
    def total_income(self) -> Decimal:
        return self._total_income

    @property
    def total_expense(self) -> Decimal:
        return self._total_expense

    @property
    def last_transaction_id(self) -> int:
        """Highest ID the allocator has issued so far."""
        return self._ids.last_id

    @property
    def allocator(self) -> IdAllocator:
        return self._ids

    def __len__(self) -> int:
        return len(self._transactions)

    def __contains__(self, transaction_id: object) -> bool:
        return transaction_id in self._transactions

    def __repr__(self) -> str:
        return (
            f"Ledger(owner_id={self.owner_id!r}, transactions={len(self)}, "
            f"total_income={self._total_income}, total_expense={self._total_expense})"
        )

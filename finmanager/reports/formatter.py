"""
Report Formatting

Turns ledger data into the plain-text blocks an interactive front end
prints. Pure functions: no I/O, no state.

Amounts are always shown with two decimals.
"""

from decimal import Decimal
from typing import Iterable, Optional

from finmanager.ledger import Ledger
from finmanager.models.transaction import (
    LedgerSummary,
    Transaction,
    TransactionKind,
    round_amount,
)


def format_amount(value: Decimal) -> str:
    return f"{round_amount(value):.2f}"


def format_transaction(txn: Transaction) -> str:
    """One transaction as a four-line block."""
    return "\n".join([
        f"Transaction ID: {txn.id}",
        f"Type: {txn.kind.value}",
        f"Category: {txn.category}",
        f"Amount: {format_amount(txn.amount)}",
    ])


def format_history(ledger: Ledger) -> str:
    """Every transaction in ID order, blocks separated by a blank line."""
    transactions = ledger.list_transactions()
    if not transactions:
        return "No transactions to display."
    return "\n\n".join(format_transaction(txn) for txn in transactions)


def format_summary(summary: LedgerSummary) -> str:
    return "\n".join([
        f"Total Income: {format_amount(summary.total_income)}",
        f"Total Expense: {format_amount(summary.total_expense)}",
        f"Net Savings: {format_amount(summary.net)}",
    ])


def format_user_list(users: Iterable[tuple[int, str]]) -> str:
    lines = [f"User ID: {user_id} | Name: {name}" for user_id, name in users]
    if not lines:
        return "No users to display."
    return "\n".join(lines)


def category_totals(
    ledger: Ledger,
    kind: Optional[TransactionKind] = None,
) -> dict[str, Decimal]:
    """
    Sum of amounts per category, optionally for one kind only.

    Categories are compared exactly as stored. Keys are in order of
    first appearance by transaction ID.
    """
    totals: dict[str, Decimal] = {}
    for txn in ledger.list_transactions():
        if kind is not None and txn.kind != kind:
            continue
        totals[txn.category] = totals.get(txn.category, Decimal("0")) + txn.amount
    return totals

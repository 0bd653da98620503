"""
Tests for the plain-text report helpers.
"""

from decimal import Decimal

from finmanager.ledger import Ledger
from finmanager.models.transaction import TransactionKind
from finmanager.reports import (
    category_totals,
    format_amount,
    format_history,
    format_summary,
    format_transaction,
    format_user_list,
)


class TestFormatting:
    """Tests for amount and block formatting."""

    def test_amount_has_two_decimals(self):
        assert format_amount(Decimal("1000")) == "1000.00"
        assert format_amount(Decimal("0.005")) == "0.01"
        assert format_amount(Decimal("-400")) == "-400.00"
        assert format_amount(Decimal("1E+30")) == "1" + "0" * 30 + ".00"

    def test_transaction_block(self):
        ledger = Ledger()
        txn = ledger.add_expense("Rent", 400)
        assert format_transaction(txn) == (
            "Transaction ID: 1\n"
            "Type: Expense\n"
            "Category: Rent\n"
            "Amount: 400.00"
        )

    def test_history(self):
        """Test that blocks come in ID order with a blank line between them."""
        ledger = Ledger()
        ledger.add_income("Salary", 1000)
        ledger.add_expense("Rent", 400)

        blocks = format_history(ledger).split("\n\n")
        assert len(blocks) == 2
        assert blocks[0].startswith("Transaction ID: 1\nType: Income")
        assert blocks[1].startswith("Transaction ID: 2\nType: Expense")

    def test_empty_history(self):
        assert format_history(Ledger()) == "No transactions to display."

    def test_summary_with_negative_net(self):
        ledger = Ledger()
        ledger.add_expense("Rent", 400)
        assert format_summary(ledger.summary()) == (
            "Total Income: 0.00\n"
            "Total Expense: 400.00\n"
            "Net Savings: -400.00"
        )

    def test_user_list(self):
        assert format_user_list([(1, "Alice"), (2, "Bob")]) == (
            "User ID: 1 | Name: Alice\n"
            "User ID: 2 | Name: Bob"
        )
        assert format_user_list([]) == "No users to display."


class TestCategoryTotals:
    """Tests for per-category sums."""

    def _ledger(self) -> Ledger:
        ledger = Ledger()
        ledger.add_expense("Food", "10.50")
        ledger.add_income("Salary", 1000)
        ledger.add_expense("Rent", 400)
        ledger.add_expense("Food", "4.50")
        return ledger

    def test_all_kinds(self):
        totals = category_totals(self._ledger())
        assert list(totals) == ["Food", "Salary", "Rent"]
        assert totals["Food"] == Decimal("15.00")

    def test_one_kind(self):
        totals = category_totals(self._ledger(), kind=TransactionKind.EXPENSE)
        assert totals == {"Food": Decimal("15.00"), "Rent": Decimal("400")}

    def test_deleted_transactions_excluded(self):
        ledger = self._ledger()
        ledger.delete_transaction(1)
        assert category_totals(ledger)["Food"] == Decimal("4.50")

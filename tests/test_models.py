"""
Tests for Personal Finance Manager models

Test strategy:
1. Unit tests for individual components (models, ledger, codec)
2. Integration tests for flows (with in-memory or temporary-file storage)
3. No network, nothing outside the pytest tmp_path
"""

import pytest
from decimal import Decimal
from pydantic import ValidationError

from finmanager.models.transaction import (
    LedgerSummary,
    Transaction,
    TransactionKind,
    ValidationIssue,
    ValidationResult,
    round_amount,
    to_amount,
)
from finmanager.exceptions import (
    CorruptDataError,
    PersistenceUnavailableError,
    StorageError,
)
from finmanager.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestTransactionModel:
    """Tests for the Transaction model."""

    def test_transaction_creation(self):
        """Test Transaction model creation."""
        txn = Transaction(
            id=1,
            kind=TransactionKind.INCOME,
            category="Salary",
            amount=Decimal("1000.00"),
        )
        assert txn.id == 1
        assert txn.kind == TransactionKind.INCOME
        assert txn.is_income is True
        assert txn.amount == Decimal("1000.00")

    def test_kind_accepts_stored_value(self):
        """Test that kind can be given as its on-disk string."""
        txn = Transaction(id=2, kind="Expense", category="Rent", amount=Decimal("400"))
        assert txn.kind == TransactionKind.EXPENSE
        assert txn.is_income is False

    def test_transaction_is_frozen(self):
        """Test that a transaction cannot be edited after creation."""
        txn = Transaction(id=1, kind=TransactionKind.INCOME, category="Gift", amount=Decimal("5"))
        with pytest.raises(ValidationError):
            txn.amount = Decimal("50")

    def test_category_is_kept_verbatim(self):
        """Test that category whitespace is not stripped."""
        txn = Transaction(id=1, kind=TransactionKind.EXPENSE, category="  Food  ", amount=Decimal("1"))
        assert txn.category == "  Food  "

    def test_negative_amount_is_accepted(self):
        """Test that the model does not check the sign of amounts."""
        txn = Transaction(id=1, kind=TransactionKind.INCOME, category="Refund", amount=Decimal("-20"))
        assert txn.amount == Decimal("-20")

    def test_id_must_be_positive(self):
        """Test that ID 0 is rejected."""
        with pytest.raises(ValidationError):
            Transaction(id=0, kind=TransactionKind.INCOME, category="x", amount=Decimal("1"))

    def test_display_amount_rounds(self):
        """Test two-decimal display rounding."""
        txn = Transaction(id=1, kind=TransactionKind.INCOME, category="x", amount=Decimal("2.345"))
        assert txn.display_amount == Decimal("2.35")


class TestAmountHelpers:
    """Tests for amount conversion and rounding."""

    def test_float_uses_shortest_repr(self):
        """Test that 0.1 becomes exactly Decimal('0.1')."""
        assert to_amount(0.1) == Decimal("0.1")
        assert to_amount(1000.00) == Decimal("1000.0")

    def test_int_and_string_amounts(self):
        """Test int and string conversion."""
        assert to_amount(400) == Decimal("400")
        assert to_amount(" 12.50 ") == Decimal("12.50")

    def test_decimal_passes_through(self):
        value = Decimal("3.14")
        assert to_amount(value) is value

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), "NaN", "Infinity", "abc", True])
    def test_rejects_non_finite_and_garbage(self, bad):
        """Test that values that cannot be rounded are rejected."""
        with pytest.raises(ValueError):
            to_amount(bad)

    def test_round_amount_half_up(self):
        assert round_amount(Decimal("10.005")) == Decimal("10.01")
        assert round_amount(Decimal("-10.005")) == Decimal("-10.01")


class TestLedgerSummary:
    """Tests for the summary model."""

    def test_from_totals(self):
        """Test summary values and net."""
        summary = LedgerSummary.from_totals(Decimal("1000"), Decimal("400"))
        assert summary.total_income == Decimal("1000.00")
        assert summary.total_expense == Decimal("400.00")
        assert summary.net == Decimal("600.00")

    def test_net_is_rounded_after_subtraction(self):
        """Test that net is computed from unrounded totals."""
        summary = LedgerSummary.from_totals(Decimal("1.004"), Decimal("0.003"))
        assert summary.total_income == Decimal("1.00")
        assert summary.total_expense == Decimal("0.00")
        assert summary.net == Decimal("1.00")

    def test_negative_net(self):
        summary = LedgerSummary.from_totals(Decimal("0"), Decimal("400"))
        assert summary.net == Decimal("-400.00")


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_clean_result(self):
        result = ValidationResult()
        assert result.is_clean is True
        assert result.has_errors is False

    def test_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(issues=[
            ValidationIssue(
                field="amount",
                issue_type="negative_amount",
                message="Income amount is negative",
                severity="warning",
            ),
        ])
        assert result.is_clean is False
        assert result.has_errors is False
        assert len(result.warnings) == 1

    def test_severity_pattern(self):
        """Test that unknown severities are rejected."""
        with pytest.raises(ValueError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.DATA_LOADED,
            description="Loaded",
        )
        assert event.event_type == AuditEventType.DATA_LOADED
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.transaction_added(
            transaction_id=7,
            kind="Income",
            category="Salary",
            amount="1000.00",
            owner_id=2,
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "transaction_added"
        assert log_dict["entity_id"] == 7
        assert log_dict["owner_id"] == 2
        assert log_dict["details"]["category"] == "Salary"

    def test_builder_user_created(self):
        """Test AuditEventBuilder.user_created."""
        event = AuditEventBuilder.user_created(user_id=1, name="Alice")
        assert event.event_type == AuditEventType.USER_CREATED
        assert event.entity_type == "user"
        assert event.entity_id == 1
        assert event.is_user_action is True

    def test_builder_save_failed_is_warning(self):
        """Test that a failed save is a warning, not an error."""
        event = AuditEventBuilder.save_failed(path="finance.data", error_message="disk full")
        assert event.event_type == AuditEventType.SAVE_FAILED
        assert event.severity == AuditSeverity.WARNING
        assert event.error_message == "disk full"

    def test_builder_entry_flagged(self):
        event = AuditEventBuilder.entry_flagged(
            issues=[{"field": "amount", "type": "negative_amount", "message": "m"}],
        )
        assert event.severity == AuditSeverity.WARNING
        assert len(event.details["issues"]) == 1


class TestTransactionKinds:
    """Tests for the transaction kind enum."""

    def test_kind_values(self):
        """Test the strings written to disk."""
        assert TransactionKind.INCOME.value == "Income"
        assert TransactionKind.EXPENSE.value == "Expense"
        assert TransactionKind("Income") is TransactionKind.INCOME


class TestStorageErrors:
    """Tests for the storage exception hierarchy."""

    def test_hierarchy(self):
        assert issubclass(PersistenceUnavailableError, StorageError)
        assert issubclass(CorruptDataError, StorageError)

    def test_corrupt_data_error_message(self):
        """Test that the line number is part of the message."""
        error = CorruptDataError("bad record", line_number=7, partial="partial")
        assert str(error) == "line 7: bad record"
        assert error.line_number == 7
        assert error.partial == "partial"

    def test_persistence_error_keeps_path(self):
        error = PersistenceUnavailableError("cannot write", path="/tmp/x.data")
        assert error.path == "/tmp/x.data"
        assert PersistenceUnavailableError("cannot write").path is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

"""
Core Data Models for Personal Finance Manager

These models define the value types handed around by the ledger:
1. Transaction - one income or expense entry, immutable once created
2. LedgerSummary - the rounded totals shown to the user
3. ValidationIssue / ValidationResult - advisory findings about an entry

DESIGN DECISION: Amounts are Decimal, never float.
Floats coming from callers are converted through their shortest repr,
so 0.1 becomes Decimal("0.1") and totals don't pick up binary noise.
"""

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, MAX_PREC, localcontext
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


TWO_PLACES = Decimal("0.01")

AmountLike = Union[Decimal, float, int, str]


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionKind(str, Enum):
    """
    Kind of a transaction.

    The values are what gets written to disk and shown to the user.
    """
    INCOME = "Income"
    EXPENSE = "Expense"


# =============================================================================
# AMOUNT HELPERS
# =============================================================================

def to_amount(value: AmountLike) -> Decimal:
    """
    Convert a caller-supplied amount to Decimal.

    Any sign is accepted. Non-finite values (NaN, infinity) are rejected
    because they cannot be rounded for display.

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise ValueError(f"Not an amount: {value!r}")

    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Amount must be finite, got {value!r}")
        return Decimal(repr(value))

    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Not an amount: {value!r}")

    if not amount.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")
    return amount


def round_amount(value: Decimal) -> Decimal:
    """
    Round to two decimal places, half-up.

    Precision is widened to fit the value, so very large finite amounts
    round instead of raising InvalidOperation.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


# =============================================================================
# CORE MODELS
# =============================================================================

class Transaction(BaseModel):
    """
    A single income or expense entry.

    Frozen: a transaction is never edited, only deleted as a whole.
    The category is stored verbatim, whitespace and all.
    """
    model_config = ConfigDict(frozen=True)

    id: int = Field(
        ...,
        ge=1,
        description="Sequential transaction ID, unique within its store"
    )
    kind: TransactionKind = Field(
        ...,
        description="Income or Expense"
    )
    category: str = Field(
        ...,
        description="Free-text category"
    )
    amount: Decimal = Field(
        ...,
        allow_inf_nan=False,
        description="Amount as entered (no sign check)"
    )

    @property
    def is_income(self) -> bool:
        return self.kind == TransactionKind.INCOME

    @property
    def display_amount(self) -> Decimal:
        """Amount rounded for display."""
        return round_amount(self.amount)


def _difference(a: Decimal, b: Decimal) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = MAX_PREC
        return a - b


class LedgerSummary(BaseModel):
    """
    Rounded totals of a ledger.

    net is always total_income - total_expense, computed before rounding.
    """
    model_config = ConfigDict(frozen=True)

    total_income: Decimal
    total_expense: Decimal
    net: Decimal

    @classmethod
    def from_totals(cls, total_income: Decimal, total_expense: Decimal) -> "LedgerSummary":
        return cls(
            total_income=round_amount(total_income),
            total_expense=round_amount(total_expense),
            net=round_amount(_difference(total_income, total_expense)),
        )


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'negative_amount', 'empty')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of checking an entry before it is recorded.

    Findings are advisory: the ledger records the entry regardless.
    """

    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All issues found"
    )

    @property
    def is_clean(self) -> bool:
        return not self.issues

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "warning"]

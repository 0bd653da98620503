"""
Advisory Entry Validation

DESIGN DECISION: The ledger records whatever it is given. Negative
amounts, zero amounts, empty categories and empty user names are all
accepted, because the data files already in use may contain them and
because a refund booked as negative income is a legitimate choice.

What this module adds is visibility: it reports such entries as
warnings so the caller can log them or ask the user to double-check.

IMPORTANT: Validation NEVER blocks and NEVER silently fixes an entry.
"""

from decimal import Decimal

from finmanager.models.transaction import (
    AmountLike,
    TransactionKind,
    ValidationIssue,
    ValidationResult,
    to_amount,
)


class TransactionValidator:
    """
    Checks entries before they are recorded.

    Every finding has severity "warning". Only an amount that is not a
    finite number produces an "error", and the ledger rejects that
    itself.
    """

    def check(
        self,
        kind: TransactionKind,
        category: str,
        amount: AmountLike,
    ) -> ValidationResult:
        """
        Check one income or expense entry.

        Returns: ValidationResult listing every issue found
        """
        issues = []

        if not category or not category.strip():
            issues.append(ValidationIssue(
                field="category",
                issue_type="empty",
                message="Category is empty",
                severity="warning",
                suggested_fix="Give the entry a category so it shows up in reports",
            ))

        try:
            value = to_amount(amount)
        except ValueError as e:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message=str(e),
                severity="error",
            ))
            return ValidationResult(issues=issues)

        if value < 0:
            opposite = "an expense" if kind == TransactionKind.INCOME else "an income"
            issues.append(ValidationIssue(
                field="amount",
                issue_type="negative_amount",
                message=f"{kind.value} amount is negative ({value})",
                severity="warning",
                suggested_fix=f"Record it as {opposite} with a positive amount",
            ))
        elif value == Decimal("0"):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="zero_amount",
                message=f"{kind.value} amount is zero",
                severity="warning",
            ))

        return ValidationResult(issues=issues)

    def check_user_name(self, name: str) -> ValidationResult:
        """Check a new user's name."""
        issues = []
        if not name or not name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="empty",
                message="User name is empty",
                severity="warning",
                suggested_fix="Enter a name so the user can be told apart in the list",
            ))
        return ValidationResult(issues=issues)

    @staticmethod
    def get_user_friendly_summary(result: ValidationResult) -> str:
        """One line per issue, for showing to the user."""
        if result.is_clean:
            return "No issues found."
        lines = []
        for issue in result.issues:
            line = f"{issue.severity.upper()}: {issue.message}"
            if issue.suggested_fix:
                line += f" ({issue.suggested_fix})"
            lines.append(line)
        return "\n".join(lines)

"""
Data Models Package

This package contains the Pydantic models used in the Personal Finance Manager.
"""

from finmanager.models.transaction import (
    LedgerSummary,
    Transaction,
    TransactionKind,
    ValidationIssue,
    ValidationResult,
    round_amount,
    to_amount,
)
from finmanager.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "LedgerSummary",
    "Transaction",
    "TransactionKind",
    "ValidationIssue",
    "ValidationResult",
    "round_amount",
    "to_amount",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]

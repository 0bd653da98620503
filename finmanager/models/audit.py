"""
Audit Models for Personal Finance Manager

Every change to a ledger, and every load and save of a data file, is
described by an AuditEvent. This provides:
1. Traceability of all operations
2. Debugging information when a data file goes missing or is damaged
3. Visibility of entries that were recorded despite looking suspicious

DESIGN DECISION: Events are values. The AuditLogger decides where they go.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.
    """
    # Directory
    USER_CREATED = "user_created"
    USER_NOT_FOUND = "user_not_found"

    # Ledger
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_DELETED = "transaction_deleted"
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    ENTRY_FLAGGED = "entry_flagged"

    # Persistence
    DATA_LOADED = "data_loaded"
    DATA_SAVED = "data_saved"
    SAVE_FAILED = "save_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'user', 'transaction', 'data_file')"
    )
    entity_id: Optional[int] = Field(
        default=None,
        description="ID of the user or transaction this event relates to"
    )
    owner_id: Optional[int] = Field(
        default=None,
        description="User whose ledger was touched (multi-user variant only)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a caller operation?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "owner_id": self.owner_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.user_created(user_id, name)
        event = AuditEventBuilder.transaction_added(txn, owner_id)
    """

    @staticmethod
    def user_created(user_id: int, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_CREATED,
            entity_type="user",
            entity_id=user_id,
            description=f"User {user_id} created",
            details={"name": name},
            is_user_action=True,
        )

    @staticmethod
    def user_not_found(user_id: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_NOT_FOUND,
            entity_type="user",
            entity_id=user_id,
            description=f"No user with ID {user_id}",
            is_user_action=True,
        )

    @staticmethod
    def transaction_added(
        transaction_id: int,
        kind: str,
        category: str,
        amount: str,
        owner_id: Optional[int] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            owner_id=owner_id,
            description=f"{kind} recorded: {amount}",
            details={
                "kind": kind,
                "category": category,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(
        transaction_id: int,
        kind: str,
        amount: str,
        owner_id: Optional[int] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            owner_id=owner_id,
            description=f"{kind} of {amount} deleted",
            details={
                "kind": kind,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_not_found(
        transaction_id: int,
        owner_id: Optional[int] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_NOT_FOUND,
            entity_type="transaction",
            entity_id=transaction_id,
            owner_id=owner_id,
            description=f"No transaction with ID {transaction_id}, nothing deleted",
            is_user_action=True,
        )

    @staticmethod
    def entry_flagged(
        issues: list[dict],
        owner_id: Optional[int] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_FLAGGED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            owner_id=owner_id,
            description=f"Entry recorded with {len(issues)} warning(s)",
            details={"issues": issues},
        )

    @staticmethod
    def data_loaded(path: str, record_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_LOADED,
            entity_type="data_file",
            description=f"Loaded {record_count} record(s)",
            details={
                "path": path,
                "record_count": record_count,
            },
        )

    @staticmethod
    def data_saved(path: str, record_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_SAVED,
            entity_type="data_file",
            description=f"Saved {record_count} record(s)",
            details={
                "path": path,
                "record_count": record_count,
            },
        )

    @staticmethod
    def save_failed(path: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="data_file",
            description="Could not save data; changes since the last save are not on disk",
            error_message=error_message,
            details={"path": path},
        )

"""
Audit Logger

DESIGN DECISION: Every change to a ledger and every load or save of a
data file is logged. This provides:
1. Traceability of what happened to the money
2. Debugging capability when a data file is missing or damaged
3. A record of suspicious entries that were accepted anyway

The audit logger:
- Is synchronous, like the rest of the core
- Never raises: a logging failure must not lose a transaction
- Keeps the most recent events in memory for callers to show
"""

import logging
from collections import deque
from typing import Optional

import structlog

from finmanager.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from finmanager.models.transaction import Transaction, ValidationResult


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route log lines to stderr at the given level.

    structlog renders each event to a JSON string; the stdlib handler
    only prints it.
    """
    logging.basicConfig(format="%(message)s", level=level.upper())
    logging.getLogger().setLevel(level.upper())


class AuditLogger:
    """
    Central audit logging service.

    Logs every event to the structured local log and remembers the last
    `history_size` events.
    """

    def __init__(self, history_size: int = 100):
        self._logger = structlog.get_logger("finmanager.audit")
        self._history: deque[AuditEvent] = deque(maxlen=history_size)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at a level matching its severity."""
        self._history.append(event)
        log_dict = event.to_log_dict()

        try:
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # A broken log handler must not undo a recorded transaction
            logging.getLogger(__name__).error("audit logging failed: %s", e)

    def recent_events(self, limit: Optional[int] = None) -> list[AuditEvent]:
        """Most recent events, newest first."""
        events = list(reversed(self._history))
        return events if limit is None else events[:limit]

    def log_user_created(self, user_id: int, name: str) -> None:
        self.log(AuditEventBuilder.user_created(user_id=user_id, name=name))

    def log_user_not_found(self, user_id: int) -> None:
        self.log(AuditEventBuilder.user_not_found(user_id=user_id))

    def log_transaction_added(
        self,
        txn: Transaction,
        owner_id: Optional[int] = None,
    ) -> None:
        """Log a recorded income or expense."""
        self.log(AuditEventBuilder.transaction_added(
            transaction_id=txn.id,
            kind=txn.kind.value,
            category=txn.category,
            amount=str(txn.amount),
            owner_id=owner_id,
        ))

    def log_transaction_deleted(
        self,
        txn: Transaction,
        owner_id: Optional[int] = None,
    ) -> None:
        self.log(AuditEventBuilder.transaction_deleted(
            transaction_id=txn.id,
            kind=txn.kind.value,
            amount=str(txn.amount),
            owner_id=owner_id,
        ))

    def log_transaction_not_found(
        self,
        transaction_id: int,
        owner_id: Optional[int] = None,
    ) -> None:
        self.log(AuditEventBuilder.transaction_not_found(
            transaction_id=transaction_id,
            owner_id=owner_id,
        ))

    def log_entry_flagged(
        self,
        result: ValidationResult,
        owner_id: Optional[int] = None,
    ) -> None:
        """Log the advisory issues of an entry that was recorded anyway."""
        issues = [
            {"field": i.field, "type": i.issue_type, "message": i.message}
            for i in result.issues
        ]
        self.log(AuditEventBuilder.entry_flagged(issues=issues, owner_id=owner_id))

    def log_data_loaded(self, path: str, record_count: int) -> None:
        self.log(AuditEventBuilder.data_loaded(path=path, record_count=record_count))

    def log_data_saved(self, path: str, record_count: int) -> None:
        self.log(AuditEventBuilder.data_saved(path=path, record_count=record_count))

    def log_save_failed(self, path: str, error_message: str) -> None:
        self.log(AuditEventBuilder.save_failed(path=path, error_message=error_message))

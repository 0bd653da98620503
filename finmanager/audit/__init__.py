"""Audit logging package."""

from finmanager.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]

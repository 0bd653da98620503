"""
Personal Finance Manager - Source Package

A small personal finance ledger: income and expense transactions,
running totals, and a flat-file store that survives between runs.

Two variants share the same core:
- a single ledger, written once when the session closes
- a directory of users, each with their own ledger, written through
  to disk after every change

DESIGN PRINCIPLES:
1. Totals are maintained incrementally and persisted as-is
2. Identifiers are never reused, not even across a reload
3. A missing data file is a fresh start, not a failure
4. Suspicious entries are flagged, never silently corrected
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Personal Finance Manager Team"

# Importing the audit logger applies the structlog configuration.
from finmanager.audit.logger import configure_logging

__all__ = ["configure_logging"]

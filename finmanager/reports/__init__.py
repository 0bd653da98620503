"""Plain-text reports over ledger data."""

from finmanager.reports.formatter import (
    category_totals,
    format_amount,
    format_history,
    format_summary,
    format_transaction,
    format_user_list,
)

__all__ = [
    "category_totals",
    "format_amount",
    "format_history",
    "format_summary",
    "format_transaction",
    "format_user_list",
]

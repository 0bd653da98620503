"""Validation package."""

from finmanager.validation.validator import TransactionValidator

__all__ = ["TransactionValidator"]

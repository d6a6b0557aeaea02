"""
Domain errors raised by the analytics core and the transaction sources.

Tool endpoints turn these into unsuccessful tool results so the chat layer
can always render a reply.
"""

from typing import Optional


class AnalyticsError(Exception):
    """Base class for errors originating in the analytics service."""


class InsufficientDataError(AnalyticsError):
    """Raised when there are too few transactions to build a profile."""

    def __init__(self, required: int, actual: int, message: Optional[str] = None):
        self.required = required
        self.actual = actual
        super().__init__(
            message
            or f"Need at least {required} transactions for accurate personality analysis"
        )


class TransactionSourceError(AnalyticsError):
    """Raised when transactions cannot be loaded from the CSV file or the ledger API."""

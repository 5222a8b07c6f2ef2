"""
Exceptions raised by the sales reports module.
"""
from typing import Optional


class ReportError(Exception):
    """Base class for report generation errors"""


class ScopeError(ReportError):
    """The caller's role and identifiers do not resolve to a report scope"""

    def __init__(self, message: str, role: Optional[str] = None):
        super().__init__(message)
        self.role = role


class TransactionFetchError(ReportError):
    """Loading the transactions of a store failed upstream"""

    def __init__(self, store_id: str, cause: Exception):
        super().__init__(f"Failed to fetch transactions for store {store_id}: {cause}")
        self.store_id = store_id
        self.cause = cause

"""Exception hierarchy for the payments ledger.

Business-rule rejections are not exceptions; they are reported as
``ProcessingResult`` values by the ledger engine.
"""

from typing import Optional


class LedgerError(Exception):
    """Base exception for all ledger errors."""


class InputSourceError(LedgerError):
    """Raised when the transaction input cannot be opened or read."""


class MalformedRecordError(LedgerError):
    """Raised when a single input row cannot be decoded into a transaction."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class ConfigurationError(LedgerError):
    """Raised when configuration is invalid."""

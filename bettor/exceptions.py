"""
Exception types raised by the bettor.
"""
from typing import List, Optional


class BettorError(Exception):
    """Base class for bettor errors."""


class ConfigError(BettorError):
    """Raised when configuration is missing or invalid."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class TransactionFailedError(BettorError):
    """Raised when a transaction was mined but reverted."""

    def __init__(self, tx_hash: str, message: Optional[str] = None):
        self.tx_hash = tx_hash
        super().__init__(message or f"Transaction {tx_hash} reverted")

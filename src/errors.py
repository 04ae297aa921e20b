from typing import Optional


class LedgerError(Exception):
    """Raised when the ledger is handed a transaction it cannot interpret at all."""


class RecordDecodeError(ValueError):
    """Raised when an input row cannot be turned into a Transaction."""

    def __init__(self, message: str, line_num: Optional[int] = None):
        self.line_num = line_num
        if line_num is not None:
            message = f"line {line_num}: {message}"
        super().__init__(message)

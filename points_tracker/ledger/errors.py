"""Ledger exceptions."""


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class IndexOutOfRange(LedgerError, IndexError):
    """Edit or delete addressed an entry position that does not exist."""

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"No entry at position {index} (ledger has {size} entries)")


class UnknownSubject(LedgerError, LookupError):
    """Grade evaluated for a subject with no expectations on file."""

    def __init__(self, subject: str):
        self.subject = subject
        super().__init__(f"Unknown subject: {subject!r}")


class LedgerInvariantError(LedgerError):
    """Balance no longer equals base points plus the sum of entry deltas."""
    pass

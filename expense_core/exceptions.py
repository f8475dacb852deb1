"""Errors raised by the expense store and service."""

class ValidationError(ValueError):
    """Raised when an amount, category, note or date is rejected before storage."""


class RecordNotFoundError(LookupError):
    """Raised by lookups for an expense id that has no row.

    Updates and deletes on a missing id are no-ops and never raise this.
    """


class PersistenceError(IOError):
    """Raised when the SQLite database cannot be opened, read or written."""

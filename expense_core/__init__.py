"""Core business logic package for the expense tracker."""

from .exceptions import PersistenceError, RecordNotFoundError, ValidationError
from .filters import SpendingSummary, WindowFilter
from .models import Expense
from .services import ExpenseService, open_service
from .storage import ExpenseStore

__all__ = [
    "Expense",
    "ExpenseService",
    "ExpenseStore",
    "SpendingSummary",
    "WindowFilter",
    "open_service",
    "PersistenceError",
    "ValidationError",
    "RecordNotFoundError",
]

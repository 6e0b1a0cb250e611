"""Exception classes for the expense dashboard."""
from typing import List, Optional


class ExpenseDashboardError(Exception):
    """Base exception for the expense dashboard."""
    pass


class ConfigError(ExpenseDashboardError):
    """Configuration-related errors."""
    pass


class DataValidationError(ExpenseDashboardError):
    """Seed data violates the data model; raised at load time."""

    def __init__(self, errors: List[dict], message: Optional[str] = None):
        self.errors = list(errors)
        if message is None:
            message = f"{len(self.errors)} invalid record(s) in seed data"
            if self.errors:
                message += f": {self.errors[0]['message']}"
        super().__init__(message)

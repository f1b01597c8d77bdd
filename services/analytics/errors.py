# services/analytics/errors.py
from __future__ import annotations


class AnalyticsError(Exception):
    """Base class for portfolio analytics failures."""


class InvalidInput(AnalyticsError, ValueError):
    """Investment data is missing or malformed (bad value, unknown risk/type, ...)."""

    def __init__(self, message: str, *, index: int | None = None, field: str | None = None):
        self.index = index
        self.field = field
        if index is not None:
            message = f"investment[{index}]: {message}"
        super().__init__(message)

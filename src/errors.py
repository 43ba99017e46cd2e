"""Error types shared by the task model, task list and storage layer."""
from __future__ import annotations
from typing import Optional


class ValidationError(ValueError):
    """Task content rejected (empty or overlong description, unknown state)."""


class RangeError(IndexError):
    """Display number outside the 1..L window of the current list."""


class PersistenceError(Exception):
    """Loading or saving the task file failed.

    The original exception is kept on ``cause`` (and chained as ``__cause__``
    when raised with ``from``).
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause

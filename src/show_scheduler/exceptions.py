"""Custom exceptions for the show scheduler."""

from typing import Optional


class InvalidRequestError(ValueError):
    """Raised when a generation request has no usable instructions."""

    pass


class ModelUnavailableError(Exception):
    """Raised when the generative model cannot be reached, times out or errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ModelOutputError(ValueError):
    """Raised when model text holds no usable JSON selection."""

    pass


class PersistenceError(Exception):
    """Raised when saving a schedule as a playlist fails."""

    pass


class ScheduleNotFoundError(KeyError):
    """Raised when a schedule id is not held by the workspace."""

    pass


class ScheduleItemNotFoundError(KeyError):
    """Raised when an item id is not present in a schedule."""

    pass


class InvalidEditError(ValueError):
    """Raised when an edit names fields that cannot be edited."""

    pass

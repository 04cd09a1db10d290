"""Exception classes for the hosted Postgres REST store client."""

from typing import Optional


class StoreError(Exception):
    """Base exception for all store errors.

    Attributes:
        code: PostgREST / Postgres error code (e.g. "23505"), or HTTP status text
        message: Error message from the server
    """

    def __init__(self, code: str, message: str, details: Optional[str] = None):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(f"Store Error {code}: {message}")


class StoreNotFoundError(StoreError):
    """Requested row or relation not found (PGRST116)."""

    pass


class StoreTableMissingError(StoreError):
    """Table does not exist (42P01). The database setup scripts have not been run."""

    pass


class StoreDuplicateError(StoreError):
    """Unique constraint violation (23505)."""

    pass


class StoreForeignKeyError(StoreError):
    """Foreign key constraint violation (23503)."""

    pass


class StoreConnectionError(StoreError):
    """Transport-level failure talking to the store (DNS, refused, timeout)."""

    pass


ERROR_CODE_MAP = {
    "PGRST116": StoreNotFoundError,
    "42P01": StoreTableMissingError,
    "23505": StoreDuplicateError,
    "23503": StoreForeignKeyError,
}

FRIENDLY_MESSAGES = {
    "PGRST116": "Table or view not found. Please check your database schema.",
    "42P01": "Database table does not exist. Please run the setup scripts.",
    "23505": "Duplicate entry. This record already exists.",
    "23503": "Foreign key constraint violation. Referenced record does not exist.",
}


def error_from_payload(payload: dict, status_code: int) -> StoreError:
    """Build the most specific StoreError for a PostgREST error body."""
    code = str(payload.get("code") or status_code)
    message = payload.get("message") or FRIENDLY_MESSAGES.get(code) or f"HTTP {status_code}"
    error_class = ERROR_CODE_MAP.get(code, StoreError)
    return error_class(code, message, payload.get("details"))

"""
Portal error taxonomy. Validation and transport failures are raised and
caught at the UI boundary; store lookups report NotFound/NoOp as outcomes.
"""

from enum import Enum
from typing import Optional


class PortalError(Exception):
    """Base class for portal errors."""


class ValidationError(PortalError):
    """Bad input at the boundary: file type, file size, form fields, credentials."""

    def __init__(self, title: str, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.title = title
        self.message = message
        self.field = field


class NotFoundError(PortalError):
    """Lookup on an unknown record id."""

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} {record_id} not found")
        self.kind = kind
        self.record_id = record_id


class TransportError(PortalError):
    """Non-2xx response or network failure talking to the backend."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class PersistenceError(PortalError):
    """Writing a collection back to storage failed."""


class StoreOutcome(str, Enum):
    """Result of a record store mutation."""
    UPDATED = "updated"
    NO_CHANGE = "no_change"
    REMOVED = "removed"
    NOT_FOUND = "not_found"

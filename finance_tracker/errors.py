"""
Failure kinds raised by the services.

Every error a service raises on purpose is a FinanceTrackerError
subclass. Each carries the HTTP status the API layer maps it to,
so routers never need to inspect error text.
"""

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class FinanceTrackerError(Exception):
    """Base class for classified failures."""
    status_code: int = 500


class InvalidInputError(FinanceTrackerError, ValueError):
    """Caller-supplied data violates a stated constraint."""
    status_code = 400

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class ConflictError(FinanceTrackerError):
    """A uniqueness rule would be violated (e.g. duplicate email)."""
    status_code = 409


class UnauthenticatedError(FinanceTrackerError):
    """Credentials or tokens did not check out."""
    status_code = 401


class NotFoundError(FinanceTrackerError):
    """Entity absent, or not owned by the caller."""
    status_code = 404


class StorageFailureError(FinanceTrackerError):
    """The database could not complete the operation."""
    status_code = 503


class ConfigurationError(FinanceTrackerError):
    """Settings are unusable. Raised at startup, never per request."""


@contextmanager
def storage_guard(action: str):
    """
    Re-raise database errors as StorageFailureError.

    Classified errors raised inside the block pass through untouched.
    Nothing is retried; the caller decides whether to roll back.
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.exception("Storage failure while %s", action)
        raise StorageFailureError(f"Storage failure while {action}") from e

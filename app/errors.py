"""Service-level error taxonomy.

Services raise these; ``app.main`` is the only place that maps them to HTTP
status codes.
"""
import asyncio
import functools

import asyncpg

from app.utils.logger import get_logger

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


class BookstoreError(Exception):
    """Base class for errors raised by the service layer."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(BookstoreError):
    pass


class ValidationFailure(BookstoreError):
    pass


class EmailExistsError(ValidationFailure):
    pass


class UsernameExistsError(ValidationFailure):
    pass


class InsufficientStockError(ValidationFailure):
    pass


class BadCredentialsError(ValidationFailure):
    pass


class AccountDisabledError(ValidationFailure):
    pass


class ServiceError(BookstoreError):
    """Persistence or transport failure. The cause is logged, never exposed."""


class UnauthorizedError(BookstoreError):
    pass


class AccountLockedError(UnauthorizedError):
    pass


class ForbiddenError(BookstoreError):
    pass


# Unreachable or slow database servers surface as OSError or a timeout.
PERSISTENCE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


def wrap_persistence_errors(message: str):
    """Turn database failures inside a service coroutine into ``ServiceError``."""

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except PERSISTENCE_ERRORS as exc:
                logger.error(message, exc_info=exc)
                raise ServiceError(message) from exc

        return wrapper

    return decorator

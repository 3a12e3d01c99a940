"""
Custom exception classes for consistent error handling across all modules.
"""

import functools
from collections.abc import Awaitable, Callable
from typing import Any, ParamSpec, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .logging import get_logger

logger = get_logger("core.exceptions")

P = ParamSpec("P")
R = TypeVar("R")


class ProManException(Exception):
    """Base exception for all ProMan related errors."""

    status_code: int = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(ProManException):
    """Raised when a requested resource is not found."""

    status_code = 404

    def __init__(
        self, message: str = "Resource not found", details: dict[str, Any] | None = None
    ):
        super().__init__(message, details)


class ValidationError(ProManException):
    """Raised when data validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        details: dict[str, Any] | None = None,
    ):
        if field:
            full_message = f"Validation error for field '{field}': {message}"
        else:
            full_message = message
        super().__init__(full_message, details)
        self.field = field
        self.value = value


class DatabaseError(ProManException):
    """Raised when database operations fail."""

    status_code = 500


def database_operation(
    message: str,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Translate persistence failures inside a service call into DatabaseError.

    The driver error is logged with its traceback; callers only see ``message``.
    When the first argument is the session, its transaction is rolled back so
    no partial writes survive. Domain exceptions pass through untouched.
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return await func(*args, **kwargs)
            except SQLAlchemyError as e:
                logger.exception(
                    f"{message}: {e}",
                    extra={"operation": func.__name__, "error_type": type(e).__name__},
                )
                if args and isinstance(args[0], AsyncSession):
                    await args[0].rollback()
                raise DatabaseError(message) from e

        return wrapper

    return decorator

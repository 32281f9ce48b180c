"""
Centralized error handling and recovery strategies for the clubstats backend.
Provides the retry and context decorators used around snapshot acquisition.
"""

import asyncio
import logging
import functools
from typing import Any, Callable, Optional, TypeVar, Awaitable

from .exceptions import (
    ClubStatsException, ErrorContext,
    DataSourceConnectionError, DataSourceTimeoutError,
    DomainException, RECOVERABLE_DATA_SOURCE_ERRORS
)

logger = logging.getLogger(__name__)

AF = TypeVar('AF', bound=Callable[..., Awaitable[Any]])


def _is_retryable(error: Exception) -> bool:
    # Typed errors can still opt out, e.g. a 4xx mapped to a server error
    if isinstance(error, ClubStatsException):
        return error.recoverable
    return True


class ErrorHandler:
    """
    Retry with exponential backoff and error context enrichment.
    """

    def __init__(self, default_retries: int = 3, default_delay: float = 1.0):
        self.default_retries = default_retries
        self.default_delay = default_delay

    def with_retry(
        self,
        max_retries: Optional[int] = None,
        delay: Optional[float] = None,
        exponential_backoff: bool = True,
        retryable_exceptions: Optional[tuple] = None
    ):
        """
        Decorator for automatic retry with exponential backoff.

        An error carrying ``retry_after`` (rate limits) waits that long instead
        of the current backoff delay. Errors flagged as not recoverable are
        raised immediately even when their type is retryable.

        Args:
            max_retries: Retries after the first attempt
            delay: Initial delay between retries
            exponential_backoff: Whether to double the delay after each retry
            retryable_exceptions: Tuple of exception types to retry on
        """
        if retryable_exceptions is None:
            retryable_exceptions = RECOVERABLE_DATA_SOURCE_ERRORS

        def decorator(func: AF) -> AF:
            @functools.wraps(func)
            async def wrapper(*args, **kwargs):
                retries = self.default_retries if max_retries is None else max_retries
                current_delay = self.default_delay if delay is None else delay
                operation_id = f"{func.__module__}.{func.__name__}"

                for attempt in range(retries + 1):
                    try:
                        result = await func(*args, **kwargs)

                        if attempt > 0:
                            logger.info(f"Operation {operation_id} succeeded after {attempt} retries")

                        return result

                    except retryable_exceptions as e:
                        if not _is_retryable(e):
                            logger.error(f"Non-recoverable error in {operation_id}: {e}")
                            raise

                        if attempt >= retries:
                            logger.error(
                                f"Operation {operation_id} failed after {attempt + 1} attempts: {e}"
                            )
                            raise

                        retry_after = getattr(e, 'retry_after', None)
                        sleep_time = retry_after if retry_after is not None else current_delay

                        logger.warning(
                            f"Operation {operation_id} failed (attempt {attempt + 1}/{retries + 1}): {e}. "
                            f"Retrying in {sleep_time}s..."
                        )

                        await asyncio.sleep(sleep_time)

                        if exponential_backoff:
                            current_delay *= 2

                    except Exception as e:
                        logger.error(f"Non-retryable error in {operation_id}: {e}")
                        raise

            return wrapper
        return decorator

    def with_error_context(self, operation: str, table: Optional[str] = None):
        """
        Decorator that adds error context to exceptions.

        Args:
            operation: Name of the operation
            table: Backend table involved (if applicable)
        """
        def decorator(func: AF) -> AF:
            @functools.wraps(func)
            async def wrapper(*args, **kwargs):
                try:
                    return await func(*args, **kwargs)
                except ClubStatsException as e:
                    if not e.context:
                        e.context = ErrorContext(
                            operation=operation,
                            table=table,
                            parameters=kwargs
                        )
                    raise
                except Exception as e:
                    context = ErrorContext(
                        operation=operation,
                        table=table,
                        parameters=kwargs
                    )

                    if isinstance(e, asyncio.TimeoutError):
                        raise DataSourceTimeoutError(
                            timeout=kwargs.get('timeout', 30.0),
                            context=context
                        ) from e
                    elif isinstance(e, (ConnectionError, OSError)):
                        raise DataSourceConnectionError(
                            url=table or "unknown",
                            context=context,
                            original_error=e
                        ) from e
                    raise DomainException(
                        message=f"Unexpected error in {operation}: {str(e)}",
                        context=context,
                        original_error=e
                    ) from e

            return wrapper
        return decorator


# Global error handler instance
error_handler = ErrorHandler()


def with_domain_error_handling(func: AF) -> AF:
    """
    Decorator for domain service operations.

    clubstats exceptions pass through unchanged; anything else is wrapped in
    a DomainException carrying the call's keyword arguments.
    """
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except ClubStatsException:
            raise
        except Exception as e:
            operation = f"{func.__module__}.{func.__name__}"
            logger.error(f"Unexpected error in domain operation {operation}: {e}")
            raise DomainException(
                message=f"Unexpected error in {operation}",
                original_error=e,
                context=ErrorContext(operation=operation, parameters=kwargs)
            ) from e

    return wrapper

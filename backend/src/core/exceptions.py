"""
Exception hierarchy for the clubstats analytics backend.
Provides specific exceptions for snapshot acquisition and domain lookups with context.

The aggregation engine itself never raises: unparseable or absent data is
replaced by neutral defaults. These exceptions belong to the layers around it.
"""

from typing import Any, Dict, Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ErrorContext:
    """Context information for errors."""
    operation: str
    table: Optional[str] = None
    team_id: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None
    timestamp: datetime = field(default_factory=_utcnow)
    user_agent: Optional[str] = None
    request_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert error context to dictionary."""
        return {
            'operation': self.operation,
            'table': self.table,
            'team_id': self.team_id,
            'parameters': self.parameters,
            'timestamp': self.timestamp.isoformat(),
            'user_agent': self.user_agent,
            'request_id': self.request_id
        }


class ClubStatsException(Exception):
    """
    Base exception class for all clubstats-specific errors.
    Provides rich context and error categorization.
    """

    def __init__(
        self,
        message: str,
        context: Optional[ErrorContext] = None,
        original_error: Optional[Exception] = None,
        error_code: Optional[str] = None,
        recoverable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.context = context
        self.original_error = original_error
        self.error_code = error_code
        self.recoverable = recoverable
        self.timestamp = _utcnow()

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'error_code': self.error_code,
            'recoverable': self.recoverable,
            'timestamp': self.timestamp.isoformat(),
            'context': self.context.to_dict() if self.context else None,
            'original_error': str(self.original_error) if self.original_error else None
        }

    def __str__(self) -> str:
        """Enhanced string representation with context."""
        base_msg = self.message
        if self.context and self.context.table:
            base_msg += f" (Table: {self.context.table})"
        if self.error_code:
            base_msg += f" [Code: {self.error_code}]"
        return base_msg


# =============================================================================
# Validation and Configuration Exceptions
# =============================================================================

class ValidationError(ClubStatsException):
    """Raised when input validation fails."""

    def __init__(
        self,
        field: str,
        value: Any,
        constraint: str,
        context: Optional[ErrorContext] = None
    ):
        message = f"Validation failed for field '{field}': {constraint}. Got: {value}"
        super().__init__(
            message=message,
            context=context,
            error_code="VALIDATION_ERROR",
            recoverable=True
        )
        self.field = field
        self.value = value
        self.constraint = constraint


class ConfigurationError(ClubStatsException):
    """Raised when configuration is invalid or missing."""

    def __init__(self, setting: str, message: str, context: Optional[ErrorContext] = None):
        full_message = f"Configuration error for '{setting}': {message}"
        super().__init__(
            message=full_message,
            context=context,
            error_code="CONFIG_ERROR",
            recoverable=False
        )
        self.setting = setting


# =============================================================================
# Data Source Exceptions
# =============================================================================

class DataSourceException(ClubStatsException):
    """Base class for all errors raised while fetching the snapshot."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[Any] = None,
        context: Optional[ErrorContext] = None,
        original_error: Optional[Exception] = None,
        recoverable: bool = False
    ):
        super().__init__(
            message=message,
            context=context,
            original_error=original_error,
            error_code="DATA_SOURCE_ERROR",
            recoverable=recoverable
        )
        self.status_code = status_code
        self.response_data = response_data

    def to_dict(self) -> Dict[str, Any]:
        """Enhanced dictionary representation with HTTP details."""
        base_dict = super().to_dict()
        base_dict.update({
            'status_code': self.status_code,
            'response_data': self.response_data
        })
        return base_dict


class DataSourceConnectionError(DataSourceException):
    """Raised when the backend cannot be reached."""

    def __init__(self, url: str, context: Optional[ErrorContext] = None, original_error: Optional[Exception] = None):
        message = f"Failed to connect to data source: {url}"
        super().__init__(
            message=message,
            context=context,
            original_error=original_error,
            recoverable=True
        )
        self.url = url
        self.error_code = "DATA_SOURCE_CONNECTION_ERROR"


class DataSourceTimeoutError(DataSourceException):
    """Raised when a backend request times out."""

    def __init__(self, timeout: float, context: Optional[ErrorContext] = None):
        message = f"Data source request timed out after {timeout} seconds"
        super().__init__(
            message=message,
            context=context,
            recoverable=True
        )
        self.timeout = timeout
        self.error_code = "DATA_SOURCE_TIMEOUT_ERROR"


class DataSourceRateLimitError(DataSourceException):
    """Raised when the backend rate limit is exceeded."""

    def __init__(
        self,
        retry_after: Optional[int] = None,
        context: Optional[ErrorContext] = None
    ):
        message = "Data source rate limit exceeded"
        if retry_after:
            message += f". Retry after {retry_after} seconds"
        super().__init__(
            message=message,
            status_code=429,
            context=context,
            recoverable=True
        )
        self.retry_after = retry_after
        self.error_code = "DATA_SOURCE_RATE_LIMIT_ERROR"


class DataSourceAuthenticationError(DataSourceException):
    """Raised when the backend rejects the service key."""

    def __init__(self, status_code: int = 401, context: Optional[ErrorContext] = None):
        message = "Data source authentication failed. Check SUPABASE_KEY."
        super().__init__(
            message=message,
            status_code=status_code,
            context=context,
            recoverable=False
        )
        self.error_code = "DATA_SOURCE_AUTH_ERROR"


class DataSourceNotFoundError(DataSourceException):
    """Raised when a table or resource does not exist."""

    def __init__(self, resource: str, context: Optional[ErrorContext] = None):
        message = f"Data source resource not found: {resource}"
        super().__init__(
            message=message,
            status_code=404,
            context=context,
            recoverable=False
        )
        self.resource = resource
        self.error_code = "DATA_SOURCE_NOT_FOUND_ERROR"


class DataSourceServerError(DataSourceException):
    """Raised when the backend returns an unexpected HTTP status."""

    def __init__(
        self,
        status_code: int,
        response_data: Optional[Any] = None,
        context: Optional[ErrorContext] = None
    ):
        message = f"Data source error (HTTP {status_code})"
        super().__init__(
            message=message,
            status_code=status_code,
            response_data=response_data,
            context=context,
            recoverable=500 <= status_code < 600
        )
        self.error_code = "DATA_SOURCE_SERVER_ERROR"


class DataSourceResponseError(DataSourceException):
    """Raised when a response body cannot be interpreted as rows."""

    def __init__(
        self,
        message: str,
        response_data: Optional[Any] = None,
        context: Optional[ErrorContext] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(
            message=f"Invalid data source response: {message}",
            response_data=response_data,
            context=context,
            original_error=original_error,
            recoverable=False
        )
        self.error_code = "DATA_SOURCE_RESPONSE_ERROR"


# =============================================================================
# Domain Exceptions
# =============================================================================

class DomainException(ClubStatsException):
    """Base class for domain-level errors."""

    def __init__(
        self,
        message: str,
        context: Optional[ErrorContext] = None,
        original_error: Optional[Exception] = None,
        error_code: str = "DOMAIN_ERROR",
        recoverable: bool = True
    ):
        super().__init__(
            message=message,
            context=context,
            original_error=original_error,
            error_code=error_code,
            recoverable=recoverable
        )


RECOVERABLE_DATA_SOURCE_ERRORS = (
    DataSourceConnectionError,
    DataSourceTimeoutError,
    DataSourceRateLimitError,
    DataSourceServerError,
)

"""
Core package for the clubstats analytics backend.
Contains exceptions, utilities, and common functionality.
"""

from .exceptions import *
from .error_handler import ErrorHandler, error_handler, with_domain_error_handling
from .utils import *

__all__ = [
    # Base exceptions
    "ClubStatsException",
    "ErrorContext",
    "ValidationError",
    "ConfigurationError",

    # Data source exceptions
    "DataSourceException",
    "DataSourceConnectionError",
    "DataSourceTimeoutError",
    "DataSourceRateLimitError",
    "DataSourceAuthenticationError",
    "DataSourceNotFoundError",
    "DataSourceServerError",
    "DataSourceResponseError",
    "RECOVERABLE_DATA_SOURCE_ERRORS",

    # Domain exceptions
    "DomainException",

    # Error handler
    "ErrorHandler",
    "error_handler",
    "with_domain_error_handling",

    # Utilities
    "LoggerFactory",
    "DataValidator",
    "EnvironmentManager",
]

"""
Core utilities for the clubstats backend.
Common functionality used across the entire application.
"""

import os
import re
import math
import logging
from datetime import date, datetime
from typing import Any, Optional

from dotenv import load_dotenv

# Leading base-10 integer, optionally signed, after optional whitespace
_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


class LoggerFactory:
    """Centralized logger configuration."""

    _configured = False

    @classmethod
    def setup_logging(cls, level: Optional[str] = None, format_string: Optional[str] = None):
        """Setup application-wide logging configuration."""
        if cls._configured:
            return

        if level is None:
            level = os.getenv('LOG_LEVEL', 'INFO')

        if format_string is None:
            format_string = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

        logging.basicConfig(
            level=getattr(logging, level.upper(), logging.INFO),
            format=format_string,
            handlers=[logging.StreamHandler()]
        )
        cls._configured = True

    @staticmethod
    def get_logger(name: str) -> logging.Logger:
        """Get a configured logger instance."""
        LoggerFactory.setup_logging()
        return logging.getLogger(name)


class DataValidator:
    """
    Common data validation and coercion utilities.

    The coercion helpers never raise: anything that cannot be read as the
    requested type collapses to the neutral default.
    """

    @staticmethod
    def coerce_int(value: Any, default: int = 0) -> int:
        """
        Read a base-10 integer from an untyped value.

        Finite floats truncate toward zero, so 2.9 -> 2 and 1e20 -> 10**20.
        Strings give their leading integer: "3" -> 3, " 4 " -> 4, "2.7" -> 2.
        Booleans, None, NaN, infinities and anything without a leading
        integer yield ``default``.
        """
        if value is None or isinstance(value, bool):
            return default
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return int(value) if math.isfinite(value) else default
        match = _LEADING_INT.match(str(value))
        if not match:
            return default
        return int(match.group(1))

    @staticmethod
    def coerce_optional_bool(value: Any) -> Optional[bool]:
        """Read a boolean flag, keeping None for absent values."""
        if value is None:
            return None
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in ('true', '1', 'yes', 't')
        return bool(value)

    @staticmethod
    def coerce_date(value: Any) -> Optional[date]:
        """Read a calendar date from a date, datetime or ISO string."""
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str) and value:
            try:
                return date.fromisoformat(value[:10])
            except ValueError:
                return None
        return None


class EnvironmentManager:
    """Environment configuration management."""

    _loaded = False

    @classmethod
    def load_env_vars(cls):
        """Load variables from a local .env file into the process environment."""
        if cls._loaded:
            return
        load_dotenv()
        cls._loaded = True


__all__ = [
    'LoggerFactory',
    'DataValidator',
    'EnvironmentManager',
]

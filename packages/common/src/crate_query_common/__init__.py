"""Crate Query Common - Shared utilities.

Version: 1.0.0

This package provides:
- Structured logging (structlog)
- Retry/backoff patterns (tenacity)
- Environment-driven settings (pydantic-settings)
- Base error type
"""

from crate_query_common.config import Settings, get_settings
from crate_query_common.errors import CrateQueryError
from crate_query_common.logging_config import configure_logging, get_logger
from crate_query_common.retry import retry_on_exception

__version__ = "1.0.0"

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Logging
    "configure_logging",
    "get_logger",
    # Retry
    "retry_on_exception",
    # Errors
    "CrateQueryError",
]

"""RenoQuote configuration.

This package contains:
- settings: Environment variables and configuration
- errors: Custom exceptions and error codes
"""

from config.settings import settings, Settings
from config.errors import RenoQuoteError, ErrorCode

__all__ = [
    "settings",
    "Settings",
    "RenoQuoteError",
    "ErrorCode",
]

"""Utility modules for RenoQuote functions."""

from utils.estimate_logger import (
    log_estimate,
    log_contractor_pricing,
    log_quotes,
)
from utils.logging_config import configure_logging

__all__ = [
    "log_estimate",
    "log_contractor_pricing",
    "log_quotes",
    "configure_logging",
]

"""
Shared utility functions.

This package contains utility code used across the loader, resolver
and report stages.
"""

from .logging import (
    JsonlFormatter,
    close_logging,
    log_event,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "close_logging",
    "log_event",
    "JsonlFormatter",
]

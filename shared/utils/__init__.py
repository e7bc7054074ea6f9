"""
Shared utilities for the account service
"""

from .logger import setup_logging
from .formatting import format_date

__all__ = [
    "setup_logging",
    "format_date",
]

__version__ = "1.0.0"

"""
Utility modules for the comparable finder.
"""

from .formatting import format_currency, format_area
from .config import Config
from .logging_config import configure_logging

__all__ = ["format_currency", "format_area", "Config", "configure_logging"]

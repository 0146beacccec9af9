"""CLI helpers for simpdb.

Option parsing callbacks and stderr message emitters with emoji to ASCII
fallbacks.
"""

from .log_level_parser import parse_log_level
from .messages import success, warn

__all__ = ["parse_log_level", "success", "warn"]

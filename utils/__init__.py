"""
Utility modules for the asset register.
"""

from .formatting import format_coordinate, utc_timestamp
from .config import Config

__all__ = ["format_coordinate", "utc_timestamp", "Config"]

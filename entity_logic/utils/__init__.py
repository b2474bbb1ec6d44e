"""
Shared utilities: logging and datetime normalization.
"""

from .logger import (
    EntityLogicLogger,
    get_logger,
    setup_logger,
)
from .datetime_utils import (
    ensure_aware,
    normalize_datetime,
    to_instant,
    format_iso_datetime,
)

__all__ = [
    "EntityLogicLogger",
    "get_logger",
    "setup_logger",
    "ensure_aware",
    "normalize_datetime",
    "to_instant",
    "format_iso_datetime",
]

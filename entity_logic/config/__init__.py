"""
Configuration management.
"""

from .config import (
    Config,
    get_config,
    LogConfig,
    FilterConfig,
)

from .constants import (
    DEFAULT_KEY_NAMESPACES,
    KEY_PATTERN,
    ISO_DATE_PREFIX,
    build_key_pattern,
    validate_key_namespaces,
)

__all__ = [
    # Config classes
    "Config",
    "get_config",
    "LogConfig",
    "FilterConfig",
    # Constants
    "DEFAULT_KEY_NAMESPACES",
    "KEY_PATTERN",
    "ISO_DATE_PREFIX",
    "build_key_pattern",
    "validate_key_namespaces",
]

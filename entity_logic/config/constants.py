"""
Centralized constants for entity-logic.

Property key namespaces, date string patterns and the environment
variable names read by Config live here so that the schema validator,
the property validator and the config loader agree on them.
"""

import re
from typing import Iterable, List, Tuple


# ==================== Property Key Namespaces ====================

# Every schema property key is "<namespace>.<segment>[.<segment>...]"
DEFAULT_KEY_NAMESPACES: Tuple[str, ...] = ("meta", "inventory", "derived", "photo")

_SEGMENT = r"[A-Za-z0-9_\-]+"


def build_key_pattern(namespaces: Iterable[str] = DEFAULT_KEY_NAMESPACES) -> re.Pattern:
    """
    Compile the regex that schema property keys must match.

    Args:
        namespaces: Allowed leading key segments

    Returns:
        Compiled pattern anchored at both ends

    Raises:
        ValueError: If no namespace is given
    """
    names = validate_key_namespaces(namespaces)
    alternation = "|".join(re.escape(n) for n in names)
    return re.compile(rf"^({alternation})\.{_SEGMENT}(\.{_SEGMENT})*$")


def validate_key_namespaces(namespaces: Iterable[str]) -> List[str]:
    """
    Validate and normalize a list of key namespaces.

    Args:
        namespaces: Namespace names (e.g. "meta", "inventory")

    Returns:
        List of stripped namespace names, order preserved

    Raises:
        ValueError: If the list is empty or holds an invalid name
    """
    names = [str(n).strip() for n in namespaces if str(n).strip()]
    if not names:
        raise ValueError("At least one property key namespace is required")
    for name in names:
        if not re.fullmatch(_SEGMENT, name):
            raise ValueError(f"Invalid property key namespace: '{name}'")
    return names


KEY_PATTERN = build_key_pattern()


# ==================== Date Values ====================

# Property bags may carry dates as strings; only the date prefix is checked
ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")


# ==================== Environment Variables ====================

ENV_LOG_LEVEL = "ENTITY_LOGIC_LOG_LEVEL"
ENV_LOG_DIR = "ENTITY_LOGIC_LOG_DIR"
ENV_LOG_TO_FILE = "ENTITY_LOGIC_LOG_TO_FILE"
ENV_STRICT_READONLY = "ENTITY_LOGIC_STRICT_READONLY"
ENV_KEY_NAMESPACES = "ENTITY_LOGIC_KEY_NAMESPACES"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

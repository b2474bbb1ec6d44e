"""
Configuration management for entity-logic.
Loads settings from environment variables with sensible defaults.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from .constants import (
    DEFAULT_KEY_NAMESPACES,
    ENV_KEY_NAMESPACES,
    ENV_LOG_DIR,
    ENV_LOG_LEVEL,
    ENV_LOG_TO_FILE,
    ENV_STRICT_READONLY,
    LOG_LEVELS,
    validate_key_namespaces,
)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "INFO"
    log_dir: str = "logs"
    log_to_file: bool = False


@dataclass
class FilterConfig:
    """
    Filter and write-validation settings.

    strict_readonly: When True, an update payload may not include a
        read-only key at all, even with an unchanged value. Off by
        default; kept as a switch for deployments that want it.
    key_namespaces: Allowed leading segments of schema property keys.
    """
    strict_readonly: bool = False
    key_namespaces: Tuple[str, ...] = field(default=DEFAULT_KEY_NAMESPACES)


class Config:
    """
    Central configuration manager.

    Loads configuration from environment variables and provides
    typed access to all settings.
    """

    _instance: Optional['Config'] = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, env_file: str = ".env"):
        if self._initialized:
            return

        # Later files override earlier ones
        for env_name in [".env", env_file]:
            env_path = Path(env_name)
            if env_path.exists():
                load_dotenv(env_path, override=True)

        self.log = self._load_log_config()
        self.filter = self._load_filter_config()

        self._initialized = True

    def _load_log_config(self) -> LogConfig:
        """Load logging configuration from environment."""
        return LogConfig(
            level=os.getenv(ENV_LOG_LEVEL, "INFO").upper(),
            log_dir=os.getenv(ENV_LOG_DIR, "logs"),
            log_to_file=_env_flag(ENV_LOG_TO_FILE),
        )

    def _load_filter_config(self) -> FilterConfig:
        """
        Load filter configuration from environment.

        Environment variables:
        - ENTITY_LOGIC_STRICT_READONLY: Reject read-only keys in updates (default: false)
        - ENTITY_LOGIC_KEY_NAMESPACES: Comma-separated key namespaces
          (default: meta,inventory,derived,photo)
        """
        namespaces_str = os.getenv(ENV_KEY_NAMESPACES, "")
        namespaces = tuple(s.strip() for s in namespaces_str.split(",") if s.strip())

        return FilterConfig(
            strict_readonly=_env_flag(ENV_STRICT_READONLY),
            key_namespaces=namespaces or DEFAULT_KEY_NAMESPACES,
        )

    def reload(self, env_file: str = ".env") -> 'Config':
        """Reload configuration from environment."""
        self._initialized = False
        Config._instance = None
        return Config(env_file)

    def validate(self) -> Tuple[bool, List[str]]:
        """
        Validate configuration values.

        Returns:
            Tuple of (is_valid, list of error messages)
        """
        errors: List[str] = []

        if self.log.level not in LOG_LEVELS:
            errors.append(
                f"{ENV_LOG_LEVEL}={self.log.level!r} is not a log level. "
                f"Use one of: {', '.join(LOG_LEVELS)}"
            )

        try:
            validate_key_namespaces(self.filter.key_namespaces)
        except ValueError as e:
            errors.append(f"{ENV_KEY_NAMESPACES}: {e}")

        return len(errors) == 0, errors


def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()

"""
Logging system for entity-logic.
Provides human-readable console logs with optional file output.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional


# ANSI color codes for terminal output
class Colors:
    RESET = "\033[0m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    BOLD = "\033[1m"


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for console output."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        return f"{color}{super().format(record)}{Colors.RESET}"


class EntityLogicLogger:
    """
    Central logging system for entity-logic.

    Features:
    - Console output with colors
    - Optional dated log file (plain text)
    - Validation failures routed through warning()
    """

    _instance: Optional['EntityLogicLogger'] = None
    _initialized: bool = False

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(
        self,
        log_dir: str = "logs",
        log_level: str = "INFO",
        log_to_file: bool = False,
    ):
        if EntityLogicLogger._initialized:
            return

        self.log_dir = Path(log_dir)
        self.log_to_file = log_to_file
        self.main_logger = self._create_logger("entity_logic", log_level)

        EntityLogicLogger._initialized = True

    def _create_logger(self, name: str, level: str) -> logging.Logger:
        """Create a configured logger instance."""
        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        logger.handlers.clear()

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(ColoredFormatter(
            "%(asctime)s | %(levelname)s | %(message)s",
            datefmt="%H:%M:%S"
        ))
        logger.addHandler(console_handler)

        if self.log_to_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            log_file = self.log_dir / f"entity_logic_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setFormatter(logging.Formatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S"
            ))
            logger.addHandler(file_handler)

        return logger

    def info(self, msg: str, *args, **kwargs):
        """Log info message."""
        self.main_logger.info(msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        """Log debug message."""
        self.main_logger.debug(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        """Log warning message."""
        self.main_logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        """Log error message."""
        self.main_logger.error(msg, *args, **kwargs)

    def rejected(self, kind: str, reason: str, **kwargs):
        """
        Log a rejected schema, condition or property bag.

        Args:
            kind: SCHEMA, CONDITION, PROPERTIES or READONLY
            reason: Error message that is about to be raised
            **kwargs: Additional context (field, operator, index)
        """
        parts = [f"[REJECTED:{kind}]", reason]
        for key, value in kwargs.items():
            if value is not None:
                parts.append(f"{key}={value}")
        self.main_logger.warning(" | ".join(parts))


# Global logger instance
_logger: Optional[EntityLogicLogger] = None


def get_logger() -> EntityLogicLogger:
    """Get or create the global logger instance from the current config."""
    global _logger
    if _logger is None:
        from ..config import get_config

        log_cfg = get_config().log
        _logger = EntityLogicLogger(log_cfg.log_dir, log_cfg.level, log_cfg.log_to_file)
    return _logger


def setup_logger(
    log_dir: str = "logs",
    log_level: str = "INFO",
    log_to_file: bool = False,
) -> EntityLogicLogger:
    """Initialize the logger with custom settings."""
    global _logger
    EntityLogicLogger._initialized = False
    EntityLogicLogger._instance = None
    _logger = EntityLogicLogger(log_dir, log_level, log_to_file)
    return _logger

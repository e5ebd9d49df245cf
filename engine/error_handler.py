"""
Centralized error handling and logging system.

This module provides:
- The package logger (child loggers per module)
- Opt-in file/console handlers for the game executable
- Custom exception types for different error categories
"""
import logging
import traceback
from datetime import datetime
from pathlib import Path
from typing import Optional

LOGGER_NAME = "ship_captain"
DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"

logger = logging.getLogger(LOGGER_NAME)


def get_logger(name: str) -> logging.Logger:
    """Return a child of the package logger, e.g. get_logger("ai")."""
    return logger.getChild(name)


def setup_logging(log_dir: Optional[Path] = None, console_level: int = logging.WARNING) -> None:
    """
    Attach the file and console handlers.

    Only the executable calls this; library code just logs.
    """
    logger.setLevel(logging.DEBUG)

    # Prevent duplicate handlers
    if logger.handlers:
        return

    log_dir = log_dir or DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    # File handler for detailed logs
    log_file = log_dir / f"game_{datetime.now().strftime('%Y%m%d')}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    )

    # Console handler for warnings/errors
    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(
        logging.Formatter('%(levelname)s: %(message)s')
    )

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)


class GameError(Exception):
    """Base exception for game-specific errors."""
    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        self.user_message = user_message or message


class MapDataError(GameError):
    """Map data is missing or malformed; the level cannot start."""
    pass


def log_error(error: Exception, context: str = "") -> None:
    """
    Log an error with context information.

    Args:
        error: The exception that occurred
        context: Where the error occurred (e.g., "load_map", "end_turn")
    """
    error_type = type(error).__name__
    trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    logger.error(f"Error in {context}: {error_type}: {error}\n{trace}")

"""Logging configuration for SPINTABLE.

Logging goes to a file only, never to the terminal, so log records can
not land inside a region that a spinner group is repainting.

Environment Variables:
    SPINTABLE_LOG: Set to "true" to enable logging (default: "false")
    SPINTABLE_LOG_FILE: Path to log file (default: ~/.spintable.log)
"""

import logging
import os
from pathlib import Path

# Environment variable configuration
LOG_ENABLED = os.environ.get("SPINTABLE_LOG", "false").lower() == "true"
LOG_FILE = Path(os.environ.get("SPINTABLE_LOG_FILE", str(Path.home() / ".spintable.log")))

# Module-level logger instance
_logger: logging.Logger | None = None


def setup_logging() -> logging.Logger:
    """Configure logging based on environment variables.

    Creates a logger that writes to the configured log file when
    SPINTABLE_LOG is set to "true". Otherwise, uses a NullHandler
    to suppress all log output.

    Returns:
        Configured logger instance
    """
    global _logger

    if _logger is not None:
        return _logger

    logger = logging.getLogger("spintable")

    # Clear any existing handlers
    logger.handlers.clear()

    if LOG_ENABLED:
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.FileHandler(LOG_FILE)
        handler.setFormatter(
            logging.Formatter(
                "[%(asctime)s] [%(threadName)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    else:
        logger.addHandler(logging.NullHandler())

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Get the configured logger instance.

    Returns:
        The configured logger, creating it if necessary
    """
    global _logger
    if _logger is None:
        return setup_logging()
    return _logger


def log_message(message: str) -> None:
    """Log a message if logging is enabled.

    This is the primary logging function used throughout the package.
    Messages are only written to the log file if SPINTABLE_LOG=true.

    Args:
        message: Message to log
    """
    logger = get_logger()
    logger.info(message)


__all__ = [
    "LOG_ENABLED",
    "LOG_FILE",
    "setup_logging",
    "get_logger",
    "log_message",
]

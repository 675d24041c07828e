"""
Logging module for the chain state migration tool
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

LOGGER_NAME = "chain_migrator"


class EnhancedFormatter(logging.Formatter):
    """
    Formatter that supports a verbose layout and appends migration context
    (category, transaction label, record identity) when a record carries it.
    """

    def __init__(self, fmt=None, datefmt=None, style="%", verbose=False):
        if verbose:
            fmt = "%(asctime)s - %(name)s - %(levelname)s - [%(module)s:%(lineno)d] - %(message)s"
        elif not fmt:
            fmt = "%(asctime)s - %(levelname)s - %(message)s"

        super().__init__(fmt, datefmt, style)
        self.verbose = verbose

    def format(self, record):
        result = super().format(record)

        if self.verbose:
            context = [
                f"{key}={getattr(record, key)}"
                for key in ("category", "label", "identity")
                if getattr(record, key, None)
            ]
            if context:
                result += f" ({', '.join(context)})"

        return result


def setup_main_log_file(output_dir: str) -> logging.FileHandler:
    """
    Set up a file handler that receives every log record of the run.

    Args:
        output_dir: The run output directory

    Returns:
        The attached file handler
    """
    os.makedirs(output_dir, exist_ok=True)

    log_file = os.path.join(output_dir, "migration.log")

    file_handler = logging.FileHandler(log_file, mode="w")
    file_handler.setLevel(logging.DEBUG)  # Always use DEBUG level for file handlers
    file_handler.setFormatter(EnhancedFormatter(verbose=True))

    logger = logging.getLogger(LOGGER_NAME)
    logger.addHandler(file_handler)

    logger.info(f"Main log file created at: {log_file}")
    return file_handler


def setup_logger(
    verbose: bool = False, output_dir: Optional[str] = None
) -> logging.Logger:
    """
    Configure the chain_migrator logger for a run and return it.

    Args:
        verbose: Console shows DEBUG when True, INFO otherwise
        output_dir: When given, also write migration.log there

    Returns:
        The configured logger
    """
    logger = logging.getLogger(LOGGER_NAME)

    # Drop handlers left by a previous setup
    if logger.handlers:
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()

    logger.setLevel(logging.DEBUG)  # Always set logger to DEBUG to capture all logs

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(EnhancedFormatter(verbose=verbose))
    logger.addHandler(console_handler)

    if output_dir:
        setup_main_log_file(output_dir)

    return logger


def log_with_context(level: int, message: str, **kwargs: Any) -> None:
    """
    Log ``message`` with migration context attached as record attributes.

    Args:
        level: The logging level (e.g., logging.INFO)
        message: The log message
        **kwargs: Additional context to include in the log record, typically
            ``category``, ``label`` and ``identity``. ``exc_info`` is passed
            through to the logger.
    """
    exc_info = kwargs.pop("exc_info", None)

    extras = {k: v for k, v in kwargs.items() if v is not None}

    logger = logging.getLogger(LOGGER_NAME)
    logger.log(level, message, extra=extras, exc_info=exc_info)


def get_logger() -> logging.Logger:
    """Get the chain_migrator logger, creating it with defaults if needed."""
    migrator_logger = logging.getLogger(LOGGER_NAME)
    if not migrator_logger.handlers:
        migrator_logger.setLevel(logging.INFO)
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)
        handler.setFormatter(EnhancedFormatter())
        migrator_logger.addHandler(handler)
    return migrator_logger


# Reconfigured by setup_logger at the start of each command
logger = get_logger()

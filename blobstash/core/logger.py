"""
@file: logger.py
@description:
This module provides the logging setup for the blobstash service, supporting:
- Color-coded console output for different log levels
- Consistent logging format across the service
- A single level switch for every component logger

All component loggers live under the `blobstash` logger and propagate to it,
so the console handler and the level are configured in one place.

@dependencies:
- logging: Standard Python logging module
- colorama: For cross-platform colored terminal text

@notes:
- The initial level comes from the LOG_LEVEL environment variable; the
  lifecycle code applies the validated setting again once settings load
- Colors are stripped by colorama when output is not a terminal
"""

import logging
import os
import sys
from typing import Any, Optional

from colorama import Back, Fore, Style, init

init()

ROOT_LOGGER_NAME = "blobstash"
DEFAULT_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class ColoredFormatter(logging.Formatter):
    """
    Formatter that colors the level name based on the record's level.

    Only the rendered string is colored; the record itself is left untouched
    so other handlers see the plain values.
    """

    COLORS = {
        logging.DEBUG: Fore.CYAN,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.WHITE + Back.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelno, "")
        original_levelname = record.levelname
        record.levelname = f"{color}{original_levelname:<8}{Style.RESET_ALL}"
        try:
            return super().format(record)
        finally:
            record.levelname = original_levelname


def get_console_handler() -> logging.StreamHandler:
    """
    Create and configure a console handler with colored output.

    Returns:
        logging.StreamHandler: Configured console handler
    """
    console_handler = logging.StreamHandler(sys.stdout)
    log_format = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    console_handler.setFormatter(
        ColoredFormatter(log_format, datefmt="%Y-%m-%d %H:%M:%S")
    )
    return console_handler


def _resolve_level(level: str) -> int:
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    return numeric_level


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Attach the console handler to the service root logger and set its level.

    Safe to call more than once; the handler is only added the first time.

    Args:
        level: The logging level name. If None, uses LOG_LEVEL from the environment.

    Returns:
        logging.Logger: The service root logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        root.addHandler(get_console_handler())
        root.propagate = False
    if level is None:
        # An invalid LOG_LEVEL is reported by settings validation, not here.
        numeric_level = getattr(logging, DEFAULT_LOG_LEVEL.upper(), None)
        root.setLevel(numeric_level if isinstance(numeric_level, int) else logging.INFO)
    else:
        root.setLevel(_resolve_level(level))
    return root


def setup_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Get a component logger under the service root logger.

    Args:
        name: The logger name, typically a dotted module path under `blobstash`

    Returns:
        logging.Logger: The component logger
    """
    if not logging.getLogger(ROOT_LOGGER_NAME).handlers:
        configure_logging()
    return logging.getLogger(name)


def log_request_details(logger: logging.Logger, request: Any, response_time: float, status_code: int) -> None:
    """
    Log details about an HTTP request and its response.

    Args:
        logger: The logger to use
        request: The request object (expected to have method and url attributes)
        response_time: The time taken to process the request in seconds
        status_code: The HTTP status code of the response
    """
    method = getattr(request, "method", "UNKNOWN")
    url = getattr(request, "url", "UNKNOWN")
    message = f"{method} {url} completed with status {status_code} in {response_time:.3f}s"

    if status_code >= 500:
        logger.error(message)
    elif status_code >= 400:
        logger.warning(message)
    else:
        logger.info(message)


logger = setup_logger()

__all__ = ["configure_logging", "setup_logger", "logger", "log_request_details"]

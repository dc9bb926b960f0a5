# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Logging configuration utilities for the inventory tool.

This module provides centralized logging configuration: a console handler for
progress messages, plus the two run artifacts that sit next to the report:
- <report>.log     full DEBUG log of the run
- <report>.errors  WARNING and above, including stderr of failed commands
"""

import logging
import sys
from pathlib import Path
from typing import Tuple, Union

from ..core.process import COMMAND_STDERR_ATTR

# Default logging format for log files
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"
# Console format, mirrors the level tags users see in the terminal
CONSOLE_LOG_FORMAT = "[%(levelname)s] %(message)s"

ERROR_LOG_SUFFIX = ".errors"
DEBUG_LOG_SUFFIX = ".log"

_LEVEL_TAGS = {"WARNING": "WARN", "CRITICAL": "ERROR"}


class ConsoleFormatter(logging.Formatter):
    """Formatter using short level tags on the console."""

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        record.levelname = _LEVEL_TAGS.get(original, original)
        try:
            return super().format(record)
        finally:
            record.levelname = original


class InventoryFileHandler(logging.FileHandler):
    """File handler for run artifacts, so they can be told apart from other handlers."""

    pass


def _error_log_filter(record: logging.LogRecord) -> bool:
    """Warnings and above, plus stderr captured from commands that succeeded."""
    return record.levelno >= logging.WARNING or getattr(record, COMMAND_STDERR_ATTR, False)


def configure_logging(debug: bool = False) -> None:
    """
    Configure the console handler.

    Args:
        debug: Whether to display DEBUG level logs on the console

    Note:
        INFO level progress messages are shown by default. File handlers
        always capture DEBUG regardless of the console level.
    """
    remove_log_handlers()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    console_handler = None
    for handler in root_logger.handlers:
        if isinstance(handler, logging.StreamHandler) and getattr(handler, "stream", None) is sys.stdout:
            console_handler = handler
            break

    if console_handler is None:
        console_handler = logging.StreamHandler(sys.stdout)
        root_logger.addHandler(console_handler)

    console_handler.setFormatter(ConsoleFormatter(CONSOLE_LOG_FORMAT))
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)


def get_log_file_paths(report_path: Union[str, Path]) -> Tuple[Path, Path]:
    """
    Get the error log and debug log paths belonging to a report.

    Args:
        report_path: Path of the uncompressed report file

    Returns:
        Tuple[Path, Path]: (error_log, debug_log)
    """
    report_path = Path(report_path)
    return (
        report_path.with_name(report_path.name + ERROR_LOG_SUFFIX),
        report_path.with_name(report_path.name + DEBUG_LOG_SUFFIX),
    )


def add_file_log_handlers(report_path: Union[str, Path]) -> Tuple[Path, Path]:
    """
    Attach the error log and debug log handlers for a report.

    Args:
        report_path: Path of the uncompressed report file

    Returns:
        Tuple[Path, Path]: (error_log, debug_log)
    """
    error_log, debug_log = get_log_file_paths(report_path)
    error_log.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter(DEFAULT_LOG_FORMAT)

    debug_handler = InventoryFileHandler(debug_log, mode="a", encoding="utf-8")
    debug_handler.setLevel(logging.DEBUG)
    debug_handler.setFormatter(formatter)
    root_logger.addHandler(debug_handler)

    error_handler = InventoryFileHandler(error_log, mode="a", encoding="utf-8")
    error_handler.setLevel(logging.DEBUG)
    error_handler.addFilter(_error_log_filter)
    error_handler.setFormatter(formatter)
    root_logger.addHandler(error_handler)

    return error_log, debug_log


def remove_log_handlers() -> None:
    """
    Remove run file handlers from the root logger to avoid duplicates when reconfiguring.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if isinstance(handler, InventoryFileHandler):
            root_logger.removeHandler(handler)
            handler.close()


def cleanup_logging() -> None:
    """
    Clean up logging handlers on application exit.

    This function should be called when the application is shutting down
    to ensure all log files are flushed and closed.
    """
    remove_log_handlers()

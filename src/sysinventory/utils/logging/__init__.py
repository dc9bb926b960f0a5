# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Logging utilities package.

Provides utilities for logging configuration and the console and file
handlers of an inventory run.
"""

from .logging_config import *

__all__ = [
    # Logging configuration
    "configure_logging",
    # Handler management
    "add_file_log_handlers",
    "get_log_file_paths",
    "remove_log_handlers",
    "cleanup_logging",
    # Formatters
    "ConsoleFormatter",
    "InventoryFileHandler",
    # Constants
    "DEFAULT_LOG_FORMAT",
    "CONSOLE_LOG_FORMAT",
    "ERROR_LOG_SUFFIX",
    "DEBUG_LOG_SUFFIX",
]

# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Core utilities package.

This package contains core functionality for the inventory tool including:
- External command execution
- Run-scoped temporary storage
- Shared interrupt state
- Exception types
"""

from .errors import CompressionError, ConfigError, InventoryError, PreflightError
from .process import (
    CommandExecutor,
    CommandResult,
    check_command_available,
    get_executor,
    run_command,
)
from .workspace import InventoryWorkspace

__all__ = [
    "CommandExecutor",
    "CommandResult",
    "check_command_available",
    "get_executor",
    "run_command",
    "InventoryWorkspace",
    "InventoryError",
    "PreflightError",
    "ConfigError",
    "CompressionError",
]

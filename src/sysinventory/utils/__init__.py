# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Utility modules for the inventory tool.

This package is organized into focused sub-packages:
- core: Command execution, temporary workspace, shared state and errors
- logging: Logging configuration and run log files
- config: Run configuration and package categories
- system: Preflight checks, desktop entries and the command cache
- reporting: Report sections, assembly and finalization
- cli: Argument parsing, interrupt handling and commands
"""

from . import core, logging, config, system, reporting, cli

__all__ = [
    "core",
    "logging",
    "config",
    "system",
    "reporting",
    "cli",
]

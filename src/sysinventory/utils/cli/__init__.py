# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
CLI utilities package.

This package contains the argument parser, interrupt handling and the
inventory command, keeping the main CLI file lightweight.
"""

from .handlers import handle_interrupt, interrupt_exit_code, interrupt_handlers
from .parsers import create_argument_parser

__all__ = [
    "handle_interrupt",
    "interrupt_handlers",
    "interrupt_exit_code",
    "create_argument_parser",
]

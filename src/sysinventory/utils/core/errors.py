# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Exception types for the inventory tool.
"""


class InventoryError(Exception):
    """Base class for inventory errors."""

    pass


class PreflightError(InventoryError):
    """Raised when the system cannot be inventoried at all."""

    pass


class ConfigError(InventoryError):
    """Raised for invalid configuration data such as a bad category pattern."""

    pass


class CompressionError(InventoryError):
    """Raised when the report cannot be compressed."""

    pass

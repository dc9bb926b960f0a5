# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
CLI command implementations package.

Commands are imported lazily through get_command_function() so that parsing
arguments and printing help never imports the reporting stack.
"""


def get_command_function(command_name: str):
    """
    Dynamically import and return a command function.

    Args:
        command_name: Name of the command to import

    Returns:
        The command function
    """
    if command_name == "run_inventory":
        from .inventory import run_inventory

        return run_inventory
    else:
        raise ValueError(f"Unknown command: {command_name}")


__all__ = ["get_command_function"]

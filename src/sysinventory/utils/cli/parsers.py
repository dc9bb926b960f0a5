# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Argument parser setup for the inventory CLI.

Keeps all argument definitions in one place.
"""

import argparse

from sysinventory.utils.config import get_dist_version, get_project_name


def get_cli_name() -> str:
    """Get the CLI command name."""
    return get_project_name().lower()


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser.

    Returns:
        argparse.ArgumentParser: Configured parser ready for argument parsing
    """
    cli_name = get_cli_name()

    parser = argparse.ArgumentParser(
        prog=cli_name,
        description="Generate a comprehensive inventory of installed software and hardware on a Fedora desktop.",
        epilog=f"""
EXAMPLES:
  {cli_name}                    # Full inventory
  {cli_name} -g                 # Gaming packages only
  {cli_name} -d                 # Dry run mode

OUTPUT:
  Report: <output-dir>/system_inventory_<YYYYmmdd_HHMMSS>.txt[.gz]
  Errors: <report>.txt.errors
  Log:    <report>.txt.log
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--version", action="version", version=f"{get_dist_version()}")

    scope_group = parser.add_argument_group("SCOPE OPTIONS")
    scope_group.add_argument("--gaming", "-g", action="store_true", help="Focus on gaming packages only")
    scope_group.add_argument(
        "--no-hardware", "-n", dest="no_hardware", action="store_true", help="Skip hardware information"
    )

    output_group = parser.add_argument_group("OUTPUT OPTIONS")
    output_group.add_argument(
        "--uncompressed", "-u", action="store_true", help="Don't compress output file"
    )
    output_group.add_argument(
        "--output-dir",
        "-o",
        metavar="DIRECTORY",
        help="Directory for the report and its logs (default: $SYSINVENTORY_OUTPUT_DIR or your home directory)",
    )

    run_group = parser.add_argument_group("RUN OPTIONS")
    run_group.add_argument(
        "--dry-run", "-d", dest="dry_run", action="store_true", help="Show what would be done without executing"
    )
    run_group.add_argument("--debug", action="store_true", help="Display debug output on the console")

    return parser

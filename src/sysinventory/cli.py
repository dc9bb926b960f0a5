# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Command Line Interface for the system inventory tool.

This is the main CLI entry point. The inventory itself lives in
utils.cli.commands.inventory.
"""

import atexit
import logging
import sys
from typing import List, Optional

from sysinventory.utils.cli.commands import get_command_function
from sysinventory.utils.cli.parsers import create_argument_parser
from sysinventory.utils.logging import cleanup_logging, configure_logging


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Arguments to parse; defaults to sys.argv[1:]

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    configure_logging(debug=args.debug)

    # Close log files on exit
    atexit.register(cleanup_logging)

    try:
        run_inventory = get_command_function("run_inventory")
        return run_inventory(
            gaming_only=args.gaming,
            include_hardware=not args.no_hardware,
            compress=not args.uncompressed,
            dry_run=args.dry_run,
            output_dir=args.output_dir,
            debug=args.debug,
        )
    except Exception as e:
        logger = logging.getLogger(__name__)
        logger.error(f"Command execution failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Inventory command implementation.

Runs preflight checks, loads the command cache inside a temporary workspace,
assembles the report and finalizes it.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from sysinventory.utils.cli.handlers import interrupt_exit_code, interrupt_handlers
from sysinventory.utils.config import (
    RunConfig,
    get_default_output_dir,
    load_categories,
    report_path_for,
)
from sysinventory.utils.core import InventoryWorkspace, shared_state
from sysinventory.utils.core.errors import ConfigError, PreflightError
from sysinventory.utils.logging import add_file_log_handlers, get_log_file_paths, remove_log_handlers
from sysinventory.utils.reporting import SECTIONS, ReportAssembler, completion_summary, finalize_report
from sysinventory.utils.reporting.assembler import SUMMARY_SOURCES
from sysinventory.utils.system import BASE_SOURCES, CommandCache, run_preflight
from sysinventory.utils.system.cache import Runner
from sysinventory.utils.system.desktop import DEFAULT_DESKTOP_DIRS
from sysinventory.utils.system.preflight import OS_RELEASE_PATH

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def describe_plan(config: RunConfig, cache: CommandCache) -> str:
    """
    Describe what a run with this configuration would do.

    Args:
        config: Run configuration
        cache: Cache whose sources would be loaded; nothing is executed

    Returns:
        str: Multi-line plan
    """
    report_path = config.report_path
    final_path = report_path.with_name(report_path.name + ".gz") if config.compress else report_path
    error_log, debug_log = get_log_file_paths(report_path)

    lines = [
        "[DRY RUN] No inventory commands will be executed and no files will be written.",
        "",
        f"Package manager: {config.package_manager}",
        f"Report: {final_path}",
        f"Errors: {error_log}",
        f"Log:    {debug_log}",
        "",
        "Sections:",
    ]

    sources: List[str] = list(BASE_SOURCES)
    for section in SECTIONS:
        if section.predicate(config):
            status = ""
        elif section.include_if is not None:
            status = " (only if gaming-related Flatpak apps are installed)"
        else:
            lines.append(f"  - SECTION {section.number}: {section.title} (skipped)")
            continue
        lines.append(f"  + {section.heading}{status}")
        sources.extend(section.sources)
    lines.append("  + SECTION 10: SYSTEM SUMMARY")
    sources.extend(SUMMARY_SOURCES)

    lines += ["", "Commands:"]
    lines += [f"  {line}" for line in cache.describe(dict.fromkeys(sources))]
    return "\n".join(lines) + "\n"


def run_inventory(
    gaming_only: bool = False,
    include_hardware: bool = True,
    compress: bool = True,
    dry_run: bool = False,
    output_dir: Optional[str] = None,
    debug: bool = False,
    os_release_path: str = OS_RELEASE_PATH,
    runner: Optional[Runner] = None,
    desktop_dirs: Iterable[Path] = DEFAULT_DESKTOP_DIRS,
) -> int:
    """
    Generate the system inventory report.

    Args:
        gaming_only: Restrict the report to gaming-related content
        include_hardware: Include the hardware inventory section
        compress: Gzip the finished report
        dry_run: Only print the plan
        output_dir: Report directory; defaults to $SYSINVENTORY_OUTPUT_DIR or home
        debug: Whether to log tracebacks of unexpected errors
        os_release_path: OS identification file
        runner: Command runner override
        desktop_dirs: Directories scanned for desktop entries

    Returns:
        int: Exit code (0 for success, 1 for failure, 128 + signal number when
        interrupted, i.e. 130 for Ctrl-C)
    """
    shared_state.reset()
    timestamp = datetime.now()
    output_dir = Path(output_dir).expanduser() if output_dir else get_default_output_dir()
    report_path = report_path_for(output_dir, timestamp)
    error_log, debug_log = get_log_file_paths(report_path)

    try:
        with interrupt_handlers():
            if not dry_run:
                add_file_log_handlers(report_path)

            logger.info("Starting system inventory scan...")
            logger.debug(f"Run started with PID {os.getpid()}")

            os_release, package_manager = run_preflight(os_release_path)
            config = RunConfig(
                gaming_only=gaming_only,
                include_hardware=include_hardware,
                compress=compress,
                dry_run=dry_run,
                output_dir=output_dir,
                timestamp=timestamp,
                package_manager=package_manager,
                os_release=os_release,
                categories=load_categories(),
            )

            if dry_run:
                cache = CommandCache(package_manager, runner=runner, desktop_dirs=desktop_dirs)
                print(describe_plan(config, cache))
                return EXIT_SUCCESS

            with InventoryWorkspace() as workspace:
                cache = CommandCache(package_manager, workspace=workspace, runner=runner, desktop_dirs=desktop_dirs)
                cache.load_base()
                report = ReportAssembler(config, cache).assemble()

            logger.info("Inventory generation complete!")
            final_path = finalize_report(config, report.text())
            print(completion_summary(final_path, error_log, debug_log))
            return EXIT_SUCCESS

    except (PreflightError, ConfigError) as e:
        logger.error(str(e))
        return EXIT_FAILURE
    except KeyboardInterrupt:
        source = shared_state.INTERRUPT_SIGNAL_NAME if shared_state.INTERRUPT_OCCURRED else "user"
        logger.error(f"Inventory interrupted by {source}")
        return interrupt_exit_code()
    except Exception as e:
        logger.error(f"Inventory failed: {e}", exc_info=debug)
        if not dry_run:
            logger.error(f"Check error log: {error_log}")
        return EXIT_FAILURE
    finally:
        remove_log_handlers()

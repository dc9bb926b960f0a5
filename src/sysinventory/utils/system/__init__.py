# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
System information utilities package.

This package provides preflight detection, desktop entry discovery and the
run-once cache of inventory command output.
"""

from . import cache, desktop, preflight
from .cache import BASE_SOURCES, CommandCache, Source, build_sources
from .desktop import DesktopEntry, parse_desktop_entry, scan_desktop_entries
from .preflight import detect_package_manager, parse_os_release, read_os_release, run_preflight

__all__ = [
    # Main classes
    "CommandCache",
    "Source",
    "DesktopEntry",
    # Main functions
    "build_sources",
    "scan_desktop_entries",
    "parse_desktop_entry",
    "run_preflight",
    "read_os_release",
    "parse_os_release",
    "detect_package_manager",
    # Constants
    "BASE_SOURCES",
    # Submodules
    "cache",
    "desktop",
    "preflight",
]

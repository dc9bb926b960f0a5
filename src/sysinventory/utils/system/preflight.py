# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Preflight checks run before any inventory command.

Detects the distribution from /etc/os-release and the DNF-compatible package
manager. Both are required; failure to find either aborts the run.
"""

import logging
import shlex
from typing import Dict, Tuple

from ..core.errors import PreflightError
from ..core.process import check_command_available

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = "/etc/os-release"

# Preferred first: dnf5 replaces dnf on current Fedora releases
PACKAGE_MANAGERS = ("dnf5", "dnf")

SUPPORTED_DISTRIBUTION = "fedora"


def parse_os_release(text: str) -> Dict[str, str]:
    """
    Parse os-release content into a dictionary.

    Args:
        text: Content of an os-release file

    Returns:
        Dict mapping keys such as ID or VERSION_ID to unquoted values
    """
    os_release = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        try:
            parts = shlex.split(value)
            value = parts[0] if parts else ""
        except ValueError:
            value = value.strip("\"'")
        os_release[key.strip()] = value
    return os_release


def read_os_release(path: str = OS_RELEASE_PATH) -> Dict[str, str]:
    """
    Read and parse the OS identification file.

    Raises:
        PreflightError: If the file is missing or unreadable
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except FileNotFoundError:
        raise PreflightError(f"{path} not found. Cannot detect distribution.")
    except OSError as e:
        raise PreflightError(f"Cannot read {path}: {e}")
    return parse_os_release(content)


def detect_package_manager() -> str:
    """
    Detect the DNF-compatible package manager binary.

    Returns:
        str: "dnf5" or "dnf"

    Raises:
        PreflightError: If neither is installed
    """
    for candidate in PACKAGE_MANAGERS:
        if check_command_available(candidate):
            return candidate
    raise PreflightError("Neither dnf5 nor dnf found. Cannot continue.")


def run_preflight(os_release_path: str = OS_RELEASE_PATH) -> Tuple[Dict[str, str], str]:
    """
    Run all preflight checks.

    Returns:
        Tuple of (os_release, package_manager)

    Raises:
        PreflightError: On any unrecoverable condition
    """
    os_release = read_os_release(os_release_path)

    distribution = os_release.get("ID", "unknown")
    if distribution != SUPPORTED_DISTRIBUTION:
        logger.warning(f"Non-Fedora system detected: {os_release.get('NAME', 'unknown')}")
        logger.warning("Some features may not work correctly.")

    package_manager = detect_package_manager()
    logger.info(f"Using package manager: {package_manager}")
    return os_release, package_manager

# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Utilities for handling configuration in the inventory tool.

The run configuration is an immutable value built once from the command line
and passed into every section predicate and builder. Package category
patterns are data and live in a YAML file shipped with the package.
"""

import importlib.metadata
import logging
import os
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from ..core.errors import ConfigError

logger = logging.getLogger(__name__)

PROJECT_NAME = "sysinventory"
REPORT_PREFIX = "system_inventory"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

OUTPUT_DIR_ENV = "SYSINVENTORY_OUTPUT_DIR"
CATEGORIES_ENV = "SYSINVENTORY_CATEGORIES"

DEFAULT_CATEGORIES_FILE = Path(__file__).resolve().parent.parent.parent / "configs" / "categories.yml"


@dataclass(frozen=True)
class Category:
    """A named package filter used to build one sub-section of the package listing."""

    name: str
    pattern: str
    skip_in_gaming: bool = False
    regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        try:
            compiled = re.compile(self.pattern, re.IGNORECASE)
        except re.error as e:
            raise ConfigError(f"Invalid pattern for category '{self.name}': {e}")
        object.__setattr__(self, "regex", compiled)

    def matches(self, line: str) -> bool:
        return self.regex.search(line) is not None


@dataclass(frozen=True)
class RunConfig:
    """
    Immutable configuration of one inventory run.

    Attributes:
        gaming_only: Restrict the report to gaming-related content
        include_hardware: Include the hardware inventory section
        compress: Gzip the finished report
        dry_run: Only describe what would be done
        output_dir: Directory receiving the report and its logs
        timestamp: Run start time, used for file naming and the header
        package_manager: Detected DNF-compatible binary ("dnf5" or "dnf")
        os_release: Parsed /etc/os-release key/value pairs
        categories: Package categories for the categorized listing
    """

    gaming_only: bool = False
    include_hardware: bool = True
    compress: bool = True
    dry_run: bool = False
    output_dir: Path = field(default_factory=Path.home)
    timestamp: datetime = field(default_factory=datetime.now)
    package_manager: str = "dnf"
    os_release: Mapping[str, str] = field(default_factory=dict)
    categories: Tuple[Category, ...] = ()

    @property
    def report_path(self) -> Path:
        """Path of the uncompressed report."""
        return report_path_for(self.output_dir, self.timestamp)

    @property
    def distribution(self) -> str:
        return self.os_release.get("ID", "unknown")

    @property
    def distribution_name(self) -> str:
        return self.os_release.get("NAME", "unknown")

    @property
    def distribution_version(self) -> str:
        return self.os_release.get("VERSION_ID", "unknown")


def report_path_for(output_dir: Path, timestamp: datetime) -> Path:
    """Timestamped report path inside an output directory."""
    return Path(output_dir) / f"{REPORT_PREFIX}_{timestamp.strftime(TIMESTAMP_FORMAT)}.txt"


def get_project_name() -> str:
    """Get the project name."""
    return PROJECT_NAME


def get_dist_version(dist: str = PROJECT_NAME) -> str:
    """Get the installed version of a distribution."""
    try:
        return importlib.metadata.version(dist)
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def get_default_output_dir() -> Path:
    """
    Get the default report directory.

    Returns:
        Path: $SYSINVENTORY_OUTPUT_DIR if set, otherwise the user's home directory
    """
    override = os.environ.get(OUTPUT_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home()


def load_yaml_config(config_path: str) -> Dict[str, Any]:
    """
    Load YAML configuration file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Dict containing the configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigError: If config file is invalid YAML
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as file:
            config = yaml.safe_load(file)
            return config if config is not None else {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}")


def load_categories(config_path: Optional[str] = None) -> Tuple[Category, ...]:
    """
    Load package categories from YAML.

    The file holds a top-level ``categories`` list; each entry has a ``name``,
    a ``pattern`` (case-insensitive regex) and an optional ``skip_in_gaming`` flag.

    Args:
        config_path: Alternate category file; defaults to $SYSINVENTORY_CATEGORIES
            or the packaged categories.yml

    Returns:
        Tuple of categories in file order
    """
    if config_path is None:
        config_path = os.environ.get(CATEGORIES_ENV) or str(DEFAULT_CATEGORIES_FILE)

    logger.debug(f"Loading package categories from: {config_path}")
    config = load_yaml_config(config_path)
    if not isinstance(config, dict):
        raise ConfigError(f"Expected a mapping at the top of {config_path}")

    entries: List[Dict[str, Any]] = config.get("categories") or []
    if not isinstance(entries, list):
        raise ConfigError(f"'categories' must be a list in {config_path}")

    categories = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict) or not entry.get("name") or not entry.get("pattern"):
            raise ConfigError(f"Category #{index + 1} in {config_path} needs a name and a pattern")
        categories.append(
            Category(
                name=str(entry["name"]),
                pattern=str(entry["pattern"]),
                skip_in_gaming=bool(entry.get("skip_in_gaming", False)),
            )
        )

    logger.debug(f"Loaded {len(categories)} package categories")
    return tuple(categories)

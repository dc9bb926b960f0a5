# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Report section definitions.

Each section is a numbered block of the report with a flag-based predicate,
the cache sources it consumes and a pure builder turning those cached results
into text. Section numbers are fixed: a skipped section leaves a gap instead
of renumbering the ones after it.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from ..config import Category, RunConfig
from ..core.process import CommandResult
from ..system import cache as src
from ..system.desktop import DesktopEntry
from .formatter import block, subsection

logger = logging.getLogger(__name__)

Results = Mapping[str, Any]
Builder = Callable[[RunConfig, Results], str]

GAMING_FLATPAK_PATTERN = re.compile(r"steam|proton|lutris|gaming", re.IGNORECASE)
CPU_FIELDS_PATTERN = re.compile(r"Model name|Architecture|CPU\(s\)|Thread|Core|Socket|MHz")
GPU_PATTERN = re.compile(r"vga|3d|display", re.IGNORECASE)

TOP_PACKAGE_COUNT = 20


@dataclass(frozen=True)
class Section:
    """
    One numbered report section.

    Attributes:
        number: Fixed position in the report
        title: Banner title
        sources: Cache sources handed to the builder
        builder: Pure function (config, results) -> text
        predicate: Flag check deciding whether the section runs
        include_if: Optional data check that can enable a section the
            predicate rejected; receives the loaded base sources
        progress: Terminal message shown while the section is built
    """

    number: int
    title: str
    sources: Tuple[str, ...]
    builder: Builder
    predicate: Callable[[RunConfig], bool] = lambda config: True
    include_if: Optional[Callable[[Results], bool]] = None
    progress: str = ""

    @property
    def heading(self) -> str:
        return f"SECTION {self.number}: {self.title}"

    def build(self, config: RunConfig, results: Results) -> str:
        return self.builder(config, results)


def not_gaming_only(config: RunConfig) -> bool:
    return not config.gaming_only


def categorize(lines: Sequence[str], category: Category) -> List[str]:
    """Lines matching a category, sorted and de-duplicated."""
    return sorted({line for line in lines if category.matches(line)})


def snap_package_count(result: CommandResult) -> int:
    """Number of snaps in `snap list` output (first line is the column header)."""
    return max(result.count - 1, 0)


def top_packages_by_size(result: CommandResult, limit: int = TOP_PACKAGE_COUNT) -> List[str]:
    """
    Largest installed packages from `rpm -qa --qf '%{SIZE} %{NAME}'` output.

    Returns:
        Formatted "<name> <size> MB" lines, largest first
    """
    sizes = []
    for line in result.lines:
        parts = line.split(None, 1)
        if len(parts) != 2:
            continue
        try:
            sizes.append((int(parts[0]), parts[1].strip()))
        except ValueError:
            continue
    sizes.sort(key=lambda item: (-item[0], item[1]))
    return [f"{name:<40} {size / 1024 / 1024:10.2f} MB" for size, name in sizes[:limit]]


def _output_or(result: CommandResult, placeholder: str, empty: str = "None found") -> str:
    if not result.success:
        return placeholder + "\n"
    return block(result.lines, empty)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def build_gui_applications(config: RunConfig, results: Results) -> str:
    entries: List[DesktopEntry] = results[src.DESKTOP_ENTRIES]
    out = [f"Total GUI Applications: {len(entries)}", ""]
    if not entries:
        out.append("No GUI applications found.")
        return "\n".join(out) + "\n"

    blocks = sorted({entry.render() for entry in entries if entry.name})
    for rendered in blocks:
        out.append(rendered)
        out.append("")
    return "\n".join(out)


def build_flatpak(config: RunConfig, results: Results) -> str:
    apps: CommandResult = results[src.FLATPAK_APPS]
    if not apps.available:
        return "Flatpak is not installed on this system.\n"
    if apps.failed:
        return "Failed to retrieve Flatpak applications.\n"

    out = [f"Total Flatpak Applications: {apps.count}", ""]
    if apps.count == 0:
        out.append("No Flatpak applications installed.")
        return "\n".join(out) + "\n"

    out.append("Application Name                    | Application ID                              | Version      | Branch")
    out.append("-----------------------------------|---------------------------------------------|--------------|----------")
    text = "\n".join(out) + "\n"
    text += _output_or(results[src.FLATPAK_APP_COLUMNS], "Failed to list Flatpak apps")
    text += "\n--- Flatpak Runtimes ---\n\n"
    text += _output_or(results[src.FLATPAK_RUNTIMES], "Failed to list runtimes")
    return text


def build_snap(config: RunConfig, results: Results) -> str:
    snaps: CommandResult = results[src.SNAP_LIST]
    if not snaps.available:
        return "Snap is not installed on this system.\n"
    if snaps.failed:
        return "Failed to list Snap packages.\n"

    count = snap_package_count(snaps)
    text = f"Total Snap Packages: {count}\n\n"
    if count == 0:
        return text + "No Snap packages installed.\n"
    return text + block(snaps.lines, "No Snap packages installed.")


def build_user_installed(config: RunConfig, results: Results) -> str:
    user: CommandResult = results[src.DNF_USERINSTALLED]
    text = "These are packages explicitly installed by the user (not dependencies).\n\n"
    if user.failed:
        return text + "Failed to retrieve user-installed packages.\n"

    text += f"Total User-Installed Packages: {user.count}\n\n"
    if user.count == 0:
        return text + "No user-installed packages found.\n"

    text += "Package Name                          | Version                    | Repository\n"
    text += "--------------------------------------|----------------------------|------------------\n"
    return text + _output_or(results[src.DNF_USERINSTALLED_TABLE], "Failed to query user packages")


def build_categorized_packages(config: RunConfig, results: Results) -> str:
    installed: CommandResult = results[src.DNF_INSTALLED]
    if installed.failed:
        return "Failed to retrieve installed packages.\n"

    text = f"Total Installed Packages: {installed.count}\n\n"
    if installed.count == 0:
        return text + "No packages found in cache.\n"

    lines = installed.lines
    for index, category in enumerate(config.categories, start=1):
        if config.gaming_only and category.skip_in_gaming:
            continue
        text += subsection(f"5.{index} {category.name}")
        text += block(categorize(lines, category), "None found")
    return text


def build_package_groups(config: RunConfig, results: Results) -> str:
    text = "These are meta-packages that bundle multiple related packages together.\n\n"
    return text + _output_or(results[src.DNF_GROUPS], "Failed to list package groups")


def build_repositories(config: RunConfig, results: Results) -> str:
    return _output_or(results[src.DNF_REPOLIST], "Failed to list repositories")


def _du_lines(result: CommandResult, placeholder: str) -> List[str]:
    return result.lines or [placeholder]


def build_storage(config: RunConfig, results: Results) -> str:
    out = ["--- DNF Package Cache ---"]
    out += _du_lines(results[src.DU_DNF_CACHE], "Cache directory not found")
    out.append("")

    if results[src.FLATPAK_APPS].available:
        out.append("--- Flatpak Storage ---")
        out += _du_lines(results[src.DU_FLATPAK_USER], "No Flatpak user data")
        out += _du_lines(results[src.DU_FLATPAK_SYSTEM], "Unable to calculate system Flatpak storage")
        out.append("")

    if results[src.SNAP_LIST].available:
        out.append("--- Snap Storage ---")
        out += _du_lines(results[src.DU_SNAP], "Unable to calculate")
        out.append("")

    out.append(f"--- Top {TOP_PACKAGE_COUNT} Largest Installed Packages ---")
    sizes: CommandResult = results[src.RPM_SIZES]
    if sizes.success:
        out += top_packages_by_size(sizes) or ["None found"]
    else:
        out.append("Failed to query package sizes")
    return "\n".join(out) + "\n"


def _hardware_block(result: CommandResult, tool: str, pattern: Optional[re.Pattern] = None) -> List[str]:
    if not result.available:
        return [f"{tool} not available"]
    if not result.success:
        return [f"Failed to run {tool}"]
    lines = result.lines
    if pattern is not None:
        lines = [line for line in lines if pattern.search(line)]
    return lines or ["None found"]


def build_hardware(config: RunConfig, results: Results) -> str:
    out = ["--- CPU Information ---"]
    out += _hardware_block(results[src.LSCPU], "lscpu", CPU_FIELDS_PATTERN)
    out += ["", "--- GPU Information ---"]
    out += _hardware_block(results[src.LSPCI], "lspci", GPU_PATTERN)
    out += ["", "--- Memory Information ---"]
    out += _hardware_block(results[src.FREE], "free")
    out += ["", "--- Disk Information ---"]
    out += _hardware_block(results[src.LSBLK], "lsblk")
    out += ["", "--- USB Devices ---"]
    out += _hardware_block(results[src.LSUSB], "lsusb")
    out += ["", "--- Network Interfaces ---"]
    out += _hardware_block(results[src.IP_ADDR], "ip")
    return "\n".join(out) + "\n"


def _has_gaming_flatpaks(results: Results) -> bool:
    apps: CommandResult = results[src.FLATPAK_APPS]
    return bool(GAMING_FLATPAK_PATTERN.search(apps.stdout))


SECTIONS: Tuple[Section, ...] = (
    Section(
        1,
        "GUI APPLICATIONS",
        (src.DESKTOP_ENTRIES,),
        build_gui_applications,
        predicate=not_gaming_only,
        progress="Scanning desktop applications...",
    ),
    Section(
        2,
        "FLATPAK APPLICATIONS",
        (src.FLATPAK_APPS, src.FLATPAK_APP_COLUMNS, src.FLATPAK_RUNTIMES),
        build_flatpak,
        predicate=not_gaming_only,
        include_if=_has_gaming_flatpaks,
        progress="Processing Flatpak packages...",
    ),
    Section(3, "SNAP PACKAGES", (src.SNAP_LIST,), build_snap, progress="Scanning Snap packages..."),
    Section(
        4,
        "USER-INSTALLED DNF PACKAGES",
        (src.DNF_USERINSTALLED, src.DNF_USERINSTALLED_TABLE),
        build_user_installed,
        progress="Processing user-installed packages...",
    ),
    Section(
        5,
        "ALL INSTALLED DNF PACKAGES (CATEGORIZED)",
        (src.DNF_INSTALLED,),
        build_categorized_packages,
        progress="Categorizing all DNF packages...",
    ),
    Section(
        6,
        "INSTALLED PACKAGE GROUPS",
        (src.DNF_GROUPS,),
        build_package_groups,
        predicate=not_gaming_only,
        progress="Scanning package groups...",
    ),
    Section(
        7,
        "ENABLED DNF REPOSITORIES",
        (src.DNF_REPOLIST,),
        build_repositories,
        predicate=not_gaming_only,
        progress="Scanning repositories...",
    ),
    Section(
        8,
        "STORAGE USAGE ANALYSIS",
        (
            src.DU_DNF_CACHE,
            src.DU_FLATPAK_USER,
            src.DU_FLATPAK_SYSTEM,
            src.DU_SNAP,
            src.RPM_SIZES,
            src.FLATPAK_APPS,
            src.SNAP_LIST,
        ),
        build_storage,
        progress="Calculating storage usage...",
    ),
    Section(
        9,
        "HARDWARE INVENTORY",
        (src.LSCPU, src.LSPCI, src.FREE, src.LSBLK, src.LSUSB, src.IP_ADDR),
        build_hardware,
        predicate=lambda config: config.include_hardware,
        progress="Scanning hardware...",
    ),
)

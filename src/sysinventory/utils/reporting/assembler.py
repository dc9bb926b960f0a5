# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Report assembly.

Builds the report header, runs every enabled section against the command
cache and appends a summary whose counts are derived from the same cached
results the sections used.
"""

import getpass
import logging
import os
import platform
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..config import RunConfig
from ..core.process import CommandResult
from ..system import cache as src
from ..system.cache import CommandCache
from .formatter import banner, bool_text, rule, title_box
from .sections import SECTIONS, Section, snap_package_count

logger = logging.getLogger(__name__)

REPORT_TITLE = "COMPREHENSIVE SYSTEM INVENTORY"
SUMMARY_NUMBER = 10
SUMMARY_TITLE = "SYSTEM SUMMARY"
SUMMARY_SOURCES = (
    src.DESKTOP_ENTRIES,
    src.FLATPAK_APPS,
    src.SNAP_LIST,
    src.DNF_INSTALLED,
    src.DNF_USERINSTALLED,
)

SECTION_FAILED_PLACEHOLDER = "Failed to generate this section."


def collect_host_facts() -> Dict[str, str]:
    """
    Collect host facts shown in the report header.

    Returns:
        Dict with hostname, kernel, architecture and user
    """
    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        user = os.environ.get("USER", "unknown")

    return {
        "hostname": platform.node() or "unknown",
        "kernel": platform.release() or "unknown",
        "architecture": platform.machine() or "unknown",
        "user": user,
    }


def render_header(config: RunConfig, facts: Dict[str, str]) -> str:
    """Render the fixed report header."""
    generated = config.timestamp.astimezone().strftime("%A, %B %d, %Y at %H:%M:%S %Z")
    lines = [
        title_box(REPORT_TITLE),
        "",
        f"Generated:     {generated}",
        f"Hostname:      {facts.get('hostname', 'unknown')}",
        f"Distribution:  {config.distribution_name} {config.distribution_version}",
        f"Kernel:        {facts.get('kernel', 'unknown')}",
        f"Architecture:  {facts.get('architecture', 'unknown')}",
        f"User:          {facts.get('user', 'unknown')}",
        f"Package Mgr:   {config.package_manager}",
        f"Gaming Focus:  {bool_text(config.gaming_only)}",
        f"Hardware Info: {bool_text(config.include_hardware)}",
        "",
        rule(width=67),
        "",
    ]
    return "\n".join(lines)


@dataclass
class Report:
    """Assembled report content; written once and never modified afterwards."""

    header: str
    sections: List[Tuple[Section, str]] = field(default_factory=list)
    summary: str = ""

    @property
    def section_count(self) -> int:
        """Number of sections in the report, including the summary."""
        return len(self.sections) + 1

    def text(self) -> str:
        parts = [self.header]
        for section, body in self.sections:
            parts.append(banner(section.heading))
            parts.append(body)
        parts.append(banner(f"SECTION {SUMMARY_NUMBER}: {SUMMARY_TITLE}"))
        parts.append(self.summary)
        return "".join(part if part.endswith("\n") else part + "\n" for part in parts)


class ReportAssembler:
    """
    Runs enabled sections in order and assembles the report.
    """

    def __init__(
        self,
        config: RunConfig,
        cache: CommandCache,
        sections: Sequence[Section] = SECTIONS,
        clock: Callable[[], datetime] = datetime.now,
        host_facts: Optional[Dict[str, str]] = None,
    ):
        self.config = config
        self.cache = cache
        self.sections = sorted(sections, key=lambda section: section.number)
        self.clock = clock
        self.host_facts = host_facts

    def enabled_sections(self) -> List[Section]:
        """
        Sections that run for this configuration.

        Data-dependent inclusion checks only see the base sources.
        """
        base = self.cache.load(src.BASE_SOURCES)
        enabled = []
        for section in self.sections:
            if section.predicate(self.config):
                enabled.append(section)
            elif section.include_if is not None and section.include_if(base):
                logger.debug(f"{section.heading} enabled by cached data")
                enabled.append(section)
            else:
                logger.debug(f"Skipping {section.heading}")
        return enabled

    def build_section(self, section: Section) -> str:
        """Build one section; a failing builder degrades to a placeholder."""
        if section.progress:
            logger.info(section.progress)
        results = self.cache.load(section.sources)
        try:
            return section.build(self.config, results)
        except Exception as e:
            logger.error(f"Failed to build {section.heading}: {e}", exc_info=True)
            return SECTION_FAILED_PLACEHOLDER + "\n"

    def build_summary(self, section_count: int) -> str:
        """
        Render the summary from the cached results.

        Args:
            section_count: Total sections in the report, including the summary
        """
        results = self.cache.load(SUMMARY_SOURCES)
        flatpak: CommandResult = results[src.FLATPAK_APPS]
        snaps: CommandResult = results[src.SNAP_LIST]
        installed: CommandResult = results[src.DNF_INSTALLED]
        user: CommandResult = results[src.DNF_USERINSTALLED]

        lines = [
            f"Inventory Generation Completed: {self.clock().strftime('%Y-%m-%d %H:%M:%S')}",
            f"Total Sections: {section_count}",
            "",
            "Quick Statistics:",
            rule(width=16),
            f"  • GUI Applications: {len(results[src.DESKTOP_ENTRIES])}",
        ]
        if flatpak.available:
            lines.append(f"  • Flatpak Apps: {flatpak.count}")
        if snaps.available:
            lines.append(f"  • Snap Packages: {snap_package_count(snaps)}")
        lines.append(f"  • Total DNF Packages: {installed.count}")
        lines.append(f"  • User-Installed Packages: {user.count}")
        lines += [
            "",
            rule(),
            "END OF INVENTORY REPORT".center(len(rule())).rstrip(),
            rule(),
        ]
        return "\n".join(lines) + "\n"

    def assemble(self) -> Report:
        """Build the complete report."""
        facts = self.host_facts if self.host_facts is not None else collect_host_facts()
        report = Report(header=render_header(self.config, facts))

        for section in self.enabled_sections():
            report.sections.append((section, self.build_section(section)))

        report.summary = self.build_summary(report.section_count)
        return report

# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Desktop entry discovery.

Finds launchable GUI applications by scanning freedesktop .desktop files.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_DESKTOP_DIRS = (
    Path("/usr/share/applications"),
    Path.home() / ".local" / "share" / "applications",
)

MAIN_GROUP = "[Desktop Entry]"


@dataclass(frozen=True)
class DesktopEntry:
    """A visible application entry."""

    name: str = ""
    comment: str = ""
    executable: str = ""
    categories: str = ""
    path: Optional[Path] = field(default=None, compare=False)

    def render(self) -> str:
        """Format the entry as an indented report block."""
        lines = [f"• {self.name}"]
        if self.comment:
            lines.append(f"  Description: {self.comment}")
        if self.executable:
            lines.append(f"  Executable: {self.executable}")
        if self.categories:
            lines.append(f"  Categories: {self.categories}")
        return "\n".join(lines)


def _read_main_group(text: str) -> Dict[str, str]:
    """Collect keys of the [Desktop Entry] group, first occurrence wins."""
    values: Dict[str, str] = {}
    in_main = False
    for raw in text.splitlines():
        line = raw.strip()
        if line.startswith("["):
            in_main = line == MAIN_GROUP
            continue
        if not in_main or "=" not in line or line.startswith("#"):
            continue
        key, value = line.split("=", 1)
        values.setdefault(key.strip(), value.strip())
    return values


def parse_desktop_entry(path: Path) -> Optional[DesktopEntry]:
    """
    Parse a .desktop file.

    Returns:
        DesktopEntry for a visible application, None for hidden entries,
        non-application types or unreadable files
    """
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug(f"Skipping unreadable desktop file {path}: {e}")
        return None

    values = _read_main_group(text)
    if values.get("Type") != "Application" or values.get("NoDisplay", "").lower() == "true":
        return None

    exec_line = values.get("Exec", "")
    return DesktopEntry(
        name=values.get("Name", ""),
        comment=values.get("Comment", ""),
        executable=exec_line.split()[0] if exec_line.split() else "",
        categories=values.get("Categories", ""),
        path=path,
    )


def scan_desktop_entries(directories: Iterable[Path] = DEFAULT_DESKTOP_DIRS) -> List[DesktopEntry]:
    """
    Find all visible application entries below the given directories.

    Args:
        directories: Directories searched recursively for *.desktop files

    Returns:
        List of entries ordered by file path
    """
    entries = []
    for directory in directories:
        directory = Path(directory)
        if not directory.is_dir():
            logger.debug(f"Desktop directory not found: {directory}")
            continue
        for path in sorted(directory.rglob("*.desktop")):
            if not path.is_file():
                continue
            entry = parse_desktop_entry(path)
            if entry is not None:
                entries.append(entry)

    logger.debug(f"Found {len(entries)} desktop applications")
    return entries

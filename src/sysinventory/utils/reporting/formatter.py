# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Text formatting helpers for the inventory report.
"""

from typing import Iterable, List

BOX_WIDTH = 68


def banner(title: str) -> str:
    """Boxed section banner surrounded by blank lines."""
    return "\n".join(
        [
            "",
            "╔" + "═" * BOX_WIDTH + "╗",
            f"║ {title:<{BOX_WIDTH - 2}} ║",
            "╚" + "═" * BOX_WIDTH + "╝",
            "",
            "",
        ]
    )


def title_box(title: str) -> str:
    """Boxed, centered title used at the top of the report."""
    blank = "║" + " " * BOX_WIDTH + "║"
    return "\n".join(
        [
            "╔" + "═" * BOX_WIDTH + "╗",
            blank,
            "║" + title.center(BOX_WIDTH) + "║",
            blank,
            "╚" + "═" * BOX_WIDTH + "╝",
        ]
    )


def subsection(title: str) -> str:
    """Sub-section divider surrounded by blank lines."""
    rule = "─" * BOX_WIDTH
    return "\n".join(["", rule, f"  {title}", rule, "", ""])


def rule(char: str = "═", width: int = BOX_WIDTH) -> str:
    return char * width


def block(lines: Iterable[str], placeholder: str) -> str:
    """Join lines, or return the placeholder when there are none."""
    lines: List[str] = [line.rstrip() for line in lines]
    if not lines:
        return placeholder + "\n"
    return "\n".join(lines) + "\n"


def bool_text(flag: bool) -> str:
    """Lower-case "true"/"false" as used in the report header."""
    return "true" if flag else "false"


def format_size(size_bytes: float) -> str:
    """
    Format a byte count the way `du -h` does (1024 based, one decimal below 10).

    Args:
        size_bytes: Size in bytes

    Returns:
        Human readable size such as "4.0K" or "512M"
    """
    units = ["B", "K", "M", "G", "T", "P"]
    size = float(size_bytes)
    for unit in units[:-1]:
        if size < 1024:
            break
        size /= 1024
    else:
        unit = units[-1]

    if unit == "B":
        return f"{int(size)}B"
    return f"{size:.1f}{unit}" if size < 10 else f"{size:.0f}{unit}"

# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Report finalization.

Writes the assembled report to disk, optionally compresses it and formats
the completion summary printed to the terminal.
"""

import gzip
import logging
import shutil
from pathlib import Path
from typing import Union

from ..config import RunConfig
from ..core.errors import CompressionError
from .formatter import format_size, rule

logger = logging.getLogger(__name__)

COMPRESSION_LEVEL = 9


def write_report(text: str, path: Union[str, Path]) -> Path:
    """
    Write the report text once.

    A write that does not complete, including one cut short by an interrupt,
    leaves no partial file behind.

    Args:
        text: Full report content
        path: Destination path

    Returns:
        Path: The written file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        path.write_text(text, encoding="utf-8")
    except BaseException:
        path.unlink(missing_ok=True)
        raise
    logger.debug(f"Report written to {path}")
    return path


def compress_report(path: Union[str, Path]) -> Path:
    """
    Gzip a report and remove the uncompressed file.

    A partial .gz is removed on every failure, interrupts included.

    Args:
        path: Uncompressed report

    Returns:
        Path: The .gz file

    Raises:
        CompressionError: If compression fails; the plain report is left intact
    """
    path = Path(path)
    target = path.with_name(path.name + ".gz")
    try:
        with open(path, "rb") as source, gzip.open(target, "wb", compresslevel=COMPRESSION_LEVEL) as sink:
            shutil.copyfileobj(source, sink)
    except OSError as e:
        target.unlink(missing_ok=True)
        raise CompressionError(f"Failed to compress {path}: {e}")
    except BaseException:
        target.unlink(missing_ok=True)
        raise

    path.unlink()
    return target


def finalize_report(config: RunConfig, text: str) -> Path:
    """
    Write the report and compress it when requested.

    Compression failure falls back to the uncompressed report with a warning.
    An interrupt during compression removes the report entirely.

    Returns:
        Path: Final report location
    """
    report_path = write_report(text, config.report_path)
    if not config.compress:
        return report_path

    logger.info("Compressing output file...")
    try:
        compressed = compress_report(report_path)
    except CompressionError as e:
        logger.warning(f"Compression failed, keeping uncompressed file: {e}")
        return report_path
    except BaseException:
        report_path.unlink(missing_ok=True)
        raise

    logger.info("Output compressed successfully")
    return compressed


def count_report_lines(path: Union[str, Path]) -> int:
    """Count lines of a report, reading through gzip when compressed."""
    path = Path(path)
    opener = gzip.open if path.suffix == ".gz" else open
    with opener(path, "rt", encoding="utf-8") as f:
        return sum(1 for _ in f)


def completion_summary(final_path: Union[str, Path], error_log: Union[str, Path], debug_log: Union[str, Path]) -> str:
    """
    Format the terminal summary shown after a successful run.

    Args:
        final_path: Report location (plain or .gz)
        error_log: Error log path
        debug_log: Debug log path
    """
    final_path = Path(final_path)
    compressed = final_path.suffix == ".gz"

    try:
        size = format_size(final_path.stat().st_size)
    except OSError:
        size = "N/A"
    try:
        line_count = str(count_report_lines(final_path))
    except (OSError, EOFError, UnicodeDecodeError):
        line_count = "N/A"

    viewer, searcher = ("zless", "zgrep") if compressed else ("less", "grep")
    lines = [
        "",
        rule(width=67),
        "✓ System Inventory Complete!",
        rule(width=67),
        "",
        "📄 Report Location:",
        f"   {final_path}",
        "",
        "📊 File Statistics:",
        f"   Size: {size}",
        f"   Lines: {line_count}",
        "",
        "📝 Additional Files:",
        f"   Error Log: {error_log}",
        f"   Debug Log: {debug_log}",
        "",
        "🔍 Quick Commands:",
        f"   View:   {viewer} '{final_path}'",
        f"   Search: {searcher} -i 'search-term' '{final_path}'",
        "",
        "💡 Tip: Run WITHOUT sudo for better user package detection",
        "",
    ]
    return "\n".join(lines)

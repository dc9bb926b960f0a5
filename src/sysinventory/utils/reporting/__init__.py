# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Reporting utilities package.

Provides the report sections, the assembler combining them with a header and
summary, and finalization (writing, compression, completion summary).
"""

from .assembler import Report, ReportAssembler, collect_host_facts, render_header
from .finalizer import completion_summary, compress_report, count_report_lines, finalize_report, write_report
from .sections import SECTIONS, Section, categorize

__all__ = [
    "Report",
    "ReportAssembler",
    "Section",
    "SECTIONS",
    "categorize",
    "collect_host_facts",
    "render_header",
    "completion_summary",
    "compress_report",
    "count_report_lines",
    "finalize_report",
    "write_report",
]

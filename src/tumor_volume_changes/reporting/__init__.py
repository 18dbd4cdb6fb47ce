"""Reporting sub-package.

Orders the aggregated statistics and writes them as JSON or a markdown
summary table.
"""
from tumor_volume_changes.reporting.report import (
    build_report,
    format_stats_table,
    report_to_json,
    write_report,
)

__all__ = [
    "build_report",
    "format_stats_table",
    "report_to_json",
    "write_report",
]

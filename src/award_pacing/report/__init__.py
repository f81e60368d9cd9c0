"""Terminal views, snapshot export and report writers."""

from award_pacing.report.export import export_snapshot
from award_pacing.report.formatting import format_days_label, format_signed_currency
from award_pacing.report.views import build_detail, build_insights, build_summary_line
from award_pacing.report.writer import write_report, write_trend_report

__all__ = [
    "build_detail",
    "build_insights",
    "build_summary_line",
    "export_snapshot",
    "format_days_label",
    "format_signed_currency",
    "write_report",
    "write_trend_report",
]

"""Pacing and trend report writers (text or JSON, file or stdout)."""

import json
import logging
import sys
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from award_pacing.config import ReportConfig
from award_pacing.metrics.groups import (
    build_cohort_summaries,
    build_owner_summaries,
    build_status_summaries,
)
from award_pacing.metrics.summary import SummaryMetrics
from award_pacing.metrics.trend import compare_snapshots
from award_pacing.models import AwardItem
from award_pacing.pacing.modes import UnknownModeError
from award_pacing.report.export import format_timestamp
from award_pacing.report.formatting import (
    format_signed_amount,
    format_signed_int,
    format_signed_points,
)
from award_pacing.report.views import cohort_watchlist_lines, owner_pulse_lines, status_mix_line
from award_pacing.storage.snapshots import StoredSnapshot

logger = logging.getLogger(__name__)

STDOUT_TARGETS = ("-", "stdout")


def is_stdout_target(target: str | Path) -> bool:
    """True for ``-`` or ``stdout`` (any case)."""
    return str(target).strip().lower() in STDOUT_TARGETS


def normalize_report_format(target: str | Path, report_format: str | None = None) -> str:
    """Resolve ``text`` or ``json`` from an explicit format or the target's suffix.

    Raises:
        UnknownModeError: If an explicit format isn't text, txt or json.
    """
    value = (report_format or "").strip().lower()
    if not value:
        return "json" if Path(str(target)).suffix.lower() == ".json" else "text"
    if value in ("text", "txt"):
        return "text"
    if value == "json":
        return "json"
    msg = f"unsupported report format: {report_format}"
    raise UnknownModeError(msg)


def write_output(target: str | Path, content: str) -> None:
    """Write to a file, or to standard output for ``-``/``stdout``."""
    if is_stdout_target(target):
        sys.stdout.write(content)
        sys.stdout.flush()
        return

    path = Path(target)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.info("Wrote report to %s", path)


def build_report_payload(
    items: Sequence[AwardItem],
    metrics: SummaryMetrics,
    generated_at: datetime,
) -> dict[str, Any]:
    """JSON pacing report: summary plus full owner, cohort and status rollups."""
    return {
        "generated_at": format_timestamp(generated_at),
        "checkin_window_days": metrics.window,
        "summary": metrics.to_dict(),
        "owners": [s.to_dict() for s in build_owner_summaries(items)],
        "cohorts": [s.to_dict() for s in build_cohort_summaries(items)],
        "statuses": [s.to_dict() for s in build_status_summaries(items)],
    }


def build_report_text(
    items: Sequence[AwardItem],
    metrics: SummaryMetrics,
    generated_at: datetime,
    config: ReportConfig | None = None,
) -> str:
    """Plain-text pacing report."""
    config = config or ReportConfig()
    lines = [
        config.title,
        f"Generated: {format_timestamp(generated_at)}",
        f"Check-in window: {metrics.window} days",
        "",
        f"Awards tracked: {metrics.count}",
        f"Total awarded: {metrics.total_awarded:.2f}",
        f"Total disbursed: {metrics.total_disbursed:.2f}",
        f"Total expected: {metrics.total_expected:.2f}",
        f"Total gap: {metrics.total_gap:.2f}",
        f"Completion: {metrics.completion * 100:.1f}%",
        f"Pace mix: Ahead {metrics.ahead} · On track {metrics.on_track}"
        f" · Behind {metrics.behind}",
        f"Risk mix: High {metrics.high} · Medium {metrics.medium} · Low {metrics.low}",
        f"Check-ins: Overdue {metrics.overdue} · Due soon {metrics.due_soon}",
    ]
    if metrics.upcoming:
        lines.append(f"Upcoming check-ins: {', '.join(metrics.upcoming)}")

    lines += ["", "Owner pulse:", *owner_pulse_lines(items, config.owner_limit)]
    lines += ["", "Cohort watchlist:", *cohort_watchlist_lines(items, config.cohort_limit)]
    if items:
        lines += ["", status_mix_line(items)]

    return "\n".join(lines) + "\n"


def write_report(
    target: str | Path,
    items: Sequence[AwardItem],
    metrics: SummaryMetrics,
    generated_at: datetime,
    report_format: str | None = None,
    config: ReportConfig | None = None,
) -> str:
    """Render and write a pacing report.

    Args:
        target: Output path, or ``-``/``stdout``.
        items: Items the metrics were computed from.
        metrics: Summary snapshot.
        generated_at: Report timestamp.
        report_format: ``text``, ``txt`` or ``json``; inferred from the target if empty.
        config: Titles and list limits.

    Returns:
        The resolved format.

    Raises:
        UnknownModeError: If the format is not recognized.
    """
    resolved = normalize_report_format(target, report_format)
    if resolved == "json":
        content = json.dumps(build_report_payload(items, metrics, generated_at), indent=2) + "\n"
    else:
        content = build_report_text(items, metrics, generated_at, config)
    write_output(target, content)
    return resolved


def build_trend_payload(
    current: StoredSnapshot,
    previous: StoredSnapshot,
    generated_at: datetime,
) -> dict[str, Any]:
    """JSON trend report: both snapshots plus their field-wise delta."""
    delta = compare_snapshots(current.metrics, previous.metrics)
    return {
        "generated_at": format_timestamp(generated_at),
        "window_changed": delta.window_changed,
        "current": current.to_dict(),
        "previous": previous.to_dict(),
        "delta": delta.to_dict(),
    }


def _snapshot_line(label: str, snapshot: StoredSnapshot) -> str:
    metrics = snapshot.metrics
    return (
        f"{label} snapshot: {format_timestamp(snapshot.generated_at)}"
        f" · {metrics.count} records"
        f" · ${metrics.total_awarded:.2f} awarded"
        f" · ${metrics.total_disbursed:.2f} disbursed"
    )


def build_trend_text(
    current: StoredSnapshot,
    previous: StoredSnapshot,
    generated_at: datetime,
    config: ReportConfig | None = None,
) -> str:
    """Plain-text trend report.

    A changed due-soon window is called out on the current snapshot line, since
    it shifts items between Due Soon and Scheduled without any real change.
    """
    config = config or ReportConfig()
    delta = compare_snapshots(current.metrics, previous.metrics)

    current_line = _snapshot_line("Current", current)
    if delta.window_changed:
        current_line += (
            f" (due-soon window changed from {delta.previous_window} to {delta.window} days)"
        )

    lines = [
        config.trend_title,
        f"Generated: {format_timestamp(generated_at)}",
        "",
        current_line,
        _snapshot_line("Previous", previous),
        "",
        f"Delta: records {format_signed_int(delta.count)}"
        f" · awarded {format_signed_amount(delta.total_awarded)}"
        f" · disbursed {format_signed_amount(delta.total_disbursed)}",
        f"Expected {format_signed_amount(delta.total_expected)}"
        f" · gap {format_signed_amount(delta.total_gap)}"
        f" · completion {format_signed_points(delta.completion)}",
        f"Pace mix: Ahead {format_signed_int(delta.ahead)}"
        f" · On track {format_signed_int(delta.on_track)}"
        f" · Behind {format_signed_int(delta.behind)}",
        f"Check-ins: Overdue {format_signed_int(delta.overdue)}"
        f" · Due soon {format_signed_int(delta.due_soon)}",
        f"Risk mix: High {format_signed_int(delta.high)}"
        f" · Medium {format_signed_int(delta.medium)}"
        f" · Low {format_signed_int(delta.low)}",
    ]
    return "\n".join(lines) + "\n"


def write_trend_report(
    target: str | Path,
    current: StoredSnapshot,
    previous: StoredSnapshot,
    generated_at: datetime,
    report_format: str | None = None,
    config: ReportConfig | None = None,
) -> str:
    """Render and write a trend report; returns the resolved format.

    Raises:
        UnknownModeError: If the format is not recognized.
        TrendInputError: If a snapshot carries a negative window.
    """
    resolved = normalize_report_format(target, report_format)
    if resolved == "json":
        payload = build_trend_payload(current, previous, generated_at)
        content = json.dumps(payload, indent=2) + "\n"
    else:
        content = build_trend_text(current, previous, generated_at, config)
    write_output(target, content)
    return resolved

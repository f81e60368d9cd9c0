"""Text and rich renderings of award items for the terminal.

The plain-text builders (summary line, detail, insights) are also reused by
the text report; the rich builders are only used by the ``show`` command.
"""

from collections.abc import Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from award_pacing.metrics.groups import (
    build_cohort_summaries,
    build_owner_summaries,
    build_status_summaries,
)
from award_pacing.metrics.summary import SummaryMetrics
from award_pacing.models import AwardItem, CheckinLabel, CheckinStatus, PaceLabel, RiskLevel
from award_pacing.pacing.dates import format_long_date
from award_pacing.report.formatting import format_days_label, format_signed_currency, truncate

DEFAULT_PREVIEW_CHARS = 64
DEFAULT_OWNER_LIMIT = 5
DEFAULT_COHORT_LIMIT = 4

NO_RECORDS = "No records loaded."
NO_SELECTION = "Select an award to see details."

PACE_STYLES = {
    PaceLabel.AHEAD: "bold green",
    PaceLabel.ON_TRACK: "bold blue",
    PaceLabel.BEHIND: "bold red",
}

CHECKIN_STYLES = {
    CheckinLabel.OVERDUE: "bold red",
    CheckinLabel.DUE_SOON: "bold blue",
    CheckinLabel.SCHEDULED: "dim",
    CheckinLabel.UNSCHEDULED: "dim",
}

RISK_STYLES = {
    RiskLevel.HIGH: "bold red",
    RiskLevel.MEDIUM: "bold blue",
    RiskLevel.LOW: "dim",
}


def build_summary_line(metrics: SummaryMetrics, preview_chars: int = DEFAULT_PREVIEW_CHARS) -> str:
    """One-line portfolio summary.

    Args:
        metrics: Summary snapshot.
        preview_chars: Upcoming preview length before it is cut with ``…``.

    Returns:
        Summary text, or ``No records loaded.`` for an empty snapshot.
    """
    if metrics.count == 0:
        return NO_RECORDS

    preview = " | ".join(metrics.upcoming)
    preview = truncate(preview, preview_chars) if preview else "None"

    return (
        f"${metrics.total_awarded:.0f} awarded"
        f" · ${metrics.total_disbursed:.0f} disbursed ({metrics.completion * 100:.1f}%)"
        f" · Expected ${metrics.total_expected:.0f}"
        f" · Gap {format_signed_currency(metrics.total_gap)}"
        f" · Pace {metrics.ahead} ahead / {metrics.on_track} on / {metrics.behind} behind"
        f" · Risk {metrics.high} high / {metrics.medium} med / {metrics.low} low"
        f" · {metrics.overdue} overdue"
        f" · {metrics.due_soon} due in {metrics.window} days"
        f" · Next: {preview}"
    )


def _checkin_line(checkin: CheckinStatus) -> str:
    if checkin.checkin_date is None or checkin.days_until is None:
        return "Not scheduled"
    day = format_long_date(checkin.checkin_date)
    if checkin.days_until >= 0:
        return f"{day} (in {checkin.days_until} days, {checkin.label.value})"
    return f"{day} ({-checkin.days_until} days overdue)"


def build_detail(items: Sequence[AwardItem], index: int) -> str:
    """Multi-line detail for the item at ``index``.

    Returns:
        Detail text, or a selection prompt when ``index`` is out of range.
    """
    if not items or index < 0 or index >= len(items):
        return NO_SELECTION

    item = items[index]
    record = item.record
    pace = item.pace
    risk_line = item.risk.level.value
    if item.risk.flags:
        risk_line = f"{risk_line} ({'; '.join(item.risk.flags)})"
    gap_direction = "ahead" if pace.gap_amount >= 0 else "behind"

    return "\n".join(
        [
            f"Scholar: {record.scholar}",
            f"Cohort: {record.cohort}",
            f"Owner: {record.owner}",
            f"Status: {record.status}",
            f"Awarded: ${record.amount:.0f}",
            f"Disbursed: ${record.disbursed_to_date:.0f} ({pace.percent * 100:.1f}%)",
            f"Expected: {pace.expected * 100:.1f}% (${pace.expected_amount:.0f})",
            f"Gap vs expected: {format_signed_currency(pace.gap_amount)} ({gap_direction})",
            f"Pace: {pace.label.value} ({pace.delta * 100:.1f}%)",
            f"Risk: {risk_line}",
            f"Check-in: {_checkin_line(item.checkin)}",
            f"Notes: {record.notes}",
        ]
    )


def owner_pulse_lines(items: Sequence[AwardItem], limit: int = DEFAULT_OWNER_LIMIT) -> list[str]:
    """Bullet lines for the owners with the most high-risk and overdue awards."""
    lines = [
        f"- {s.owner} · {s.awards} awards · {s.high} high · {s.overdue} overdue"
        f" · {format_signed_currency(s.gap_total)} gap"
        for s in build_owner_summaries(items)[:limit]
    ]
    return lines or ["- None"]


def cohort_watchlist_lines(
    items: Sequence[AwardItem], limit: int = DEFAULT_COHORT_LIMIT
) -> list[str]:
    """Bullet lines for cohorts with behind awards or a negative gap."""
    lines = []
    for summary in build_cohort_summaries(items):
        if summary.behind == 0 and summary.gap_total >= 0:
            continue
        lines.append(
            f"- {summary.cohort} · {summary.behind} behind"
            f" · {format_signed_currency(summary.gap_total)} gap"
            f" · {summary.completion * 100:.1f}% complete"
        )
        if len(lines) >= limit:
            break
    return lines or ["- None"]


def status_mix_line(items: Sequence[AwardItem]) -> str:
    """``Status mix: Active 3 · On Hold 1``."""
    parts = [f"{s.status} {s.count}" for s in build_status_summaries(items)]
    return "Status mix: " + " · ".join(parts)


def build_insights(
    items: Sequence[AwardItem],
    owner_limit: int = DEFAULT_OWNER_LIMIT,
    cohort_limit: int = DEFAULT_COHORT_LIMIT,
) -> str:
    """Owner pulse, cohort watchlist and status mix as one block of text."""
    if not items:
        return NO_RECORDS

    owner_block = "\n".join(["Owner pulse (top risk):", *owner_pulse_lines(items, owner_limit)])
    cohort_block = "\n".join(["Cohort watchlist:", *cohort_watchlist_lines(items, cohort_limit)])
    return "\n\n".join([owner_block, cohort_block, status_mix_line(items)])


def build_items_table(items: Sequence[AwardItem], title: str = "Award Pacing") -> Table:
    """Rich table with one row per item, in the given order."""
    table = Table(title=title, show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Scholar", style="bold")
    table.add_column("Cohort")
    table.add_column("Owner")
    table.add_column("Pace")
    table.add_column("Disbursed", justify="right")
    table.add_column("Gap", justify="right")
    table.add_column("Check-in")
    table.add_column("Risk")

    for index, item in enumerate(items, start=1):
        pace = item.pace
        checkin_text = item.checkin.label.value
        if item.checkin.days_until is not None:
            checkin_text = f"{checkin_text} ({format_days_label(item.checkin.days_until)})"
        table.add_row(
            str(index),
            item.record.scholar,
            item.record.cohort,
            item.record.owner,
            Text(pace.label.value, style=PACE_STYLES[pace.label]),
            f"{pace.percent * 100:.1f}%",
            format_signed_currency(pace.gap_amount),
            Text(checkin_text, style=CHECKIN_STYLES[item.checkin.label]),
            Text(item.risk.level.value, style=RISK_STYLES[item.risk.level]),
        )
    return table


def build_summary_panel(
    metrics: SummaryMetrics,
    subtitle: str = "",
    preview_chars: int = DEFAULT_PREVIEW_CHARS,
) -> Panel:
    """Summary line in a bordered panel; ``subtitle`` carries the filter description."""
    return Panel(
        Text(build_summary_line(metrics, preview_chars), style="bold magenta"),
        title="Summary",
        subtitle=subtitle or None,
        expand=True,
    )

"""Global summary metrics over an award item set.

A SummaryMetrics value is the "snapshot" that exports, reports and the
snapshot store persist, and that trend reports difference.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from award_pacing.models import AwardItem, CheckinLabel, PaceLabel, RiskLevel
from award_pacing.pacing.dates import format_month_day
from award_pacing.pacing.items import clamp_window
from award_pacing.pacing.pace import safe_ratio

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SummaryMetrics:
    """Totals and bucket counts for one item set.

    ``completion`` is the ratio of sums (total disbursed / total awarded).
    Cohort completion in :mod:`award_pacing.metrics.groups` is a mean of
    per-award ratios instead; the two are not interchangeable.
    """

    count: int = 0
    total_awarded: float = 0.0
    total_disbursed: float = 0.0
    total_expected: float = 0.0
    total_gap: float = 0.0
    completion: float = 0.0
    ahead: int = 0
    on_track: int = 0
    behind: int = 0
    overdue: int = 0
    due_soon: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    upcoming: tuple[str, ...] = field(default_factory=tuple)
    window: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Summary fields for JSON output (the window is reported separately)."""
        return {
            "count": self.count,
            "total_awarded": self.total_awarded,
            "total_disbursed": self.total_disbursed,
            "total_expected": self.total_expected,
            "total_gap": self.total_gap,
            "completion": self.completion,
            "ahead": self.ahead,
            "on_track": self.on_track,
            "behind": self.behind,
            "overdue": self.overdue,
            "due_soon": self.due_soon,
            "high": self.high,
            "medium": self.medium,
            "low": self.low,
            "upcoming": list(self.upcoming),
        }


def format_upcoming(checkin_date: date, scholar: str) -> str:
    """Preview label such as ``Mar 4 · Avery``."""
    return f"{format_month_day(checkin_date)} · {scholar}"


def calculate_summary_metrics(items: Iterable[AwardItem], window_days: int) -> SummaryMetrics:
    """Aggregate an item set into a summary snapshot.

    The upcoming list holds every dated check-in that is not overdue, sorted
    as plain text. That means ``Apr 3`` sorts before ``Jan 9`` and ``Mar 10``
    before ``Mar 9``; exports and reports have always shown this order, so it
    is kept rather than switched to chronological order.

    Args:
        items: Award items (already filtered as desired).
        window_days: Due-soon window the items were built with.

    Returns:
        SummaryMetrics; all zeros for an empty item set.
    """
    count = 0
    total_awarded = total_disbursed = total_expected = total_gap = 0.0
    pace_counts = dict.fromkeys(PaceLabel, 0)
    risk_counts = dict.fromkeys(RiskLevel, 0)
    overdue = due_soon = 0
    upcoming: list[str] = []

    for item in items:
        record = item.record
        count += 1
        total_awarded += record.amount
        total_disbursed += record.disbursed_to_date
        total_expected += item.pace.expected_amount
        total_gap += item.pace.gap_amount
        pace_counts[item.pace.label] += 1
        risk_counts[item.risk.level] += 1

        if item.checkin.label is CheckinLabel.OVERDUE:
            overdue += 1
        elif item.checkin.label is CheckinLabel.DUE_SOON:
            due_soon += 1

        if item.checkin.checkin_date is not None and item.checkin.label is not CheckinLabel.OVERDUE:
            upcoming.append(format_upcoming(item.checkin.checkin_date, record.scholar))

    metrics = SummaryMetrics(
        count=count,
        total_awarded=total_awarded,
        total_disbursed=total_disbursed,
        total_expected=total_expected,
        total_gap=total_gap,
        completion=safe_ratio(total_disbursed, total_awarded),
        ahead=pace_counts[PaceLabel.AHEAD],
        on_track=pace_counts[PaceLabel.ON_TRACK],
        behind=pace_counts[PaceLabel.BEHIND],
        overdue=overdue,
        due_soon=due_soon,
        high=risk_counts[RiskLevel.HIGH],
        medium=risk_counts[RiskLevel.MEDIUM],
        low=risk_counts[RiskLevel.LOW],
        upcoming=tuple(sorted(upcoming)),
        window=clamp_window(window_days),
    )
    logger.debug(
        "Summarized %d items (%d behind, %d high risk)", count, metrics.behind, metrics.high
    )
    return metrics

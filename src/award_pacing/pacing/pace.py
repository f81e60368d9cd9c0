"""Pace calculation: disbursed fraction vs. elapsed fraction of the award period."""

import math
from datetime import datetime

from award_pacing.models import PaceLabel, PaceStatus, Record
from award_pacing.pacing.dates import days_between, parse_date_or

# Inclusive on both sides: a delta of exactly +/-0.10 leaves On Track.
PACE_THRESHOLD = 0.10


def clamp(value: float, low: float, high: float) -> float:
    """Clamp ``value`` into ``[low, high]``."""
    if value < low:
        return low
    if value > high:
        return high
    return value


def safe_ratio(numerator: float, denominator: float) -> float:
    """Divide, yielding 0.0 for non-positive denominators or non-finite results."""
    if denominator <= 0:
        return 0.0
    ratio = numerator / denominator
    if not math.isfinite(ratio):
        return 0.0
    return ratio


def pace_label(delta: float) -> PaceLabel:
    """Classify a pace delta (percent - expected)."""
    if delta >= PACE_THRESHOLD:
        return PaceLabel.AHEAD
    if delta <= -PACE_THRESHOLD:
        return PaceLabel.BEHIND
    return PaceLabel.ON_TRACK


def calculate_pace(record: Record, now: datetime) -> PaceStatus:
    """Calculate how a record's disbursements track against elapsed time.

    Unparsable award or target dates are replaced by ``now``. When both fall
    back, the period collapses to zero elapsed days over a one-day span, so
    ``expected`` is 0.

    Args:
        record: Disbursement record.
        now: Reference timestamp.

    Returns:
        PaceStatus with percent and expected both in [0, 1].
    """
    award_date = parse_date_or(record.award_date, now)
    target_date = parse_date_or(record.target_date, now)

    total_days = max(1.0, days_between(target_date, award_date))
    elapsed_days = max(0.0, days_between(now, award_date))
    expected = clamp(elapsed_days / total_days, 0.0, 1.0)
    percent = clamp(safe_ratio(record.disbursed_to_date, record.amount), 0.0, 1.0)

    delta = percent - expected
    expected_amount = record.amount * expected
    return PaceStatus(
        label=pace_label(delta),
        percent=percent,
        expected=expected,
        delta=delta,
        expected_amount=expected_amount,
        gap_amount=record.disbursed_to_date - expected_amount,
    )

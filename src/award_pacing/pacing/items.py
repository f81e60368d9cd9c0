"""Compose records into award items."""

import logging
from collections.abc import Iterable
from datetime import datetime

from award_pacing.models import AwardItem, Record
from award_pacing.pacing.checkin import calculate_checkin
from award_pacing.pacing.pace import calculate_pace
from award_pacing.pacing.risk import calculate_risk

logger = logging.getLogger(__name__)


def clamp_window(window_days: int) -> int:
    """Check-in windows are never negative."""
    return max(0, int(window_days))


def build_item(record: Record, now: datetime, window_days: int) -> AwardItem:
    """Derive pace, check-in and risk for one record."""
    pace = calculate_pace(record, now)
    checkin = calculate_checkin(record, now, clamp_window(window_days))
    return AwardItem(
        record=record,
        pace=pace,
        checkin=checkin,
        risk=calculate_risk(pace, checkin),
    )


def build_items(records: Iterable[Record], now: datetime, window_days: int) -> list[AwardItem]:
    """Derive award items for every record, preserving input order.

    Args:
        records: Disbursement records.
        now: Reference timestamp shared by every item.
        window_days: Due-soon window; negative values are treated as 0.

    Returns:
        One AwardItem per record.
    """
    window = clamp_window(window_days)
    items = [build_item(record, now, window) for record in records]
    logger.debug("Built %d award items (window=%d, now=%s)", len(items), window, now.isoformat())
    return items

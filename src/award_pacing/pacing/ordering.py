"""Item ordering.

Both modes are stable sorts over a complete key, so two items only keep their
input order when every key compares equal.
"""

from collections.abc import Iterable
from datetime import date
from typing import Any

from award_pacing.models import AwardItem, CheckinLabel, PaceLabel
from award_pacing.pacing.modes import SortMode, normalize_sort_mode

CHECKIN_RANK: dict[CheckinLabel, int] = {
    CheckinLabel.OVERDUE: 0,
    CheckinLabel.DUE_SOON: 1,
    CheckinLabel.SCHEDULED: 2,
    CheckinLabel.UNSCHEDULED: 3,
}

PACE_RANK: dict[PaceLabel, int] = {
    PaceLabel.BEHIND: 0,
    PaceLabel.ON_TRACK: 1,
    PaceLabel.AHEAD: 2,
}


def _alpha_key(item: AwardItem) -> str:
    return item.record.scholar.lower()


def _priority_key(item: AwardItem) -> tuple[Any, ...]:
    checkin_date = item.checkin.checkin_date
    return (
        CHECKIN_RANK[item.checkin.label],
        PACE_RANK[item.pace.label],
        # Undated (unscheduled) items go last
        checkin_date is None,
        checkin_date or date.min,
        item.record.scholar.lower(),
    )


def sort_items(
    items: Iterable[AwardItem],
    mode: str | SortMode = SortMode.PRIORITY,
) -> list[AwardItem]:
    """Return a sorted copy of ``items``.

    Modes:
        - alpha: scholar name, case-insensitive.
        - priority: check-in urgency (Overdue, Due Soon, Scheduled,
          Unscheduled), then pace (Behind, On Track, Ahead), then check-in
          date with undated items last, then scholar name.

    Raises:
        UnknownModeError: If ``mode`` is not a known sort mode.
    """
    sort_mode = normalize_sort_mode(mode)
    key = _alpha_key if sort_mode is SortMode.ALPHA else _priority_key
    return sorted(items, key=key)

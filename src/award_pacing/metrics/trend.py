"""Period-over-period comparison of two summary snapshots."""

from dataclasses import dataclass
from typing import Any

from award_pacing.metrics.summary import SummaryMetrics

DELTA_FIELDS: tuple[str, ...] = (
    "count",
    "total_awarded",
    "total_disbursed",
    "total_expected",
    "total_gap",
    "completion",
    "ahead",
    "on_track",
    "behind",
    "overdue",
    "due_soon",
    "high",
    "medium",
    "low",
)


class TrendInputError(ValueError):
    """Raised when snapshots can't be compared."""


@dataclass(frozen=True)
class TrendDelta:
    """Field-wise ``current - previous`` for every numeric summary field.

    ``window`` is the current snapshot's due-soon window, not a difference.
    Check ``window_changed`` before reading the check-in deltas: a changed
    window moves items between Due Soon and Scheduled on its own.
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
    window: int = 0
    previous_window: int = 0

    @property
    def window_changed(self) -> bool:
        """True if the two snapshots used different due-soon windows."""
        return self.window != self.previous_window

    def to_dict(self) -> dict[str, Any]:
        """Delta fields for JSON output."""
        return {name: getattr(self, name) for name in DELTA_FIELDS}


def compare_snapshots(current: SummaryMetrics, previous: SummaryMetrics) -> TrendDelta:
    """Difference two snapshots.

    ``compare_snapshots(a, b)`` is the exact negation of
    ``compare_snapshots(b, a)`` for every delta field.

    Args:
        current: Newer snapshot.
        previous: Older snapshot.

    Returns:
        TrendDelta carrying the current window as-is.

    Raises:
        TrendInputError: If either argument is not a SummaryMetrics or carries
            a negative window.
    """
    for name, snapshot in (("current", current), ("previous", previous)):
        if not isinstance(snapshot, SummaryMetrics):
            msg = f"{name} snapshot must be SummaryMetrics, got {type(snapshot).__name__}"
            raise TrendInputError(msg)
        if snapshot.window < 0:
            msg = f"{name} snapshot has a negative check-in window: {snapshot.window}"
            raise TrendInputError(msg)

    deltas = {name: getattr(current, name) - getattr(previous, name) for name in DELTA_FIELDS}
    return TrendDelta(**deltas, window=current.window, previous_window=previous.window)

"""Per-record pacing engine: pace, check-in, risk, ordering and filtering."""

from award_pacing.pacing.checkin import calculate_checkin
from award_pacing.pacing.filters import apply_filter, is_at_risk
from award_pacing.pacing.items import build_item, build_items, clamp_window
from award_pacing.pacing.modes import (
    FilterMode,
    SortMode,
    UnknownModeError,
    normalize_filter_mode,
    normalize_sort_mode,
)
from award_pacing.pacing.ordering import sort_items
from award_pacing.pacing.pace import calculate_pace, pace_label, safe_ratio
from award_pacing.pacing.risk import calculate_risk

__all__ = [
    "FilterMode",
    "SortMode",
    "UnknownModeError",
    "apply_filter",
    "build_item",
    "build_items",
    "calculate_checkin",
    "calculate_pace",
    "calculate_risk",
    "clamp_window",
    "is_at_risk",
    "normalize_filter_mode",
    "normalize_sort_mode",
    "pace_label",
    "safe_ratio",
    "sort_items",
]

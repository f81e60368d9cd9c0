"""Item subsets for focus views and exports."""

from collections.abc import Iterable

from award_pacing.models import AwardItem, CheckinLabel, PaceLabel, RiskLevel
from award_pacing.pacing.modes import FilterMode, normalize_filter_mode


def is_at_risk(item: AwardItem) -> bool:
    """Behind pace, or a check-in that is overdue or due soon."""
    return item.pace.label is PaceLabel.BEHIND or item.checkin.label in (
        CheckinLabel.OVERDUE,
        CheckinLabel.DUE_SOON,
    )


def apply_filter(
    items: Iterable[AwardItem],
    mode: str | FilterMode = FilterMode.ALL,
) -> list[AwardItem]:
    """Select the items matching a filter mode.

    Args:
        items: Award items.
        mode: all, risk, or high.

    Returns:
        Matching items in their original order.

    Raises:
        UnknownModeError: If ``mode`` is not a known filter mode.
    """
    filter_mode = normalize_filter_mode(mode)
    if filter_mode is FilterMode.RISK:
        return [item for item in items if is_at_risk(item)]
    if filter_mode is FilterMode.HIGH:
        return [item for item in items if item.risk.level is RiskLevel.HIGH]
    return list(items)

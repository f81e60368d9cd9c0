"""Owner, cohort and status rollups.

Each rollup groups on a raw string field (no identity matching) and returns
summaries sorted by the most pressing signal first.
"""

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Any

from award_pacing.models import AwardItem, CheckinLabel, PaceLabel, RiskLevel
from award_pacing.pacing.pace import safe_ratio

UNSPECIFIED_STATUS = "Unspecified"


@dataclass
class OwnerSummary:
    """Per-owner workload and risk."""

    owner: str
    awards: int = 0
    high: int = 0
    overdue: int = 0
    due_soon: int = 0
    gap_total: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)


@dataclass
class CohortSummary:
    """Per-cohort pace.

    ``completion`` is the mean of each award's disbursed/amount ratio, so a
    small fully-paid award weighs as much as a large unpaid one.
    """

    cohort: str
    awards: int = 0
    behind: int = 0
    gap_total: float = 0.0
    completion: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)


@dataclass
class StatusSummary:
    """Award count for one status value."""

    status: str
    count: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)


def build_owner_summaries(items: Iterable[AwardItem]) -> list[OwnerSummary]:
    """Roll items up by owner.

    Sorted by high-risk count desc, overdue desc, gap total asc (most behind
    first), then owner name.
    """
    index: dict[str, OwnerSummary] = {}
    for item in items:
        owner = item.record.owner
        entry = index.get(owner)
        if entry is None:
            entry = index[owner] = OwnerSummary(owner=owner)

        entry.awards += 1
        entry.gap_total += item.pace.gap_amount
        if item.risk.level is RiskLevel.HIGH:
            entry.high += 1
        if item.checkin.label is CheckinLabel.OVERDUE:
            entry.overdue += 1
        if item.checkin.label is CheckinLabel.DUE_SOON:
            entry.due_soon += 1

    return sorted(
        index.values(),
        key=lambda s: (-s.high, -s.overdue, s.gap_total, s.owner.lower()),
    )


def build_cohort_summaries(items: Iterable[AwardItem]) -> list[CohortSummary]:
    """Roll items up by cohort.

    Awards with a non-positive amount add nothing to the completion sum but
    still count toward the average.

    Sorted by behind count desc, gap total asc, then cohort name.
    """
    index: dict[str, CohortSummary] = {}
    ratio_sums: dict[str, float] = {}
    for item in items:
        cohort = item.record.cohort
        entry = index.get(cohort)
        if entry is None:
            entry = index[cohort] = CohortSummary(cohort=cohort)
            ratio_sums[cohort] = 0.0

        entry.awards += 1
        entry.gap_total += item.pace.gap_amount
        if item.pace.label is PaceLabel.BEHIND:
            entry.behind += 1
        ratio_sums[cohort] += safe_ratio(item.record.disbursed_to_date, item.record.amount)

    for cohort, entry in index.items():
        entry.completion = safe_ratio(ratio_sums[cohort], entry.awards)

    return sorted(
        index.values(),
        key=lambda s: (-s.behind, s.gap_total, s.cohort.lower()),
    )


def build_status_summaries(items: Iterable[AwardItem]) -> list[StatusSummary]:
    """Count items per trimmed status; blank statuses count as Unspecified.

    Sorted by count desc, then status name.
    """
    counts: dict[str, int] = {}
    for item in items:
        status = item.record.status.strip() or UNSPECIFIED_STATUS
        counts[status] = counts.get(status, 0) + 1

    summaries = [StatusSummary(status=status, count=count) for status, count in counts.items()]
    return sorted(summaries, key=lambda s: (-s.count, s.status.lower()))

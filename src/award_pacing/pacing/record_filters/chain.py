"""Filter chain for coordinating record filters.

Provides composable filtering with rejection statistics and a one-line
description of the active filters.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable

from award_pacing.models import Record

from .base import BaseFilter, FilterResult, RecordFilters
from .fields import CohortFilter, OwnerFilter, StatusFilter

logger = logging.getLogger(__name__)


class RecordFilterChain:
    """Composable filter chain for disbursement records.

    Coordinates the owner, cohort and status filters and tracks how many
    records each one rejected.
    """

    def __init__(self, filters: RecordFilters) -> None:
        """Initialize filter chain.

        Args:
            filters: Requested filter values.
        """
        self.config = filters
        self.stats: dict[str, int] = defaultdict(int)

        self.filters: list[BaseFilter] = [
            OwnerFilter(),
            CohortFilter(),
            StatusFilter(),
        ]

    def evaluate(self, record: Record) -> FilterResult:
        """Evaluate all enabled filters for a record.

        Short-circuits on first failure.

        Args:
            record: Disbursement record.

        Returns:
            FilterResult with pass/fail and rejection reason.
        """
        for filter_obj in self.filters:
            if not filter_obj.is_enabled(self.config):
                continue

            result = filter_obj.evaluate(record, self.config)
            if not result.passed:
                return result

        return FilterResult(passed=True, filter_name="none")

    def apply(self, records: Iterable[Record]) -> list[Record]:
        """Keep the records that pass every enabled filter, in input order."""
        records = list(records)
        if not self.config.active:
            return records

        kept: list[Record] = []
        for record in records:
            result = self.evaluate(record)
            if result.passed:
                kept.append(record)
            else:
                self.record_rejection(result.filter_name)

        logger.info("Record filters kept %d of %d records", len(kept), len(records))
        return kept

    def describe(self) -> str:
        """Describe the active filters, e.g. ``Filters: owner=maya r. · status=active``.

        Returns:
            Description, or an empty string when no filter is active.
        """
        parts = []
        for name, values in (
            ("owner", self.config.owners),
            ("cohort", self.config.cohorts),
            ("status", self.config.statuses),
        ):
            if values:
                parts.append(f"{name}=" + ", ".join(sorted(values)))

        if not parts:
            return ""
        return "Filters: " + " · ".join(parts)

    def record_rejection(self, filter_name: str) -> None:
        """Record a filter rejection for statistics.

        Args:
            filter_name: Name of the filter that rejected the record.
        """
        self.stats[filter_name] += 1

    def get_stats(self) -> dict[str, int]:
        """Get filter rejection statistics.

        Returns:
            Dictionary mapping filter names to rejection counts.
        """
        return dict(self.stats)


def apply_record_filters(records: Iterable[Record], filters: RecordFilters) -> list[Record]:
    """Convenience wrapper around RecordFilterChain.apply."""
    return RecordFilterChain(filters).apply(records)

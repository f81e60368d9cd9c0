"""Aggregations over award items: summary snapshot, group rollups, trends."""

from award_pacing.metrics.groups import (
    CohortSummary,
    OwnerSummary,
    StatusSummary,
    build_cohort_summaries,
    build_owner_summaries,
    build_status_summaries,
)
from award_pacing.metrics.summary import SummaryMetrics, calculate_summary_metrics
from award_pacing.metrics.trend import TrendDelta, TrendInputError, compare_snapshots

__all__ = [
    "CohortSummary",
    "OwnerSummary",
    "StatusSummary",
    "SummaryMetrics",
    "TrendDelta",
    "TrendInputError",
    "build_cohort_summaries",
    "build_owner_summaries",
    "build_status_summaries",
    "calculate_summary_metrics",
    "compare_snapshots",
]

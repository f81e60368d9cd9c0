"""Record pre-filters.

Narrow the raw record set to specific owners, cohorts or statuses before any
items are built.
"""

from award_pacing.pacing.record_filters.base import (
    BaseFilter,
    FilterResult,
    RecordFilters,
    parse_filter_list,
)
from award_pacing.pacing.record_filters.chain import RecordFilterChain, apply_record_filters
from award_pacing.pacing.record_filters.fields import CohortFilter, OwnerFilter, StatusFilter

__all__ = [
    "BaseFilter",
    "CohortFilter",
    "FilterResult",
    "OwnerFilter",
    "RecordFilterChain",
    "RecordFilters",
    "StatusFilter",
    "apply_record_filters",
    "parse_filter_list",
]

"""Base filter interface for record filtering."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from award_pacing.models import Record


def parse_filter_list(raw: str | None) -> frozenset[str] | None:
    """Parse a comma-separated filter value.

    Values are trimmed and lower-cased; blanks are dropped.

    Args:
        raw: Text such as ``"Maya R., Jordan P."``.

    Returns:
        Set of values, or None when nothing usable was given (no filtering).
    """
    if raw is None or not raw.strip():
        return None

    values = frozenset(part.strip().lower() for part in raw.split(",") if part.strip())
    return values or None


@dataclass(frozen=True)
class RecordFilters:
    """Requested owner, cohort and status values.

    A None set means that field is not filtered.
    """

    owners: frozenset[str] | None = None
    cohorts: frozenset[str] | None = None
    statuses: frozenset[str] | None = None

    @classmethod
    def parse(
        cls,
        owners: str | None = None,
        cohorts: str | None = None,
        statuses: str | None = None,
    ) -> "RecordFilters":
        """Build from comma-separated CLI values."""
        return cls(
            owners=parse_filter_list(owners),
            cohorts=parse_filter_list(cohorts),
            statuses=parse_filter_list(statuses),
        )

    @property
    def active(self) -> bool:
        """True if any field is filtered."""
        return any(values for values in (self.owners, self.cohorts, self.statuses))


@dataclass
class FilterResult:
    """Result of a filter evaluation.

    Attributes:
        passed: Whether the record passed the filter.
        reason: Optional reason for rejection (None if passed).
        filter_name: Name of the filter that produced this result.
    """

    passed: bool
    reason: str | None = None
    filter_name: str = ""


class BaseFilter(ABC):
    """Abstract base class for record filters.

    All filters must implement:
    - is_enabled(): Check if the filter has values to match
    - evaluate(): Evaluate a record against the filter
    """

    name: str = "base"

    @abstractmethod
    def is_enabled(self, filters: RecordFilters) -> bool:
        """Check if this filter is active.

        Args:
            filters: Requested filter values.

        Returns:
            True if the filter should be applied.
        """

    @abstractmethod
    def evaluate(self, record: Record, filters: RecordFilters) -> FilterResult:
        """Evaluate a record against this filter.

        Args:
            record: Disbursement record.
            filters: Requested filter values.

        Returns:
            FilterResult indicating pass/fail with optional reason.
        """

"""Owner, cohort and status filters."""

from award_pacing.models import Record

from .base import BaseFilter, FilterResult, RecordFilters


class _FieldFilter(BaseFilter):
    """Match a trimmed, lower-cased record field against a value set."""

    label = ""

    def _allowed(self, filters: RecordFilters) -> frozenset[str] | None:
        raise NotImplementedError

    def _value(self, record: Record) -> str:
        raise NotImplementedError

    def is_enabled(self, filters: RecordFilters) -> bool:
        """Enabled when at least one value was requested."""
        return bool(self._allowed(filters))

    def evaluate(self, record: Record, filters: RecordFilters) -> FilterResult:
        """Pass records whose field value is in the requested set."""
        allowed = self._allowed(filters) or frozenset()
        value = self._value(record)

        if value not in allowed:
            return FilterResult(
                passed=False,
                reason=f"{self.label} '{value}' not in filter",
                filter_name=self.name,
            )

        return FilterResult(passed=True, filter_name=self.name)


class OwnerFilter(_FieldFilter):
    """Filter records by owner."""

    name = "owner"
    label = "Owner"

    def _allowed(self, filters: RecordFilters) -> frozenset[str] | None:
        return filters.owners

    def _value(self, record: Record) -> str:
        return record.owner.strip().lower()


class CohortFilter(_FieldFilter):
    """Filter records by cohort."""

    name = "cohort"
    label = "Cohort"

    def _allowed(self, filters: RecordFilters) -> frozenset[str] | None:
        return filters.cohorts

    def _value(self, record: Record) -> str:
        return record.cohort.strip().lower()


class StatusFilter(_FieldFilter):
    """Filter records by status.

    Records with a blank status match the value ``unspecified``.
    """

    name = "status"
    label = "Status"

    def _allowed(self, filters: RecordFilters) -> frozenset[str] | None:
        return filters.statuses

    def _value(self, record: Record) -> str:
        return record.status.strip().lower() or "unspecified"

"""Tests for summary metrics."""

from collections.abc import Callable
from datetime import datetime

import pytest

from award_pacing.metrics.summary import SummaryMetrics, calculate_summary_metrics
from award_pacing.models import AwardItem, Record
from award_pacing.pacing import build_items


class TestCalculateSummaryMetrics:
    """Tests for calculate_summary_metrics."""

    def test_empty_items(self) -> None:
        """Test an empty set yields all zeros and no upcoming check-ins."""
        metrics = calculate_summary_metrics([], 14)

        assert metrics.count == 0
        assert metrics.completion == 0.0
        assert metrics.total_awarded == 0.0
        assert (metrics.ahead, metrics.on_track, metrics.behind) == (0, 0, 0)
        assert (metrics.overdue, metrics.due_soon) == (0, 0)
        assert (metrics.high, metrics.medium, metrics.low) == (0, 0, 0)
        assert metrics.upcoming == ()
        assert metrics.window == 14

    def test_sample_totals(self, sample_items: list[AwardItem]) -> None:
        """Test totals and bucket counts over the sample items."""
        metrics = calculate_summary_metrics(sample_items, 14)

        assert metrics.count == 4
        assert metrics.total_awarded == 11000
        assert metrics.total_disbursed == 6700
        assert metrics.total_expected == pytest.approx(11000 * 182 / 365)
        assert metrics.total_gap == pytest.approx(6700 - 11000 * 182 / 365)
        assert metrics.completion == pytest.approx(6700 / 11000)
        assert (metrics.ahead, metrics.on_track, metrics.behind) == (1, 1, 2)
        assert (metrics.overdue, metrics.due_soon) == (1, 1)
        assert (metrics.high, metrics.medium, metrics.low) == (2, 0, 2)

    def test_upcoming_excludes_overdue_and_undated(self, sample_items: list[AwardItem]) -> None:
        """Test upcoming lists dated, non-overdue check-ins only."""
        metrics = calculate_summary_metrics(sample_items, 14)

        assert metrics.upcoming == ("Jul 10 · Jordan Patel", "Sep 1 · Riley Gomez")

    def test_upcoming_is_lexicographic(
        self, make_record: Callable[..., Record], now: datetime
    ) -> None:
        """Test upcoming sorts as text, so Oct precedes Sep and 10 precedes 9."""
        records = [
            make_record(scholar="A", next_checkin="2025-09-09"),
            make_record(scholar="B", next_checkin="2025-10-01"),
            make_record(scholar="C", next_checkin="2025-09-10"),
        ]

        metrics = calculate_summary_metrics(build_items(records, now, 14), 14)

        assert metrics.upcoming == ("Oct 1 · B", "Sep 10 · C", "Sep 9 · A")

    def test_global_completion_is_ratio_of_sums(
        self, make_record: Callable[..., Record], now: datetime
    ) -> None:
        """Test a paid small award and an unpaid large one give 0.10 overall."""
        records = [
            make_record(amount=1000, disbursed_to_date=1000),
            make_record(amount=9000, disbursed_to_date=0),
        ]

        metrics = calculate_summary_metrics(build_items(records, now, 14), 14)

        assert metrics.completion == pytest.approx(0.10)

    def test_negative_window_clamped(self) -> None:
        """Test the recorded window is never negative."""
        assert calculate_summary_metrics([], -4).window == 0

    def test_to_dict_omits_window(self, sample_items: list[AwardItem]) -> None:
        """Test the serialized summary carries upcoming as a list and no window."""
        data = calculate_summary_metrics(sample_items, 14).to_dict()

        assert "window" not in data
        assert isinstance(data["upcoming"], list)
        assert data["count"] == 4

    def test_default_metrics(self) -> None:
        """Test a default SummaryMetrics is empty."""
        assert SummaryMetrics().count == 0

"""Tests for pace calculation."""

import math
from collections.abc import Callable
from datetime import UTC, datetime

import pytest

from award_pacing.models import PaceLabel, Record
from award_pacing.pacing.pace import calculate_pace, clamp, pace_label, safe_ratio


class TestSafeRatio:
    """Tests for guarded division."""

    def test_regular_division(self) -> None:
        """Test a normal ratio."""
        assert safe_ratio(1, 4) == 0.25

    def test_zero_denominator(self) -> None:
        """Test zero denominator yields 0."""
        assert safe_ratio(10, 0) == 0.0

    def test_negative_denominator(self) -> None:
        """Test negative denominator yields 0."""
        assert safe_ratio(10, -5) == 0.0

    def test_non_finite_result(self) -> None:
        """Test infinite numerator yields 0 rather than inf or nan."""
        assert safe_ratio(math.inf, 1) == 0.0
        assert safe_ratio(math.nan, 1) == 0.0


class TestClamp:
    """Tests for clamp."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(-0.5, 0.0), (0.0, 0.0), (0.3, 0.3), (1.0, 1.0), (2.5, 1.0)],
    )
    def test_clamp_unit_interval(self, value: float, expected: float) -> None:
        """Test clamping into [0, 1]."""
        assert clamp(value, 0.0, 1.0) == expected


class TestPaceLabel:
    """Tests for pace label thresholds."""

    def test_exact_positive_threshold_is_ahead(self) -> None:
        """Test delta of exactly +0.10 is Ahead."""
        assert pace_label(0.10) is PaceLabel.AHEAD

    def test_exact_negative_threshold_is_behind(self) -> None:
        """Test delta of exactly -0.10 is Behind."""
        assert pace_label(-0.10) is PaceLabel.BEHIND

    def test_just_inside_thresholds_is_on_track(self) -> None:
        """Test deltas just inside the band are On Track."""
        assert pace_label(0.0999) is PaceLabel.ON_TRACK
        assert pace_label(-0.0999) is PaceLabel.ON_TRACK
        assert pace_label(0.0) is PaceLabel.ON_TRACK

    def test_labels_render_as_text(self) -> None:
        """Test label values used in exports and reports."""
        assert PaceLabel.ON_TRACK.value == "On Track"
        assert PaceLabel.AHEAD == "Ahead"


class TestCalculatePace:
    """Tests for calculate_pace."""

    def test_behind_scenario(self, make_record: Callable[..., Record], now: datetime) -> None:
        """Test the half-year behind scenario (182 of 365 days elapsed, 20% disbursed)."""
        record = make_record(amount=1000, disbursed_to_date=200)

        pace = calculate_pace(record, now)

        assert pace.expected == pytest.approx(182 / 365)
        assert pace.expected == pytest.approx(0.4986, abs=1e-4)
        assert pace.percent == pytest.approx(0.20)
        assert pace.delta == pytest.approx(-0.2986, abs=1e-4)
        assert pace.label is PaceLabel.BEHIND
        assert pace.expected_amount == pytest.approx(498.6, abs=0.05)
        assert pace.gap_amount == pytest.approx(-298.6, abs=0.05)

    def test_ahead_when_fully_disbursed(
        self, make_record: Callable[..., Record], now: datetime
    ) -> None:
        """Test a fully disbursed award midway through its period is Ahead."""
        pace = calculate_pace(make_record(amount=1000, disbursed_to_date=1000), now)

        assert pace.percent == 1.0
        assert pace.label is PaceLabel.AHEAD
        assert pace.gap_amount > 0

    def test_percent_clamped_for_overpayment(
        self, make_record: Callable[..., Record], now: datetime
    ) -> None:
        """Test disbursed above amount clamps percent to 1."""
        pace = calculate_pace(make_record(amount=1000, disbursed_to_date=1500), now)

        assert pace.percent == 1.0

    def test_zero_amount_guards_division(
        self, make_record: Callable[..., Record], now: datetime
    ) -> None:
        """Test a zero amount yields percent 0 and expected amount 0."""
        pace = calculate_pace(make_record(amount=0, disbursed_to_date=0), now)

        assert pace.percent == 0.0
        assert pace.expected_amount == 0.0
        assert pace.gap_amount == 0.0

    def test_expected_clamped_after_target(self, make_record: Callable[..., Record]) -> None:
        """Test expected never exceeds 1 once the target date has passed."""
        later = datetime(2027, 3, 1, tzinfo=UTC)

        pace = calculate_pace(make_record(), later)

        assert pace.expected == 1.0

    def test_expected_zero_before_award_date(self, make_record: Callable[..., Record]) -> None:
        """Test expected is 0 before the award starts."""
        earlier = datetime(2024, 6, 1, tzinfo=UTC)

        pace = calculate_pace(make_record(disbursed_to_date=0), earlier)

        assert pace.expected == 0.0
        assert pace.label is PaceLabel.ON_TRACK

    def test_missing_dates_fall_back_to_now(
        self, make_record: Callable[..., Record], now: datetime
    ) -> None:
        """Test empty award and target dates collapse the period to now."""
        pace = calculate_pace(make_record(award_date="", target_date="", disbursed_to_date=0), now)

        assert pace.expected == 0.0
        assert pace.delta == 0.0
        assert pace.label is PaceLabel.ON_TRACK

    def test_malformed_award_date_falls_back_to_now(
        self, make_record: Callable[..., Record], now: datetime
    ) -> None:
        """Test a malformed award date is treated as now (nothing elapsed)."""
        pace = calculate_pace(make_record(award_date="01/01/2025"), now)

        assert pace.expected == 0.0

    def test_short_period_uses_one_day_minimum(
        self, make_record: Callable[..., Record], now: datetime
    ) -> None:
        """Test a target on the award date still divides by at least one day."""
        record = make_record(award_date="2025-07-01", target_date="2025-07-01")

        pace = calculate_pace(record, now)

        assert pace.expected == 1.0

    def test_naive_now_is_supported(self, make_record: Callable[..., Record]) -> None:
        """Test naive timestamps compare against naive parsed dates."""
        pace = calculate_pace(make_record(amount=1000, disbursed_to_date=200), datetime(2025, 7, 2))

        assert pace.expected == pytest.approx(182 / 365)

    @pytest.mark.parametrize("disbursed", [-100.0, 0.0, 250.0, 999.0, 5000.0])
    def test_fractions_stay_in_unit_interval(
        self, make_record: Callable[..., Record], now: datetime, disbursed: float
    ) -> None:
        """Test percent and expected stay within [0, 1]."""
        pace = calculate_pace(make_record(disbursed_to_date=disbursed), now)

        assert 0.0 <= pace.percent <= 1.0
        assert 0.0 <= pace.expected <= 1.0

"""Tests for pacing and trend report writers."""

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from award_pacing.config import ReportConfig
from award_pacing.metrics.summary import SummaryMetrics, calculate_summary_metrics
from award_pacing.models import AwardItem
from award_pacing.pacing.modes import UnknownModeError
from award_pacing.report.writer import (
    build_report_payload,
    build_report_text,
    build_trend_text,
    is_stdout_target,
    normalize_report_format,
    write_report,
    write_trend_report,
)
from award_pacing.storage.snapshots import StoredSnapshot


@pytest.fixture
def trend_pair() -> tuple[StoredSnapshot, StoredSnapshot]:
    """Two stored snapshots a week apart."""
    current = StoredSnapshot(
        snapshot_id=8,
        generated_at=datetime(2025, 7, 9, tzinfo=UTC),
        metrics=SummaryMetrics(
            count=5,
            total_awarded=12000.0,
            total_disbursed=7000.0,
            ahead=1,
            on_track=2,
            behind=2,
            overdue=1,
            due_soon=2,
            high=2,
            medium=1,
            low=2,
            window=21,
        ),
    )
    previous = StoredSnapshot(
        snapshot_id=7,
        generated_at=datetime(2025, 7, 2, tzinfo=UTC),
        metrics=SummaryMetrics(
            count=4,
            total_awarded=11000.0,
            total_disbursed=6700.0,
            ahead=1,
            on_track=1,
            behind=2,
            overdue=1,
            due_soon=1,
            high=2,
            medium=0,
            low=2,
            window=14,
        ),
    )
    return current, previous


class TestReportFormat:
    """Tests for report format resolution."""

    @pytest.mark.parametrize(
        ("target", "report_format", "expected"),
        [
            ("report.json", None, "json"),
            ("report.JSON", "", "json"),
            ("report.txt", None, "text"),
            ("-", None, "text"),
            ("report.json", "txt", "text"),
            ("report.txt", " JSON ", "json"),
        ],
    )
    def test_resolution(self, target: str, report_format: str | None, expected: str) -> None:
        """Test explicit formats win over the target suffix."""
        assert normalize_report_format(target, report_format) == expected

    def test_unknown_format(self) -> None:
        """Test unknown formats raise a ValueError."""
        with pytest.raises(UnknownModeError, match="unsupported report format"):
            normalize_report_format("report.txt", "html")

    @pytest.mark.parametrize("target", ["-", "stdout", " STDOUT "])
    def test_stdout_targets(self, target: str) -> None:
        """Test stdout aliases."""
        assert is_stdout_target(target) is True

    def test_file_target(self) -> None:
        """Test a path is not stdout."""
        assert is_stdout_target("out/report.txt") is False


class TestPacingReport:
    """Tests for the pacing report."""

    def test_text_report(self, sample_items: list[AwardItem], now: datetime) -> None:
        """Test the text report sections."""
        metrics = calculate_summary_metrics(sample_items, 14)

        text = build_report_text(sample_items, metrics, now)

        lines = text.splitlines()
        assert lines[0] == "Award Pacing Report"
        assert lines[1] == "Generated: 2025-07-02T00:00:00+00:00"
        assert lines[2] == "Check-in window: 14 days"
        assert "Awards tracked: 4" in lines
        assert "Total awarded: 11000.00" in lines
        assert "Completion: 60.9%" in lines
        assert "Pace mix: Ahead 1 · On track 1 · Behind 2" in lines
        assert "Upcoming check-ins: Jul 10 · Jordan Patel, Sep 1 · Riley Gomez" in lines
        assert "Owner pulse:" in lines
        assert "- 2025 Fall · 1 behind · -$296 gap · 35.0% complete" in lines
        assert lines[-1] == "Status mix: Active 2 · On Hold 1 · Unspecified 1"
        assert text.endswith("\n")

    def test_text_report_empty(self, now: datetime) -> None:
        """Test an empty report shows None placeholders and no status mix."""
        text = build_report_text([], calculate_summary_metrics([], 14), now)

        assert "Owner pulse:\n- None" in text
        assert "Cohort watchlist:\n- None" in text
        assert "Status mix" not in text
        assert "Upcoming check-ins" not in text

    def test_text_report_uses_config(self, sample_items: list[AwardItem], now: datetime) -> None:
        """Test the title and owner limit come from config."""
        config = ReportConfig(title="Custom Title", owner_limit=1)
        metrics = calculate_summary_metrics(sample_items, 14)

        text = build_report_text(sample_items, metrics, now, config)

        assert text.startswith("Custom Title\n")
        assert "- Sam T." not in text

    def test_json_payload(self, sample_items: list[AwardItem], now: datetime) -> None:
        """Test the JSON payload carries full rollups."""
        metrics = calculate_summary_metrics(sample_items, 14)

        payload = build_report_payload(sample_items, metrics, now)

        assert payload["checkin_window_days"] == 14
        assert payload["summary"]["behind"] == 2
        assert [o["owner"] for o in payload["owners"]] == ["Maya R.", "Sam T."]
        assert payload["cohorts"][0]["cohort"] == "2025 Fall"
        assert payload["statuses"][0] == {"status": "Active", "count": 2}

    def test_write_json_file(
        self, sample_items: list[AwardItem], now: datetime, tmp_path: Path
    ) -> None:
        """Test writing a JSON report inferred from the suffix."""
        metrics = calculate_summary_metrics(sample_items, 14)
        target = tmp_path / "reports" / "pacing.json"

        resolved = write_report(target, sample_items, metrics, now)

        assert resolved == "json"
        assert json.loads(target.read_text(encoding="utf-8"))["summary"]["count"] == 4

    def test_write_stdout(
        self,
        sample_items: list[AwardItem],
        now: datetime,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test the stdout target prints the report."""
        metrics = calculate_summary_metrics(sample_items, 14)

        write_report("-", sample_items, metrics, now)

        assert "Awards tracked: 4" in capsys.readouterr().out


class TestTrendReport:
    """Tests for the trend report."""

    def test_text_with_window_change(
        self, trend_pair: tuple[StoredSnapshot, StoredSnapshot], now: datetime
    ) -> None:
        """Test signed deltas and the window-change note."""
        current, previous = trend_pair

        lines = build_trend_text(current, previous, now).splitlines()

        assert lines[0] == "Award Pacing Trend Report"
        assert lines[3] == (
            "Current snapshot: 2025-07-09T00:00:00+00:00 · 5 records"
            " · $12000.00 awarded · $7000.00 disbursed"
            " (due-soon window changed from 14 to 21 days)"
        )
        assert lines[4].startswith("Previous snapshot: 2025-07-02T00:00:00+00:00 · 4 records")
        assert "Delta: records +1 · awarded +$1000.00 · disbursed +$300.00" in lines
        assert "Pace mix: Ahead +0 · On track +1 · Behind +0" in lines
        assert "Check-ins: Overdue +0 · Due soon +1" in lines
        assert "Risk mix: High +0 · Medium +1 · Low +0" in lines

    def test_text_without_window_change(
        self, trend_pair: tuple[StoredSnapshot, StoredSnapshot], now: datetime
    ) -> None:
        """Test no note when the windows match."""
        _, previous = trend_pair

        text = build_trend_text(previous, previous, now)

        assert "window changed" not in text
        assert "Delta: records +0" in text

    def test_json_trend(
        self,
        trend_pair: tuple[StoredSnapshot, StoredSnapshot],
        now: datetime,
        tmp_path: Path,
    ) -> None:
        """Test the JSON trend document."""
        current, previous = trend_pair
        target = tmp_path / "trend.json"

        write_trend_report(target, current, previous, now)
        data = json.loads(target.read_text(encoding="utf-8"))

        assert data["window_changed"] is True
        assert data["current"]["snapshot_id"] == 8
        assert data["previous"]["checkin_window_days"] == 14
        assert data["delta"]["count"] == 1
        assert data["delta"]["total_disbursed"] == pytest.approx(300.0)

"""Test fixtures for award-pacing.

Provides fixtures for:
- A fixed evaluation timestamp
- Record and item factories
- The sample disbursement file (four awards covering every pace and check-in label)
"""

from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest

from award_pacing.models import AwardItem, Record
from award_pacing.pacing import build_items
from award_pacing.storage.records import load_records

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Sample file expectations at NOW with a 14-day window:
#   Avery Chen   Behind / Overdue     -> High (4)
#   Jordan Patel On Track / Due Soon  -> Low (1)
#   Riley Gomez  Ahead / Scheduled    -> Low (-1)
#   Casey Lin    Behind / Unscheduled -> High (3)
NOW = datetime(2025, 7, 2, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    """Fixed reference timestamp (2025-07-02 00:00 UTC)."""
    return NOW


@pytest.fixture
def sample_data_path() -> Path:
    """Path to the sample disbursement file."""
    return FIXTURES_DIR / "disbursements.json"


@pytest.fixture
def sample_config_path() -> Path:
    """Path to a complete config file."""
    return FIXTURES_DIR / "valid_config.yaml"


@pytest.fixture
def sample_records(sample_data_path: Path) -> list[Record]:
    """Records from the sample file, in file order."""
    return load_records(sample_data_path)


@pytest.fixture
def sample_items(sample_records: list[Record], now: datetime) -> list[AwardItem]:
    """Items for the sample records at NOW with a 14-day window."""
    return build_items(sample_records, now, 14)


@pytest.fixture
def make_record() -> Callable[..., Record]:
    """Factory for records with a one-year award period and sensible defaults."""

    def _make(**overrides: Any) -> Record:
        values: dict[str, Any] = {
            "scholar": "Test Scholar",
            "cohort": "2025 Fall",
            "owner": "Maya R.",
            "status": "Active",
            "amount": 1000.0,
            "disbursed_to_date": 500.0,
            "award_date": "2025-01-01",
            "target_date": "2026-01-01",
            "next_checkin": "2025-08-15",
            "notes": "",
        }
        values.update(overrides)
        return Record(**values)

    return _make

"""Tests for loading records from JSON."""

import json
from pathlib import Path

import pytest

from award_pacing.models import Record
from award_pacing.storage.records import RecordLoadError, load_records


def _write(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestLoadRecords:
    """Tests for load_records."""

    def test_loads_sample_file(self, sample_data_path: Path) -> None:
        """Test the sample file loads in order."""
        records = load_records(sample_data_path)

        assert len(records) == 4
        assert records[0].scholar == "Avery Chen"
        assert records[0].amount == 1000.0

    def test_numeric_strings_coerced(self, sample_data_path: Path) -> None:
        """Test string amounts become floats."""
        riley = load_records(sample_data_path)[2]

        assert riley.amount == 5000.0
        assert isinstance(riley.amount, float)

    def test_missing_keys_default(self, tmp_path: Path) -> None:
        """Test absent keys become empty strings and zero amounts."""
        path = _write(tmp_path / "sparse.json", [{"scholar": "Only Name"}])

        (record,) = load_records(path)

        assert record == Record(scholar="Only Name")
        assert record.notes == ""
        assert record.disbursed_to_date == 0.0

    def test_empty_array(self, tmp_path: Path) -> None:
        """Test an empty array is a valid, empty record set."""
        assert load_records(_write(tmp_path / "empty.json", [])) == []

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Records file not found"):
            load_records(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Test malformed JSON raises RecordLoadError."""
        path = tmp_path / "broken.json"
        path.write_text("[{", encoding="utf-8")

        with pytest.raises(RecordLoadError, match="Invalid JSON"):
            load_records(path)

    def test_top_level_object_rejected(self, tmp_path: Path) -> None:
        """Test a JSON object instead of an array is rejected."""
        path = _write(tmp_path / "object.json", {"records": []})

        with pytest.raises(RecordLoadError, match="JSON array"):
            load_records(path)

    def test_non_object_entry_rejected(self, tmp_path: Path) -> None:
        """Test array entries must be objects."""
        path = _write(tmp_path / "mixed.json", [{"scholar": "A"}, "B"])

        with pytest.raises(RecordLoadError, match="Record 1"):
            load_records(path)

    def test_non_numeric_amount_rejected(self, tmp_path: Path) -> None:
        """Test a non-numeric amount is reported with its index."""
        path = _write(tmp_path / "bad_amount.json", [{"scholar": "A", "amount": "lots"}])

        with pytest.raises(RecordLoadError, match="Record 0"):
            load_records(path)

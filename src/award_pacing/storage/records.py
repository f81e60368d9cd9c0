"""Load disbursement records from a JSON file."""

import json
import logging
from pathlib import Path

from award_pacing.models import Record

logger = logging.getLogger(__name__)


class RecordLoadError(Exception):
    """Raised when a records file exists but can't be turned into records."""


def load_records(path: Path) -> list[Record]:
    """Read a JSON array of disbursement records.

    Missing keys take empty or zero defaults and numeric strings are coerced
    to floats (see :meth:`Record.from_dict`).

    Args:
        path: Path to the JSON file.

    Returns:
        Records in file order.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        RecordLoadError: If the file isn't valid JSON, isn't a list of
            objects, or holds a non-numeric amount.
    """
    if not path.exists():
        msg = f"Records file not found: {path}"
        raise FileNotFoundError(msg)

    try:
        with path.open(encoding="utf-8") as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON in {path}: {e}"
        raise RecordLoadError(msg) from e

    if not isinstance(payload, list):
        msg = f"Expected a JSON array of records in {path}, got {type(payload).__name__}"
        raise RecordLoadError(msg)

    records: list[Record] = []
    for index, entry in enumerate(payload):
        if not isinstance(entry, dict):
            msg = f"Record {index} in {path} is not an object"
            raise RecordLoadError(msg)
        try:
            records.append(Record.from_dict(entry))
        except (TypeError, ValueError) as e:
            msg = f"Record {index} in {path} is invalid: {e}"
            raise RecordLoadError(msg) from e

    logger.info("Loaded %d records from %s", len(records), path)
    return records

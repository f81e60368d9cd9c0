"""Export award item snapshots to JSON, CSV or Parquet.

The output format follows the file extension:
    .json    - one document with ``generated_at``, ``checkin_window_days``,
               ``summary`` and ``items``
    .csv     - a summary header and row, then an item header and rows
    .parquet - one row per item; summary and window in the schema metadata

A path without an extension gets ``.csv`` appended.
"""

import csv
import json
import logging
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

import pyarrow as pa

from award_pacing.metrics.summary import SummaryMetrics
from award_pacing.models import AwardItem, CheckinLabel
from award_pacing.storage.parquet_writer import ParquetWriter

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_SUFFIX = ".csv"
SUPPORTED_EXPORT_SUFFIXES = (".json", ".csv", ".parquet")

SUMMARY_CSV_HEADER = [
    "generated_at",
    "checkin_window_days",
    "summary_count",
    "summary_total_awarded",
    "summary_total_disbursed",
    "summary_total_expected",
    "summary_total_gap",
    "summary_completion",
    "summary_ahead",
    "summary_on_track",
    "summary_behind",
    "summary_overdue",
    "summary_due_soon",
    "summary_high",
    "summary_medium",
    "summary_low",
]

ITEM_FIELDS = [
    "scholar",
    "cohort",
    "owner",
    "status",
    "amount",
    "disbursed_to_date",
    "award_date",
    "target_date",
    "next_checkin",
    "pace_label",
    "pace_percent",
    "pace_delta",
    "expected_percent",
    "expected_amount",
    "gap_amount",
    "checkin_label",
    "checkin_days",
    "risk_level",
    "risk_score",
    "risk_flags",
    "notes",
]

ITEM_SCHEMA = pa.schema(
    [
        ("scholar", pa.string()),
        ("cohort", pa.string()),
        ("owner", pa.string()),
        ("status", pa.string()),
        ("amount", pa.float64()),
        ("disbursed_to_date", pa.float64()),
        ("award_date", pa.string()),
        ("target_date", pa.string()),
        ("next_checkin", pa.string()),
        ("pace_label", pa.string()),
        ("pace_percent", pa.float64()),
        ("pace_delta", pa.float64()),
        ("expected_percent", pa.float64()),
        ("expected_amount", pa.float64()),
        ("gap_amount", pa.float64()),
        ("checkin_label", pa.string()),
        ("checkin_days", pa.int32()),
        ("risk_level", pa.string()),
        ("risk_score", pa.int32()),
        ("risk_flags", pa.list_(pa.string())),
        ("notes", pa.string()),
    ]
)


def format_timestamp(value: datetime) -> str:
    """ISO 8601 timestamp to the second."""
    return value.isoformat(timespec="seconds")


def resolve_export_path(path: Path) -> tuple[Path, str]:
    """Return the final export path and its lower-cased suffix.

    Raises:
        ValueError: If the suffix isn't a supported export format.
    """
    suffix = path.suffix.lower()
    if not suffix:
        path = path.with_name(path.name + DEFAULT_EXPORT_SUFFIX)
        suffix = DEFAULT_EXPORT_SUFFIX

    if suffix not in SUPPORTED_EXPORT_SUFFIXES:
        msg = f"unsupported export format: {suffix}"
        raise ValueError(msg)
    return path, suffix


def item_to_dict(item: AwardItem) -> dict[str, Any]:
    """Flatten an item into an export row.

    ``checkin_days`` is None for unscheduled check-ins.
    """
    record = item.record
    checkin_days = None
    if item.checkin.label is not CheckinLabel.UNSCHEDULED:
        checkin_days = item.checkin.days_until
    return {
        "scholar": record.scholar,
        "cohort": record.cohort,
        "owner": record.owner,
        "status": record.status,
        "amount": record.amount,
        "disbursed_to_date": record.disbursed_to_date,
        "award_date": record.award_date,
        "target_date": record.target_date,
        "next_checkin": record.next_checkin,
        "pace_label": item.pace.label.value,
        "pace_percent": item.pace.percent,
        "pace_delta": item.pace.delta,
        "expected_percent": item.pace.expected,
        "expected_amount": item.pace.expected_amount,
        "gap_amount": item.pace.gap_amount,
        "checkin_label": item.checkin.label.value,
        "checkin_days": checkin_days,
        "risk_level": item.risk.level.value,
        "risk_score": item.risk.score,
        "risk_flags": list(item.risk.flags),
        "notes": record.notes,
    }


def build_export_payload(
    items: Sequence[AwardItem],
    metrics: SummaryMetrics,
    generated_at: datetime,
) -> dict[str, Any]:
    """JSON export document.

    Unscheduled items have no ``checkin_days`` key at all.
    """
    rows = []
    for item in items:
        row = item_to_dict(item)
        if row["checkin_days"] is None:
            del row["checkin_days"]
        rows.append(row)

    return {
        "generated_at": format_timestamp(generated_at),
        "checkin_window_days": metrics.window,
        "summary": metrics.to_dict(),
        "items": rows,
    }


def _write_json(data: dict[str, Any], path: Path) -> None:
    """Write data to JSON file with pretty formatting."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")


def _summary_csv_row(metrics: SummaryMetrics, generated_at: datetime) -> list[str]:
    return [
        format_timestamp(generated_at),
        str(metrics.window),
        str(metrics.count),
        f"{metrics.total_awarded:.2f}",
        f"{metrics.total_disbursed:.2f}",
        f"{metrics.total_expected:.2f}",
        f"{metrics.total_gap:.2f}",
        f"{metrics.completion:.4f}",
        str(metrics.ahead),
        str(metrics.on_track),
        str(metrics.behind),
        str(metrics.overdue),
        str(metrics.due_soon),
        str(metrics.high),
        str(metrics.medium),
        str(metrics.low),
    ]


def _item_csv_row(item: AwardItem) -> list[str]:
    row = item_to_dict(item)
    return [
        row["scholar"],
        row["cohort"],
        row["owner"],
        row["status"],
        f"{row['amount']:.2f}",
        f"{row['disbursed_to_date']:.2f}",
        row["award_date"],
        row["target_date"],
        row["next_checkin"],
        row["pace_label"],
        f"{row['pace_percent']:.4f}",
        f"{row['pace_delta']:.4f}",
        f"{row['expected_percent']:.4f}",
        f"{row['expected_amount']:.2f}",
        f"{row['gap_amount']:.2f}",
        row["checkin_label"],
        "" if row["checkin_days"] is None else str(row["checkin_days"]),
        row["risk_level"],
        str(row["risk_score"]),
        "; ".join(row["risk_flags"]),
        row["notes"],
    ]


def _write_csv(
    path: Path,
    items: Sequence[AwardItem],
    metrics: SummaryMetrics,
    generated_at: datetime,
) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(SUMMARY_CSV_HEADER)
        writer.writerow(_summary_csv_row(metrics, generated_at))
        writer.writerow(ITEM_FIELDS)
        for item in items:
            writer.writerow(_item_csv_row(item))


def _write_parquet(
    path: Path,
    items: Sequence[AwardItem],
    metrics: SummaryMetrics,
    generated_at: datetime,
) -> None:
    table = pa.Table.from_pylist([item_to_dict(item) for item in items], schema=ITEM_SCHEMA)
    ParquetWriter().write(
        table,
        path,
        metadata={
            "generated_at": format_timestamp(generated_at),
            "checkin_window_days": str(metrics.window),
            "summary": json.dumps(metrics.to_dict()),
        },
    )


def export_snapshot(
    path: Path,
    items: Sequence[AwardItem],
    metrics: SummaryMetrics,
    generated_at: datetime,
) -> Path:
    """Write a snapshot of ``items`` in the format implied by ``path``.

    Args:
        path: Output path; ``.json``, ``.csv``, ``.parquet`` or no suffix.
        items: Items to export, in output order.
        metrics: Summary for ``items``; its window is exported alongside.
        generated_at: Snapshot timestamp.

    Returns:
        The path actually written (with ``.csv`` appended if needed).

    Raises:
        ValueError: If the suffix isn't a supported export format.
    """
    path, suffix = resolve_export_path(path)

    if suffix == ".json":
        _write_json(build_export_payload(items, metrics, generated_at), path)
    elif suffix == ".csv":
        _write_csv(path, items, metrics, generated_at)
    else:
        _write_parquet(path, items, metrics, generated_at)

    logger.info("Exported %d awards to %s", len(items), path)
    return path

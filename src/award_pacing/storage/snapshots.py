"""Postgres snapshot store.

Each sync writes one ``pacing_snapshots`` row holding the summary counts and
one ``pacing_awards`` row per item. The newest snapshot can be read back as
records (``--source db``) and the two newest as summaries for trend reports.
"""

import logging
import os
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import psycopg
from psycopg.rows import dict_row

from award_pacing.config import DatabaseConfig
from award_pacing.metrics.summary import SummaryMetrics
from award_pacing.models import AwardItem, CheckinLabel, Record
from award_pacing.pacing.dates import parse_date

logger = logging.getLogger(__name__)

DEFAULT_DSN_ENV: tuple[str, ...] = ("AWARD_PACING_DATABASE_URL", "DATABASE_URL")
DEFAULT_SCHEMA = "award_pacing"

_SCHEMA_RE = re.compile(r"^[a-z_][a-z0-9_]*$")

_SNAPSHOTS_DDL = """
CREATE TABLE IF NOT EXISTS {schema}.pacing_snapshots (
    id BIGSERIAL PRIMARY KEY,
    generated_at TIMESTAMPTZ NOT NULL,
    record_count INT NOT NULL,
    due_soon_window INT NOT NULL,
    total_awarded NUMERIC(12,2) NOT NULL,
    total_disbursed NUMERIC(12,2) NOT NULL,
    ahead_count INT NOT NULL,
    on_track_count INT NOT NULL,
    behind_count INT NOT NULL,
    overdue_count INT NOT NULL,
    due_soon_count INT NOT NULL,
    high_risk_count INT NOT NULL,
    medium_risk_count INT NOT NULL,
    low_risk_count INT NOT NULL
)
"""

_AWARDS_DDL = """
CREATE TABLE IF NOT EXISTS {schema}.pacing_awards (
    id BIGSERIAL PRIMARY KEY,
    snapshot_id BIGINT NOT NULL REFERENCES {schema}.pacing_snapshots(id) ON DELETE CASCADE,
    scholar TEXT NOT NULL,
    cohort TEXT NOT NULL,
    owner TEXT NOT NULL,
    status TEXT NOT NULL,
    amount NUMERIC(12,2) NOT NULL,
    disbursed_to_date NUMERIC(12,2) NOT NULL,
    award_date DATE,
    target_date DATE,
    next_checkin DATE,
    pace_label TEXT NOT NULL,
    pace_delta NUMERIC(8,4) NOT NULL,
    pace_percent NUMERIC(8,4) NOT NULL,
    expected_percent NUMERIC(8,4) NOT NULL,
    risk_level TEXT NOT NULL,
    risk_score INT NOT NULL,
    checkin_label TEXT NOT NULL,
    checkin_days INT,
    notes TEXT NOT NULL
)
"""

# Columns added after the first release of the tables.
_MIGRATIONS = (
    "ALTER TABLE {schema}.pacing_snapshots"
    " ADD COLUMN IF NOT EXISTS total_expected NUMERIC(12,2) NOT NULL DEFAULT 0",
    "ALTER TABLE {schema}.pacing_snapshots"
    " ADD COLUMN IF NOT EXISTS total_gap NUMERIC(12,2) NOT NULL DEFAULT 0",
    "ALTER TABLE {schema}.pacing_snapshots"
    " ADD COLUMN IF NOT EXISTS completion NUMERIC(8,4) NOT NULL DEFAULT 0",
    "ALTER TABLE {schema}.pacing_awards"
    " ADD COLUMN IF NOT EXISTS expected_amount NUMERIC(12,2) NOT NULL DEFAULT 0",
    "ALTER TABLE {schema}.pacing_awards"
    " ADD COLUMN IF NOT EXISTS gap_amount NUMERIC(12,2) NOT NULL DEFAULT 0",
    "ALTER TABLE {schema}.pacing_awards"
    " ADD COLUMN IF NOT EXISTS risk_flags TEXT[] NOT NULL DEFAULT '{{}}'::text[]",
)

_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS pacing_awards_snapshot_idx"
    " ON {schema}.pacing_awards(snapshot_id)"
)

_SNAPSHOT_COLUMNS = (
    "generated_at",
    "record_count",
    "due_soon_window",
    "total_awarded",
    "total_disbursed",
    "total_expected",
    "total_gap",
    "completion",
    "ahead_count",
    "on_track_count",
    "behind_count",
    "overdue_count",
    "due_soon_count",
    "high_risk_count",
    "medium_risk_count",
    "low_risk_count",
)

_AWARD_COLUMNS = (
    "snapshot_id",
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
    "pace_delta",
    "pace_percent",
    "expected_percent",
    "expected_amount",
    "gap_amount",
    "risk_level",
    "risk_score",
    "risk_flags",
    "checkin_label",
    "checkin_days",
    "notes",
)


class SnapshotStoreError(Exception):
    """Raised when the snapshot store can't be used or holds too little data."""


def resolve_dsn(
    explicit: str | None = None,
    env_vars: Sequence[str] = DEFAULT_DSN_ENV,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the connection string: explicit value first, then each env var in order.

    Raises:
        SnapshotStoreError: If no non-blank DSN is found.
    """
    if explicit and explicit.strip():
        return explicit.strip()

    env = os.environ if environ is None else environ
    for name in env_vars:
        value = env.get(name, "").strip()
        if value:
            logger.debug("Using database DSN from %s", name)
            return value

    names = ", ".join(env_vars)
    msg = f"No database connection string: pass --db-url or set one of {names}"
    raise SnapshotStoreError(msg)


def validate_schema_name(schema: str) -> str:
    """Schema names are interpolated into SQL, so only plain identifiers pass."""
    if not _SCHEMA_RE.match(schema):
        msg = f"Invalid schema name: {schema!r}"
        raise SnapshotStoreError(msg)
    return schema


@dataclass(frozen=True)
class StoredSnapshot:
    """One ``pacing_snapshots`` row as a summary.

    Upcoming check-ins are not persisted, so ``metrics.upcoming`` is empty.
    """

    snapshot_id: int
    generated_at: datetime
    metrics: SummaryMetrics

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "snapshot_id": self.snapshot_id,
            "generated_at": self.generated_at.isoformat(),
            "checkin_window_days": self.metrics.window,
            **self.metrics.to_dict(),
        }


def _award_row(snapshot_id: int, item: AwardItem) -> tuple[Any, ...]:
    record = item.record
    checkin_days = None
    if item.checkin.label is not CheckinLabel.UNSCHEDULED:
        checkin_days = item.checkin.days_until
    return (
        snapshot_id,
        record.scholar,
        record.cohort,
        record.owner,
        record.status,
        record.amount,
        record.disbursed_to_date,
        parse_date(record.award_date),
        parse_date(record.target_date),
        parse_date(record.next_checkin),
        item.pace.label.value,
        item.pace.delta,
        item.pace.percent,
        item.pace.expected,
        item.pace.expected_amount,
        item.pace.gap_amount,
        item.risk.level.value,
        item.risk.score,
        list(item.risk.flags),
        item.checkin.label.value,
        checkin_days,
        record.notes,
    )


def _snapshot_from_row(row: Mapping[str, Any]) -> StoredSnapshot:
    metrics = SummaryMetrics(
        count=int(row["record_count"]),
        total_awarded=float(row["total_awarded"]),
        total_disbursed=float(row["total_disbursed"]),
        total_expected=float(row["total_expected"]),
        total_gap=float(row["total_gap"]),
        completion=float(row["completion"]),
        ahead=int(row["ahead_count"]),
        on_track=int(row["on_track_count"]),
        behind=int(row["behind_count"]),
        overdue=int(row["overdue_count"]),
        due_soon=int(row["due_soon_count"]),
        high=int(row["high_risk_count"]),
        medium=int(row["medium_risk_count"]),
        low=int(row["low_risk_count"]),
        window=int(row["due_soon_window"]),
    )
    return StoredSnapshot(
        snapshot_id=int(row["id"]),
        generated_at=row["generated_at"],
        metrics=metrics,
    )


def _format_date(value: Any) -> str:
    if value is None:
        return ""
    return value.strftime("%Y-%m-%d")


class SnapshotStore:
    """Reads and writes pacing snapshots in Postgres.

    Example:
        store = SnapshotStore(resolve_dsn(db_url))
        snapshot_id = store.sync_snapshot(items, metrics, generated_at)
        current, previous = store.load_trend_snapshots()
    """

    def __init__(
        self,
        dsn: str,
        schema: str = DEFAULT_SCHEMA,
        connect_timeout: int = 15,
    ) -> None:
        """Initialize store.

        Args:
            dsn: Postgres connection string.
            schema: Schema holding the pacing tables.
            connect_timeout: Connection timeout in seconds.
        """
        self.dsn = dsn
        self.schema = validate_schema_name(schema)
        self.connect_timeout = connect_timeout

    @classmethod
    def from_config(cls, config: DatabaseConfig, dsn: str | None = None) -> "SnapshotStore":
        """Build a store from the ``database`` config section and an optional explicit DSN."""
        return cls(
            resolve_dsn(dsn, config.dsn_env),
            schema=config.schema_name,
            connect_timeout=config.connect_timeout_seconds,
        )

    def connect(self) -> psycopg.Connection:
        """Open a new connection."""
        logger.debug("Connecting to %s", self.dsn)
        return psycopg.connect(self.dsn, connect_timeout=self.connect_timeout)

    def ensure_schema(self, conn: psycopg.Connection) -> None:
        """Create the schema, tables and index if missing and apply column migrations."""
        statements = [
            f"CREATE SCHEMA IF NOT EXISTS {self.schema}",
            _SNAPSHOTS_DDL,
            _AWARDS_DDL,
            *_MIGRATIONS,
            _INDEX_DDL,
        ]
        with conn.cursor() as cur:
            for statement in statements:
                cur.execute(statement.format(schema=self.schema))
        conn.commit()

    def sync_snapshot(
        self,
        items: Iterable[AwardItem],
        metrics: SummaryMetrics,
        generated_at: datetime,
    ) -> int:
        """Write one snapshot and its award rows in a single transaction.

        Args:
            items: Items the metrics were computed from.
            metrics: Summary for ``items``; its window is stored with the snapshot.
            generated_at: Snapshot timestamp.

        Returns:
            New snapshot id.
        """
        items = list(items)
        snapshot_values = (
            generated_at,
            metrics.count,
            metrics.window,
            metrics.total_awarded,
            metrics.total_disbursed,
            metrics.total_expected,
            metrics.total_gap,
            metrics.completion,
            metrics.ahead,
            metrics.on_track,
            metrics.behind,
            metrics.overdue,
            metrics.due_soon,
            metrics.high,
            metrics.medium,
            metrics.low,
        )
        snapshot_sql = (
            f"INSERT INTO {self.schema}.pacing_snapshots ({', '.join(_SNAPSHOT_COLUMNS)})"
            f" VALUES ({', '.join(['%s'] * len(_SNAPSHOT_COLUMNS))}) RETURNING id"
        )
        award_sql = (
            f"INSERT INTO {self.schema}.pacing_awards ({', '.join(_AWARD_COLUMNS)})"
            f" VALUES ({', '.join(['%s'] * len(_AWARD_COLUMNS))})"
        )

        with self.connect() as conn:
            self.ensure_schema(conn)
            with conn.transaction(), conn.cursor() as cur:
                cur.execute(snapshot_sql, snapshot_values)
                row = cur.fetchone()
                if row is None:
                    msg = "Snapshot insert returned no id"
                    raise SnapshotStoreError(msg)
                snapshot_id = int(row[0])
                if items:
                    cur.executemany(award_sql, [_award_row(snapshot_id, item) for item in items])

        logger.info("Synced %d awards to snapshot %d", len(items), snapshot_id)
        return snapshot_id

    def load_latest_records(self) -> list[Record]:
        """Records of the newest snapshot, ordered by scholar.

        Raises:
            SnapshotStoreError: If no snapshot has been stored.
        """
        with self.connect() as conn, conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                f"SELECT id FROM {self.schema}.pacing_snapshots"
                " ORDER BY generated_at DESC, id DESC LIMIT 1"
            )
            latest = cur.fetchone()
            if latest is None:
                msg = "No stored snapshots to load records from"
                raise SnapshotStoreError(msg)

            cur.execute(
                "SELECT scholar, cohort, owner, status, amount, disbursed_to_date,"
                " award_date, target_date, next_checkin, notes"
                f" FROM {self.schema}.pacing_awards WHERE snapshot_id = %s"
                " ORDER BY scholar ASC",
                (latest["id"],),
            )
            rows = cur.fetchall()

        records = [
            Record(
                scholar=row["scholar"],
                cohort=row["cohort"],
                owner=row["owner"],
                status=row["status"],
                amount=float(row["amount"]),
                disbursed_to_date=float(row["disbursed_to_date"]),
                award_date=_format_date(row["award_date"]),
                target_date=_format_date(row["target_date"]),
                next_checkin=_format_date(row["next_checkin"]),
                notes=row["notes"],
            )
            for row in rows
        ]
        logger.info("Loaded %d records from snapshot %s", len(records), latest["id"])
        return records

    def load_trend_snapshots(self) -> tuple[StoredSnapshot, StoredSnapshot]:
        """The two newest snapshots as ``(current, previous)``.

        Raises:
            SnapshotStoreError: If fewer than two snapshots are stored.
        """
        with self.connect() as conn, conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                f"SELECT id, {', '.join(_SNAPSHOT_COLUMNS)}"
                f" FROM {self.schema}.pacing_snapshots"
                " ORDER BY generated_at DESC, id DESC LIMIT 2"
            )
            rows = cur.fetchall()

        if len(rows) < 2:
            msg = f"Trend reports need two stored snapshots, found {len(rows)}"
            raise SnapshotStoreError(msg)

        current, previous = (_snapshot_from_row(row) for row in rows)
        return current, previous

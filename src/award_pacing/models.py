"""Record and derived-status types shared across the pacing engine.

Records are the raw disbursement rows as loaded from JSON or the snapshot
store. Everything else in this module is derived from a record for one
``(now, window)`` pair and is immutable: a refresh rebuilds the items, it
never edits them.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any


class PaceLabel(str, Enum):
    """Disbursement pace relative to elapsed award time."""

    AHEAD = "Ahead"
    ON_TRACK = "On Track"
    BEHIND = "Behind"


class CheckinLabel(str, Enum):
    """Urgency of the next scheduled check-in."""

    UNSCHEDULED = "Unscheduled"
    SCHEDULED = "Scheduled"
    DUE_SOON = "Due Soon"
    OVERDUE = "Overdue"


class RiskLevel(str, Enum):
    """Composite risk bucket."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_amount(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    return float(value)


@dataclass(frozen=True)
class Record:
    """One scholarship disbursement record.

    Dates are kept as the raw strings from the source; parsing (and the
    fallbacks for empty or malformed values) belongs to the calculators.
    """

    scholar: str = ""
    cohort: str = ""
    owner: str = ""
    status: str = ""
    amount: float = 0.0
    disbursed_to_date: float = 0.0
    award_date: str = ""
    target_date: str = ""
    next_checkin: str = ""
    notes: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Record":
        """Create from a JSON-style dictionary.

        Missing keys fall back to empty strings and zero amounts.

        Raises:
            ValueError: If an amount is present but not numeric.
        """
        return cls(
            scholar=_as_text(data.get("scholar")),
            cohort=_as_text(data.get("cohort")),
            owner=_as_text(data.get("owner")),
            status=_as_text(data.get("status")),
            amount=_as_amount(data.get("amount")),
            disbursed_to_date=_as_amount(data.get("disbursed_to_date")),
            award_date=_as_text(data.get("award_date")),
            target_date=_as_text(data.get("target_date")),
            next_checkin=_as_text(data.get("next_checkin")),
            notes=_as_text(data.get("notes")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "scholar": self.scholar,
            "cohort": self.cohort,
            "owner": self.owner,
            "status": self.status,
            "amount": self.amount,
            "disbursed_to_date": self.disbursed_to_date,
            "award_date": self.award_date,
            "target_date": self.target_date,
            "next_checkin": self.next_checkin,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class PaceStatus:
    """Disbursed fraction compared with the elapsed fraction of the award period.

    Attributes:
        label: Ahead / On Track / Behind.
        percent: Fraction disbursed, clamped to [0, 1].
        expected: Fraction of the award period elapsed, clamped to [0, 1].
        delta: percent - expected.
        expected_amount: amount * expected.
        gap_amount: disbursed - expected_amount (negative means behind).
    """

    label: PaceLabel
    percent: float = 0.0
    expected: float = 0.0
    delta: float = 0.0
    expected_amount: float = 0.0
    gap_amount: float = 0.0


@dataclass(frozen=True)
class CheckinStatus:
    """Next check-in classification.

    ``days_until`` and ``checkin_date`` are None when the check-in is unscheduled.
    """

    label: CheckinLabel
    days_until: int | None = None
    checkin_date: date | None = None


@dataclass(frozen=True)
class RiskStatus:
    """Composite risk score with the reasons that raised it."""

    level: RiskLevel
    score: int = 0
    flags: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AwardItem:
    """A record together with its derived pace, check-in and risk status."""

    record: Record
    pace: PaceStatus
    checkin: CheckinStatus
    risk: RiskStatus

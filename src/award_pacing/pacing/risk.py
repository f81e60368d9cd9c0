"""Composite risk scoring from pace and check-in signals."""

from award_pacing.models import (
    CheckinLabel,
    CheckinStatus,
    PaceLabel,
    PaceStatus,
    RiskLevel,
    RiskStatus,
)

HIGH_RISK_SCORE = 3
MEDIUM_RISK_SCORE = 2


def risk_level(score: int) -> RiskLevel:
    """Bucket a risk score."""
    if score >= HIGH_RISK_SCORE:
        return RiskLevel.HIGH
    if score >= MEDIUM_RISK_SCORE:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def calculate_risk(pace: PaceStatus, checkin: CheckinStatus) -> RiskStatus:
    """Score a record's risk.

    Scoring:
        - Behind pace: +2
        - Check-in overdue: +2
        - Check-in due soon: +1
        - Check-in unscheduled: +1
        - Ahead of pace: -1 (no flag)

    Flags are appended in that order.
    """
    score = 0
    flags: list[str] = []

    if pace.label is PaceLabel.BEHIND:
        score += 2
        flags.append("Behind pace")
    if checkin.label is CheckinLabel.OVERDUE:
        score += 2
        flags.append("Check-in overdue")
    if checkin.label is CheckinLabel.DUE_SOON:
        score += 1
        flags.append("Check-in due soon")
    if checkin.label is CheckinLabel.UNSCHEDULED:
        score += 1
        flags.append("Check-in unscheduled")
    if pace.label is PaceLabel.AHEAD:
        score -= 1

    return RiskStatus(level=risk_level(score), score=score, flags=tuple(flags))

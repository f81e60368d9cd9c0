"""Check-in urgency classification."""

from datetime import datetime

from award_pacing.models import CheckinLabel, CheckinStatus, Record
from award_pacing.pacing.dates import parse_date


def calculate_checkin(record: Record, now: datetime, window_days: int) -> CheckinStatus:
    """Classify the record's next check-in relative to ``now``.

    Both sides are compared as calendar dates, so the time of day in ``now``
    never shifts the day count.

    Args:
        record: Disbursement record.
        now: Reference timestamp.
        window_days: Days ahead within which a check-in counts as due soon.

    Returns:
        CheckinStatus; Unscheduled when the date is empty or malformed.
    """
    checkin_date = parse_date(record.next_checkin)
    if checkin_date is None:
        return CheckinStatus(label=CheckinLabel.UNSCHEDULED)

    days_until = (checkin_date - now.date()).days
    if days_until < 0:
        label = CheckinLabel.OVERDUE
    elif days_until <= window_days:
        label = CheckinLabel.DUE_SOON
    else:
        label = CheckinLabel.SCHEDULED

    return CheckinStatus(label=label, days_until=days_until, checkin_date=checkin_date)

"""UTC day and month window boundaries.

"Today" is the half-open range ``[day_start(now), day_end(now))``. The monthly
bucket tag is the ``date`` of the first day of the UTC month.
"""

from datetime import date, datetime, time, timedelta, timezone


def to_utc(now: datetime) -> datetime:
    """Normalize a timestamp to UTC. Naive values are taken to be UTC already."""
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def day_start(now: datetime) -> datetime:
    """UTC midnight of the day containing ``now``."""
    return datetime.combine(to_utc(now).date(), time.min, tzinfo=timezone.utc)


def day_end(now: datetime) -> datetime:
    """Exclusive upper bound of today: the next UTC midnight."""
    return day_start(now) + timedelta(days=1)


def month_start(now: datetime) -> date:
    """First day of the UTC month containing ``now``."""
    return to_utc(now).date().replace(day=1)


def next_month_start(now: datetime) -> datetime:
    """First instant of the UTC month after the one containing ``now``."""
    first = month_start(now)
    if first.month == 12:
        following = first.replace(year=first.year + 1, month=1)
    else:
        following = first.replace(month=first.month + 1)
    return datetime.combine(following, time.min, tzinfo=timezone.utc)

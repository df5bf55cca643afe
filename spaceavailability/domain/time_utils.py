"""
Calendar primitives shared by the availability calculation.

Everything here operates on absolute instants in UTC; no time-zone database
lookups happen in this module.
"""

from datetime import date

import pendulum
from pendulum import DateTime

from .models import Weekday

# Bookable start times are offered in increments of 15 minutes
ROUND_TO_MINUTES = 15


def to_utc_instant(value) -> DateTime:
    """
    Normalize a datetime to a pendulum instant in UTC.

    Naive datetimes are taken to be UTC already.
    """
    return pendulum.instance(value, tz="UTC").in_timezone("UTC")


def round_up_to_interval(instant: DateTime, minutes: int = ROUND_TO_MINUTES) -> DateTime:
    """
    Round an instant strictly up to the next boundary of the minute grid.

    An instant already on a boundary still advances by a full interval
    (15:00 -> 15:15), so the result is always later than the input.
    Seconds are dropped before rounding.
    """
    truncated = instant.set(second=0, microsecond=0)
    return truncated.add(minutes=minutes - truncated.minute % minutes)


def weekday_of(instant: DateTime) -> Weekday:
    """Weekday index (Monday=1 .. Sunday=7) of the instant's calendar date."""
    return Weekday.from_date(instant.date())


def format_date_key(instant: DateTime) -> str:
    """ISO calendar date (yyyy-MM-dd) of the instant in its own frame."""
    return instant.to_date_string()


def calendar_days_between(earlier: date, later: date) -> int:
    """Whole calendar days from one date to another (negative if reversed)."""
    return later.toordinal() - earlier.toordinal()

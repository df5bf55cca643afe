"""
Conversion between a space's local wall-clock times and absolute instants.
"""

from datetime import date
from typing import Protocol

import pendulum
from pendulum import DateTime

from .models import HourMinute


class TimeZoneConverter(Protocol):
    """Protocol describing the zone conversions needed by the calculator."""

    def to_absolute_instant(self, local_date: date, local_time: HourMinute, zone: str) -> DateTime:
        """Return the UTC instant of a wall-clock time on a date in a zone."""

    def to_local_time(self, instant: DateTime, zone: str) -> HourMinute:
        """Return the wall-clock hour and minute of an instant in a zone."""


class PendulumTimeZoneConverter:
    """
    Zone conversions backed by pendulum's IANA database.

    Unknown zone identifiers raise pendulum's ``InvalidTimezone``, which is
    left to propagate to the caller.
    """

    def to_absolute_instant(self, local_date: date, local_time: HourMinute, zone: str) -> DateTime:
        local = pendulum.datetime(
            local_date.year,
            local_date.month,
            local_date.day,
            local_time.hour,
            local_time.minute,
            tz=zone,
        )
        return local.in_timezone("UTC")

    def to_local_time(self, instant: DateTime, zone: str) -> HourMinute:
        local = instant.in_timezone(zone)
        return HourMinute(hour=local.hour, minute=local.minute)

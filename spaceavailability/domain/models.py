"""
Domain models for weekly schedules and per-day availability.
"""

from dataclasses import dataclass, field
from datetime import date, time
from enum import IntEnum
from typing import Any, Dict, Mapping, Optional


class Weekday(IntEnum):
    """Weekday index starting from Monday, independent of locale."""
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    @classmethod
    def from_date(cls, day: date) -> "Weekday":
        """Resolve the weekday of a calendar date (Sunday maps to 7)."""
        return cls(day.isoweekday())


@dataclass(frozen=True)
class HourMinute:
    """
    A wall-clock time of day, interpreted in a space's local time zone.
    """
    hour: int
    minute: int

    @classmethod
    def from_time(cls, value: time) -> "HourMinute":
        return cls(hour=value.hour, minute=value.minute)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HourMinute":
        return cls(hour=int(data["hour"]), minute=int(data["minute"]))

    def to_time(self) -> time:
        return time(hour=self.hour, minute=self.minute)

    def to_dict(self) -> Dict[str, int]:
        return {"hour": self.hour, "minute": self.minute}

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass(frozen=True)
class DailySchedule:
    """
    Opening and closing time for one weekday.

    Either side may be missing, in which case the space is closed that day.
    Values are not validated here; callers supply a schedule where open
    precedes close within the same local day.
    """
    open: Optional[HourMinute] = None
    close: Optional[HourMinute] = None

    @property
    def is_open(self) -> bool:
        return self.open is not None and self.close is not None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "DailySchedule":
        if not data:
            return cls()
        open_data = data.get("open")
        close_data = data.get("close")
        return cls(
            open=HourMinute.from_dict(open_data) if open_data else None,
            close=HourMinute.from_dict(close_data) if close_data else None,
        )


@dataclass(frozen=True)
class Space:
    """
    A bookable space with a recurring weekly schedule.

    opening_times is keyed by weekday index 1..7 (Monday first). A weekday
    absent from the mapping means the space is closed that day.
    """
    time_zone: str
    minimum_notice: int
    opening_times: Mapping[int, DailySchedule] = field(default_factory=dict)
    name: str = ""

    def schedule_for(self, weekday: int) -> Optional[DailySchedule]:
        """Return the schedule for a weekday index, or None when not listed."""
        return self.opening_times.get(int(weekday))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], name: str = "") -> "Space":
        """
        Build a space from a camelCase record.

        Expected shape::

            {
                "timeZone": "America/New_York",
                "minimumNotice": 15,
                "openingTimes": {"1": {"open": {"hour": 9, "minute": 0},
                                       "close": {"hour": 17, "minute": 0}}}
            }
        """
        opening_times = {
            int(weekday): DailySchedule.from_dict(slot)
            for weekday, slot in (data.get("openingTimes") or {}).items()
        }
        return cls(
            time_zone=data["timeZone"],
            minimum_notice=int(data.get("minimumNotice", 0)),
            opening_times=opening_times,
            name=name or data.get("name", ""),
        )


@dataclass(frozen=True)
class OpeningTimes:
    """
    Bookable window for a single date, or an empty marker when closed.
    """
    open: Optional[HourMinute] = None
    close: Optional[HourMinute] = None

    @classmethod
    def closed(cls) -> "OpeningTimes":
        return cls()

    @property
    def is_available(self) -> bool:
        return self.open is not None and self.close is not None

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        if not self.is_available:
            return {}
        return {"open": self.open.to_dict(), "close": self.close.to_dict()}

    def __str__(self) -> str:
        if not self.is_available:
            return "closed"
        return f"{self.open} - {self.close}"


# ISO date (yyyy-MM-dd) -> opening times, in chronological insertion order
AvailabilityCalendar = Dict[str, OpeningTimes]


def calendar_to_dict(calendar: AvailabilityCalendar) -> Dict[str, Dict[str, Dict[str, int]]]:
    """Serialize a calendar to plain dicts for presentation layers."""
    return {day: opening_times.to_dict() for day, opening_times in calendar.items()}

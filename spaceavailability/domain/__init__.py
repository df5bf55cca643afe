"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability_calculator import AvailabilityCalculator, compute_availability
from .exceptions import SpaceAvailabilityError, SpaceConfigError, SpaceNotFoundError
from .models import (
    AvailabilityCalendar,
    DailySchedule,
    HourMinute,
    OpeningTimes,
    Space,
    Weekday,
    calendar_to_dict,
)
from .timezones import PendulumTimeZoneConverter, TimeZoneConverter

__all__ = [
    "AvailabilityCalculator",
    "AvailabilityCalendar",
    "DailySchedule",
    "HourMinute",
    "OpeningTimes",
    "PendulumTimeZoneConverter",
    "Space",
    "SpaceAvailabilityError",
    "SpaceConfigError",
    "SpaceNotFoundError",
    "TimeZoneConverter",
    "Weekday",
    "calendar_to_dict",
    "compute_availability",
]

"""
Core business logic for calculating the availability calendar of a space.

Pure domain logic: no I/O and no wall-clock reads. The reference instant is
always passed in by the caller.
"""

import logging
from datetime import datetime
from typing import Optional

from pendulum import DateTime

from .models import AvailabilityCalendar, DailySchedule, OpeningTimes, Space
from .time_utils import (
    calendar_days_between,
    format_date_key,
    round_up_to_interval,
    to_utc_instant,
    weekday_of,
)
from .timezones import PendulumTimeZoneConverter, TimeZoneConverter

logger = logging.getLogger(__name__)


class AvailabilityCalculator:
    """
    Calculates per-date opening times for a space over a span of days.

    Algorithm, for each day offset i with day_to_check = now + i days:
    1. Resolve the weekday (Monday=1 .. Sunday=7)
    2. Look up the weekly schedule; a missing open or close means closed
    3. Compare the notice-adjusted now with day_to_check in calendar days:
       earlier day -> closed, later day -> raw schedule
    4. On the same day, derive the earliest bookable moment, rounded up
       to the 15 minute grid, and drop the day if it reaches closing time
    """

    def __init__(self, converter: Optional[TimeZoneConverter] = None):
        self.converter = converter or PendulumTimeZoneConverter()

    def compute_availability(
        self,
        space: Space,
        number_of_days: int,
        now: datetime,
    ) -> AvailabilityCalendar:
        """
        Compute the availability calendar for a space.

        Args:
            space: The space to compute availability for
            number_of_days: Number of consecutive days starting at now's date
            now: The reference instant

        Returns:
            Mapping of ISO date (UTC calendar date of now + i days) to the
            opening times for that date, in chronological order
        """
        if number_of_days < 1:
            return {}

        now = to_utc_instant(now)
        now_with_notice = now.add(minutes=space.minimum_notice)

        calendar: AvailabilityCalendar = {}
        for offset in range(number_of_days):
            day_to_check = now.add(days=offset)
            calendar[format_date_key(day_to_check)] = self._calculate_day(
                space=space,
                now_with_notice=now_with_notice,
                day_to_check=day_to_check,
            )

        logger.debug(
            "Computed %d day(s) for space %r from %s (%d available)",
            number_of_days,
            space.name,
            now.to_iso8601_string(),
            sum(1 for opening_times in calendar.values() if opening_times.is_available),
        )
        return calendar

    def _calculate_day(
        self,
        space: Space,
        now_with_notice: DateTime,
        day_to_check: DateTime,
    ) -> OpeningTimes:
        """Opening times for one day, given the notice-adjusted now."""
        schedule = space.schedule_for(weekday_of(day_to_check))
        if schedule is None or not schedule.is_open:
            return OpeningTimes.closed()

        days_ahead = calendar_days_between(now_with_notice.date(), day_to_check.date())
        if days_ahead < 0:
            # Notice pushes the earliest start past this whole day
            return OpeningTimes.closed()
        if days_ahead > 0:
            return OpeningTimes(open=schedule.open, close=schedule.close)

        return self._refine_current_day(
            space=space,
            schedule=schedule,
            now_with_notice=now_with_notice,
            day_to_check=day_to_check,
        )

    def _refine_current_day(
        self,
        space: Space,
        schedule: DailySchedule,
        now_with_notice: DateTime,
        day_to_check: DateTime,
    ) -> OpeningTimes:
        """
        Narrow today's schedule to the earliest bookable start.

        The schedule's open instant is kept when it is still ahead of the
        notice-adjusted now. Otherwise the notice-adjusted now is rounded up
        to the next 15 minute boundary.
        """
        local_date = day_to_check.date()
        open_at = self.converter.to_absolute_instant(local_date, schedule.open, space.time_zone)
        close_at = self.converter.to_absolute_instant(local_date, schedule.close, space.time_zone)

        if open_at > now_with_notice:
            earliest_start = open_at
        else:
            earliest_start = round_up_to_interval(now_with_notice)

        if earliest_start >= close_at:
            return OpeningTimes.closed()

        return OpeningTimes(
            open=self.converter.to_local_time(earliest_start, space.time_zone),
            close=schedule.close,
        )


def compute_availability(
    space: Space,
    number_of_days: int,
    now: datetime,
) -> AvailabilityCalendar:
    """Compute availability with the default pendulum-backed zone converter."""
    return AvailabilityCalculator().compute_availability(space, number_of_days, now)

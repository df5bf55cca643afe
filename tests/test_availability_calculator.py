"""
Tests for the availability calculator.
"""

import json
from datetime import datetime, timezone
from pathlib import Path

import pendulum
import pytest
from pendulum.tz.exceptions import InvalidTimezone

from spaceavailability.domain.availability_calculator import (
    AvailabilityCalculator,
    compute_availability,
)
from spaceavailability.domain.models import (
    DailySchedule,
    HourMinute,
    OpeningTimes,
    Space,
    calendar_to_dict,
)

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"

NINE_TO_FIVE = {"open": {"hour": 9, "minute": 0}, "close": {"hour": 17, "minute": 0}}


def _load_space(name: str) -> Space:
    with open(FIXTURES_DIR / f"{name}.json", "r", encoding="utf-8") as f:
        return Space.from_dict(json.load(f), name=name)


def _weekday_space(time_zone: str = "America/New_York", minimum_notice: int = 0) -> Space:
    schedule = DailySchedule(open=HourMinute(9, 0), close=HourMinute(17, 0))
    return Space(
        time_zone=time_zone,
        minimum_notice=minimum_notice,
        opening_times={day: schedule for day in range(1, 6)},
    )


class TestSpaceWithNoAdvanceNotice:
    """Space in America/New_York, open 09:00-17:00 on weekdays."""

    @pytest.fixture
    def space(self):
        return _load_space("space-with-no-advance-notice")

    def test_after_space_has_opened(self, space):
        """Earliest start is rounded up to the next quarter hour in local time."""
        availability = compute_availability(space, 1, pendulum.datetime(2020, 9, 7, 15, 22))

        assert calendar_to_dict(availability) == {
            "2020-09-07": {
                "open": {"hour": 11, "minute": 30},
                "close": {"hour": 17, "minute": 0},
            }
        }

    def test_rounds_to_next_hour(self, space):
        """Rounding past :45 rolls over into the next hour."""
        availability = compute_availability(space, 1, pendulum.datetime(2020, 9, 7, 15, 48))

        assert calendar_to_dict(availability) == {
            "2020-09-07": {
                "open": {"hour": 12, "minute": 0},
                "close": {"hour": 17, "minute": 0},
            }
        }

    def test_not_available_when_rounded_start_reaches_close(self, space):
        """16:48 local rounds to 17:00, which is closing time."""
        availability = compute_availability(space, 1, pendulum.datetime(2020, 9, 7, 20, 48))

        assert calendar_to_dict(availability) == {"2020-09-07": {}}

    def test_next_eight_days_across_weekend(self, space):
        """Future weekdays return the raw schedule, weekend days are closed."""
        availability = compute_availability(space, 8, pendulum.datetime(2022, 5, 2, 15, 22))

        assert calendar_to_dict(availability) == {
            "2022-05-02": {
                "open": {"hour": 11, "minute": 30},
                "close": {"hour": 17, "minute": 0},
            },
            "2022-05-03": NINE_TO_FIVE,
            "2022-05-04": NINE_TO_FIVE,
            "2022-05-05": NINE_TO_FIVE,
            "2022-05-06": NINE_TO_FIVE,
            "2022-05-07": {},
            "2022-05-08": {},
            "2022-05-09": NINE_TO_FIVE,
        }
        assert list(availability) == sorted(availability)

    def test_before_opening_keeps_schedule_open(self, space):
        """When opening is still ahead, the schedule's open time is used as-is."""
        availability = compute_availability(space, 1, pendulum.datetime(2020, 9, 7, 12, 0))

        assert availability["2020-09-07"] == OpeningTimes(
            open=HourMinute(9, 0), close=HourMinute(17, 0)
        )

    def test_exact_quarter_hour_still_advances(self, space):
        """15:00 local is already aligned but still rounds to 15:15."""
        availability = compute_availability(space, 1, pendulum.datetime(2020, 9, 7, 19, 0))

        assert availability["2020-09-07"].open == HourMinute(15, 15)


class TestSpaceWithAdvanceNotice:
    """Spaces that require notice before a booking may start."""

    def test_fifteen_minute_notice_after_opening(self):
        """10:22Z + 15 min is 12:37 in Berlin, rounded to 12:45."""
        space = _load_space("space-with-15-minutes-advance-notice")

        availability = compute_availability(space, 1, pendulum.datetime(2022, 5, 10, 10, 22))

        assert calendar_to_dict(availability) == {
            "2022-05-10": {
                "open": {"hour": 12, "minute": 45},
                "close": {"hour": 15, "minute": 0},
            }
        }

    def test_three_days_starting_on_weekend(self):
        """Sunday is unlisted, Monday is listed without hours, Tuesday is open."""
        space = _load_space("space-with-15-minutes-advance-notice")

        availability = compute_availability(space, 3, pendulum.datetime(2022, 5, 8, 15, 22))

        assert calendar_to_dict(availability) == {
            "2022-05-08": {},
            "2022-05-09": {},
            "2022-05-10": {
                "open": {"hour": 7, "minute": 0},
                "close": {"hour": 15, "minute": 0},
            },
        }

    def test_thirty_minute_notice_rounds_past_notice(self):
        """13:03Z is 12:03 in Cape Verde, rounded to 12:15."""
        space = _load_space("space-with-30-minutes-advance-notice")

        availability = compute_availability(space, 1, pendulum.datetime(2022, 5, 10, 12, 33))

        assert calendar_to_dict(availability) == {
            "2022-05-10": {
                "open": {"hour": 12, "minute": 15},
                "close": {"hour": 17, "minute": 0},
            }
        }

    def test_notice_longer_than_today(self):
        """Two days of notice leave nothing bookable today."""
        space = _load_space("space-with-2-days-advance-notice")

        availability = compute_availability(space, 1, pendulum.datetime(2022, 5, 10, 10, 22))

        assert calendar_to_dict(availability) == {"2022-05-10": {}}

    def test_notice_days_are_past_then_refined_then_future(self):
        """Days inside the notice window are closed, the notice day is refined."""
        space = _load_space("space-with-2-days-advance-notice")

        availability = compute_availability(space, 4, pendulum.datetime(2022, 5, 10, 10, 22))

        # 2022-05-12T10:22Z is 12:22 in Berlin, rounded to 12:30
        assert calendar_to_dict(availability) == {
            "2022-05-10": {},
            "2022-05-11": {},
            "2022-05-12": {
                "open": {"hour": 12, "minute": 30},
                "close": {"hour": 17, "minute": 0},
            },
            "2022-05-13": NINE_TO_FIVE,
        }

    def test_notice_crossing_utc_midnight(self):
        """Notice that moves past midnight UTC closes the first date."""
        space = _weekday_space(minimum_notice=120)

        # Monday 19:30 in New York, notice ends Tuesday 01:30Z
        availability = compute_availability(space, 2, pendulum.datetime(2020, 9, 7, 23, 30))

        assert calendar_to_dict(availability) == {
            "2020-09-07": {},
            "2020-09-08": NINE_TO_FIVE,
        }


class TestAvailabilityProperties:
    """General guarantees of the calculation."""

    @pytest.mark.parametrize("number_of_days", [0, -1, -30])
    def test_non_positive_span_is_empty(self, number_of_days):
        """No days requested means an empty calendar."""
        space = _weekday_space()

        assert compute_availability(space, number_of_days, pendulum.datetime(2020, 9, 7, 15, 22)) == {}

    def test_result_has_one_entry_per_day(self):
        """Keys are consecutive UTC dates starting at now's date."""
        availability = compute_availability(_weekday_space(), 10, pendulum.datetime(2021, 12, 27, 8, 0))

        assert list(availability) == [
            "2021-12-27", "2021-12-28", "2021-12-29", "2021-12-30", "2021-12-31",
            "2022-01-01", "2022-01-02", "2022-01-03", "2022-01-04", "2022-01-05",
        ]

    def test_date_keys_use_utc_not_space_zone(self):
        """At 02:00Z the New York wall clock is still on the previous day."""
        availability = compute_availability(_weekday_space(), 1, pendulum.datetime(2020, 9, 8, 2, 0))

        assert list(availability) == ["2020-09-08"]

    def test_idempotent(self):
        """Identical inputs produce identical calendars."""
        space = _load_space("space-with-15-minutes-advance-notice")
        now = pendulum.datetime(2022, 5, 10, 10, 22)

        assert compute_availability(space, 14, now) == compute_availability(space, 14, now)

    def test_accepts_standard_library_datetimes(self):
        """Aware and naive datetimes are both treated as instants."""
        space = _weekday_space()
        aware = datetime(2020, 9, 7, 15, 22, tzinfo=timezone.utc)
        naive = datetime(2020, 9, 7, 15, 22)

        expected = OpeningTimes(open=HourMinute(11, 30), close=HourMinute(17, 0))
        assert compute_availability(space, 1, aware)["2020-09-07"] == expected
        assert compute_availability(space, 1, naive)["2020-09-07"] == expected

    def test_rounding_law_for_current_day(self):
        """Today's open is on the 15 minute grid and after the notice-adjusted now."""
        space = _weekday_space(minimum_notice=7)
        start = pendulum.datetime(2020, 9, 7, 13, 0)

        for minutes in range(0, 240, 1):
            now = start.add(minutes=minutes)
            opening_times = compute_availability(space, 1, now)["2020-09-07"]
            if not opening_times.is_available:
                continue

            open_at = pendulum.datetime(
                2020, 9, 7, opening_times.open.hour, opening_times.open.minute, tz="America/New_York"
            )
            assert opening_times.open.minute % 15 == 0
            assert open_at > now.add(minutes=space.minimum_notice)

    def test_boundary_law_never_returns_open_at_or_after_close(self):
        """Near closing time the day flips to closed instead of clamping."""
        space = _weekday_space()

        # 16:44 local rounds to 16:45, 16:45 local rounds to 17:00
        assert compute_availability(space, 1, pendulum.datetime(2020, 9, 7, 20, 44))["2020-09-07"] == OpeningTimes(
            open=HourMinute(16, 45), close=HourMinute(17, 0)
        )
        assert compute_availability(space, 1, pendulum.datetime(2020, 9, 7, 20, 45))["2020-09-07"] == OpeningTimes()

    def test_future_days_ignore_rounding(self):
        """Schedules with off-grid minutes are returned unchanged on future days."""
        schedule = DailySchedule(open=HourMinute(8, 10), close=HourMinute(12, 50))
        space = Space(time_zone="Europe/Berlin", minimum_notice=0, opening_times={3: schedule})

        # Monday; Wednesday is two days ahead
        availability = compute_availability(space, 3, pendulum.datetime(2022, 5, 9, 9, 0))

        assert availability["2022-05-11"] == OpeningTimes(open=HourMinute(8, 10), close=HourMinute(12, 50))

    def test_past_day_is_empty_even_with_schedule(self):
        """A day entirely before the notice-adjusted now is closed."""
        space = _weekday_space(minimum_notice=3 * 24 * 60)

        availability = compute_availability(space, 3, pendulum.datetime(2020, 9, 7, 12, 0))

        assert all(not opening_times.is_available for opening_times in availability.values())

    def test_half_configured_day_is_closed(self):
        """A weekday with only an opening time counts as closed."""
        space = Space(
            time_zone="Europe/Berlin",
            minimum_notice=0,
            opening_times={2: DailySchedule(open=HourMinute(9, 0))},
        )

        availability = compute_availability(space, 1, pendulum.datetime(2022, 5, 10, 6, 0))

        assert availability == {"2022-05-10": OpeningTimes.closed()}

    def test_invalid_time_zone_propagates(self):
        """A broken zone identifier fails the whole call."""
        space = _weekday_space(time_zone="Not/AZone")

        with pytest.raises(InvalidTimezone):
            compute_availability(space, 3, pendulum.datetime(2020, 9, 7, 15, 22))


class FixedOffsetConverter:
    """Converter stub with a fixed UTC offset, no zone database involved."""

    def __init__(self, offset_hours: int):
        self.offset_hours = offset_hours
        self.zones = []

    def to_absolute_instant(self, local_date, local_time, zone):
        self.zones.append(zone)
        local = pendulum.datetime(
            local_date.year, local_date.month, local_date.day, local_time.hour, local_time.minute
        )
        return local.subtract(hours=self.offset_hours)

    def to_local_time(self, instant, zone):
        local = instant.add(hours=self.offset_hours)
        return HourMinute(local.hour, local.minute)


def test_calculator_uses_injected_converter():
    """The zone conversion can be swapped for a stub."""
    calculator = AvailabilityCalculator(converter=FixedOffsetConverter(offset_hours=3))
    space = _weekday_space(time_zone="Custom/Zone")

    availability = calculator.compute_availability(space, 1, pendulum.datetime(2020, 9, 7, 10, 5))

    assert availability["2020-09-07"] == OpeningTimes(open=HourMinute(13, 15), close=HourMinute(17, 0))
    assert calculator.converter.zones == ["Custom/Zone", "Custom/Zone"]

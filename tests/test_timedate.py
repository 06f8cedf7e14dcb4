# Mindful Notifier - Reminder Scheduling Engine
# Copyright (c) 2025-2026 Mindful Notifier contributors
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, version 3 of the License.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.

"""Tests for calendar arithmetic and time-of-day values."""

import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytz

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from reminders.timedate import (
    ONE_DAY_MS,
    Duration,
    TimeOfDay,
    add_duration,
    convert_time_of_day_to_today,
    convert_time_of_day_to_tomorrow,
    convert_time_of_day_to_yesterday,
    midnight,
    subtract_duration,
)

NEW_YORK = pytz.timezone("America/New_York")


class TestDuration:
    """Test duration conversion to milliseconds."""

    def test_empty_duration_is_zero(self):
        assert Duration().total_milliseconds == 0
        assert Duration().to_timedelta() == timedelta(0)

    def test_fixed_conversion_factors(self):
        assert Duration(days=1).total_milliseconds == 86_400_000
        assert Duration(hours=1).total_milliseconds == 3_600_000
        assert Duration(minutes=1).total_milliseconds == 60_000
        assert Duration(seconds=1).total_milliseconds == 1000
        assert Duration(milliseconds=7).total_milliseconds == 7

    def test_components_are_summed(self):
        duration = Duration(days=1, hours=2, minutes=3, seconds=4, milliseconds=5)
        assert duration.to_timedelta() == timedelta(
            days=1, hours=2, minutes=3, seconds=4, milliseconds=5
        )

    def test_signed_components(self):
        assert Duration(hours=1, minutes=-15).to_timedelta() == timedelta(minutes=45)


class TestAddSubtract:
    """Test applying durations to instants."""

    def test_add_naive(self):
        start = datetime(2025, 2, 1, 14, 0)
        assert add_duration(start, Duration(minutes=90)) == datetime(2025, 2, 1, 15, 30)

    def test_subtract_naive(self):
        start = datetime(2025, 2, 1, 0, 10)
        assert subtract_duration(start, Duration(minutes=20)) == datetime(2025, 1, 31, 23, 50)

    def test_add_then_subtract_is_identity(self):
        start = pytz.UTC.localize(datetime(2025, 2, 1, 14, 1, 30))
        duration = Duration(days=2, hours=3, seconds=17)
        assert subtract_duration(add_duration(start, duration), duration) == start

    def test_add_keeps_timezone(self):
        start = NEW_YORK.localize(datetime(2025, 2, 1, 14, 0))
        result = add_duration(start, Duration(hours=1))
        assert result.tzinfo.zone == "America/New_York"
        assert (result.hour, result.minute) == (15, 0)

    def test_add_is_elapsed_time_across_dst(self):
        # Clocks jump from 02:00 EST to 03:00 EDT on 2025-03-09
        start = NEW_YORK.localize(datetime(2025, 3, 9, 1, 30))
        result = add_duration(start, Duration(hours=1))
        assert (result.hour, result.minute) == (3, 30)
        assert result.utcoffset() == timedelta(hours=-4)
        assert result - start == timedelta(hours=1)

    def test_add_day_across_dst_is_24_hours(self):
        start = NEW_YORK.localize(datetime(2025, 3, 8, 12, 0))
        result = add_duration(start, Duration(days=1))
        assert result - start == timedelta(hours=24)
        assert (result.day, result.hour) == (9, 13)


class TestTimeOfDay:
    """Test the date-less time-of-day value."""

    def test_getters(self):
        t = TimeOfDay(21, 30, 15)
        assert (t.hour, t.minute, t.second) == (21, 30, 15)

    def test_defaults(self):
        t = TimeOfDay(9)
        assert (t.hour, t.minute, t.second) == (9, 0, 0)

    def test_rolls_over_like_a_clock(self):
        assert TimeOfDay(25).hour == 1
        t = TimeOfDay(0, -15)
        assert (t.hour, t.minute) == (23, 45)
        assert TimeOfDay(4, 90).to_string_short() == "05:30"

    def test_timestamp_ms(self):
        assert TimeOfDay(0).timestamp_ms == 0
        assert TimeOfDay(1, 30).timestamp_ms == 90 * 60_000
        assert TimeOfDay(0, -15).timestamp_ms == ONE_DAY_MS - 15 * 60_000

    def test_formatting(self):
        t = TimeOfDay(9, 5, 7)
        assert str(t) == "09:05:07"
        assert t.to_string_short() == "09:05"

    def test_equality(self):
        assert TimeOfDay(21) == TimeOfDay(20, 60)
        assert TimeOfDay(21) != TimeOfDay(9)
        assert len({TimeOfDay(21), TimeOfDay(21, 0, 0)}) == 1


class TestConvertTimeOfDay:
    """Test projecting a time of day onto a reference date."""

    def test_today(self):
        current = pytz.UTC.localize(datetime(2025, 2, 1, 14, 1, 30, 500000))
        result = convert_time_of_day_to_today(TimeOfDay(9, 15), current)
        assert result == pytz.UTC.localize(datetime(2025, 2, 1, 9, 15))
        assert result.microsecond == 0

    def test_tomorrow_and_yesterday(self):
        current = pytz.UTC.localize(datetime(2025, 2, 1, 14, 0))
        tomorrow = convert_time_of_day_to_tomorrow(TimeOfDay(9), current)
        yesterday = convert_time_of_day_to_yesterday(TimeOfDay(9), current)
        assert tomorrow == pytz.UTC.localize(datetime(2025, 2, 2, 9, 0))
        assert yesterday == pytz.UTC.localize(datetime(2025, 1, 31, 9, 0))

    def test_uses_reference_local_date(self):
        # 02:00 UTC on Feb 2 is still Feb 1 in New York
        current = pytz.UTC.localize(datetime(2025, 2, 2, 2, 0)).astimezone(NEW_YORK)
        result = convert_time_of_day_to_today(TimeOfDay(21), current)
        assert result == NEW_YORK.localize(datetime(2025, 2, 1, 21, 0))

    def test_tomorrow_is_exactly_one_day_of_milliseconds(self):
        current = NEW_YORK.localize(datetime(2025, 3, 8, 8, 0))
        today = convert_time_of_day_to_today(TimeOfDay(9), current)
        tomorrow = convert_time_of_day_to_tomorrow(TimeOfDay(9), current)
        assert tomorrow - today == timedelta(milliseconds=ONE_DAY_MS)
        # Wall clock moves an hour across the DST change
        assert tomorrow.hour == 10

    def test_naive_reference(self):
        result = convert_time_of_day_to_today(TimeOfDay(7), datetime(2025, 2, 1, 23, 0))
        assert result == datetime(2025, 2, 1, 7, 0)
        assert result.tzinfo is None

    def test_defaults_to_now(self):
        result = convert_time_of_day_to_today(TimeOfDay(12))
        assert result.tzinfo is not None
        assert (result.hour, result.minute) == (12, 0)


class TestMidnight:
    """Test local midnight of an instant."""

    def test_utc(self):
        instant = pytz.UTC.localize(datetime(2025, 2, 1, 14, 1, 30))
        assert midnight(instant) == pytz.UTC.localize(datetime(2025, 2, 1))

    def test_local_timezone(self):
        instant = NEW_YORK.localize(datetime(2025, 2, 1, 0, 10))
        result = midnight(instant)
        assert (result.day, result.hour) == (1, 0)
        assert instant - result == timedelta(minutes=10)

    def test_dst_day_midnight_uses_standard_offset(self):
        instant = NEW_YORK.localize(datetime(2025, 3, 9, 12, 0))
        result = midnight(instant)
        assert result.utcoffset() == timedelta(hours=-5)
        assert instant - result == timedelta(hours=11)

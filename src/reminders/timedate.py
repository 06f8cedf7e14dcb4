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

"""
Time and Date Helpers

Calendar arithmetic for the scheduling engine.

Durations are applied as elapsed time: every component is converted with
fixed factors (60,000 ms per minute, 3,600,000 ms per hour, 86,400,000 ms per
day) and added on the UTC timeline, so daylight-saving transitions do not
stretch or shrink a day. Time-of-day values carry no date and are normalized
onto 1970-01-01 UTC so their own getters never see a DST shift.
"""

from dataclasses import dataclass
from datetime import datetime, time, timedelta, tzinfo
from typing import Optional

import pytz

ONE_MINUTE_MS = 60 * 1000
ONE_HOUR_MS = 60 * ONE_MINUTE_MS
ONE_DAY_MS = 24 * ONE_HOUR_MS

_REFERENCE_DATE = datetime(1970, 1, 1, tzinfo=pytz.UTC)


@dataclass(frozen=True)
class Duration:
    """A signed offset. Absent components contribute zero."""

    days: Optional[float] = None
    hours: Optional[float] = None
    minutes: Optional[float] = None
    seconds: Optional[float] = None
    milliseconds: Optional[float] = None

    @property
    def total_milliseconds(self) -> float:
        total = 0
        if self.days:
            total += self.days * ONE_DAY_MS
        if self.hours:
            total += self.hours * ONE_HOUR_MS
        if self.minutes:
            total += self.minutes * ONE_MINUTE_MS
        if self.seconds:
            total += self.seconds * 1000
        if self.milliseconds:
            total += self.milliseconds
        return total

    def to_timedelta(self) -> timedelta:
        return timedelta(milliseconds=self.total_milliseconds)


def localize(naive: datetime, tz: Optional[tzinfo]) -> datetime:
    """
    Attach a timezone to a naive wall-clock datetime.

    pytz zones must go through localize() to pick the right UTC offset for
    that date; other tzinfo implementations can be attached directly.

    Args:
        naive: Wall-clock datetime without tzinfo
        tz: Target timezone, or None to keep the value naive

    Returns:
        Datetime in the given timezone
    """
    if tz is None:
        return naive
    if hasattr(tz, "localize"):
        return tz.localize(naive)
    return naive.replace(tzinfo=tz)


def shift(instant: datetime, delta: timedelta) -> datetime:
    """Move an instant by an exact amount of elapsed time."""
    if instant.tzinfo is None:
        return instant + delta
    # Add on the UTC timeline so DST changes between the two points are honoured
    moved = instant.astimezone(pytz.UTC) + delta
    return moved.astimezone(instant.tzinfo)


def add_duration(instant: datetime, duration: Duration) -> datetime:
    return shift(instant, duration.to_timedelta())


def subtract_duration(instant: datetime, duration: Duration) -> datetime:
    return shift(instant, -duration.to_timedelta())


def midnight(instant: datetime) -> datetime:
    """Local 00:00:00.000 of the instant's calendar day."""
    return localize(datetime.combine(instant.date(), time.min), instant.tzinfo)


class TimeOfDay:
    """
    Hour/minute/second of a day, without a date.

    Out-of-range components roll over the same way a calendar would, so
    TimeOfDay(25) is 01:00 and TimeOfDay(0, -15) is 23:45.
    """

    def __init__(self, hours: int, minutes: int = 0, seconds: int = 0):
        self._date = _REFERENCE_DATE + timedelta(
            hours=hours, minutes=minutes, seconds=seconds
        )

    @property
    def hour(self) -> int:
        return self._date.hour

    @property
    def minute(self) -> int:
        return self._date.minute

    @property
    def second(self) -> int:
        return self._date.second

    @property
    def timestamp_ms(self) -> int:
        """Milliseconds since 00:00:00."""
        return (self._date - _REFERENCE_DATE) // timedelta(milliseconds=1) % ONE_DAY_MS

    def to_time(self) -> time:
        return time(self.hour, self.minute, self.second)

    def to_string_short(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}"

    def __repr__(self) -> str:
        return f"TimeOfDay({self.hour}, {self.minute}, {self.second})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeOfDay):
            return NotImplemented
        return self.timestamp_ms == other.timestamp_ms

    def __hash__(self) -> int:
        return hash(self.timestamp_ms)


def convert_time_of_day_to_today(
    time_of_day: TimeOfDay, current: Optional[datetime] = None
) -> datetime:
    """
    Project a time of day onto the date of `current` (default: now, UTC).

    Args:
        time_of_day: The time of day to place
        current: Reference instant; its own timezone decides which date "today" is

    Returns:
        Instant on the reference date at the given local time, milliseconds zeroed
    """
    if current is None:
        current = datetime.now(pytz.UTC)
    naive = datetime.combine(current.date(), time_of_day.to_time())
    return localize(naive, current.tzinfo)


def convert_time_of_day_to_tomorrow(
    time_of_day: TimeOfDay, current: Optional[datetime] = None
) -> datetime:
    today = convert_time_of_day_to_today(time_of_day, current)
    return shift(today, timedelta(milliseconds=ONE_DAY_MS))


def convert_time_of_day_to_yesterday(
    time_of_day: TimeOfDay, current: Optional[datetime] = None
) -> datetime:
    today = convert_time_of_day_to_today(time_of_day, current)
    return shift(today, -timedelta(milliseconds=ONE_DAY_MS))

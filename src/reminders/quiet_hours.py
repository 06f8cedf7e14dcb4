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
Quiet Hours Module

A daily time-of-day window during which no reminder should fire, and the
oracle contract the schedule engine relies on.

The window may cross midnight (21:00 to 09:00 is the default). The start
instant is inside the window and the end instant is outside of it.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional, Protocol

import pytz

from .timedate import TimeOfDay, convert_time_of_day_to_today, localize

logger = logging.getLogger("mindfulnotifier.reminders.quiet_hours")


def _on_day(time_of_day: TimeOfDay, current: datetime, days: int) -> datetime:
    # Same wall-clock time on a neighbouring date; a DST change in between
    # must not move the boundary by an hour
    day = current.date() + timedelta(days=days)
    return localize(datetime.combine(day, time_of_day.to_time()), current.tzinfo)


class QuietHoursOracle(Protocol):
    """What the schedule engine needs to know about blackout windows."""

    def is_in_quiet_hours(self, instant: datetime) -> bool: ...

    def get_next_quiet_end(self, current: Optional[datetime] = None) -> datetime: ...

    def cancel_timers(self) -> None: ...


class QuietHours:
    """
    Daily quiet-hours window between two times of day.

    Equal start and end means no window. `notify_quiet_hours` is advisory for
    the delivery side (whether to announce the start and end of quiet hours)
    and has no effect on scheduling.
    """

    def __init__(
        self,
        start_time: TimeOfDay,
        end_time: TimeOfDay,
        notify_quiet_hours: bool = False,
    ):
        self.start_time = start_time
        self.end_time = end_time
        self.notify_quiet_hours = notify_quiet_hours

    @classmethod
    def default(cls) -> "QuietHours":
        return cls(TimeOfDay(21, 0), TimeOfDay(9, 0))

    def __repr__(self) -> str:
        return (
            f"QuietHours({self.start_time.to_string_short()}-"
            f"{self.end_time.to_string_short()})"
        )

    def get_next_quiet_start(self, current: Optional[datetime] = None) -> datetime:
        current = current or datetime.now(pytz.UTC)
        quiet_start = convert_time_of_day_to_today(self.start_time, current)
        if quiet_start < current:
            quiet_start = _on_day(self.start_time, current, 1)
        return quiet_start

    def get_next_quiet_end(self, current: Optional[datetime] = None) -> datetime:
        current = current or datetime.now(pytz.UTC)
        quiet_end = convert_time_of_day_to_today(self.end_time, current)
        if quiet_end < current:
            quiet_end = _on_day(self.end_time, current, 1)
        return quiet_end

    def is_in_quiet_hours(self, instant: datetime) -> bool:
        """
        Check whether an instant falls inside the window.

        The end of the window is always in the future relative to the
        instant (today's end, or tomorrow's once today's has passed), so the
        start is worked out backwards from that end.

        Args:
            instant: The instant to test; "today" is taken in its own timezone

        Returns:
            True if no reminder should fire at this instant
        """
        if self.start_time == self.end_time:
            # Empty window
            return False

        today_end = convert_time_of_day_to_today(self.end_time, instant)
        if instant < today_end:
            end = today_end
        else:
            end = _on_day(self.end_time, instant, 1)

        # Just after midnight today's start can be a whole day before the end
        start = convert_time_of_day_to_today(self.start_time, instant)
        next_start = _on_day(self.start_time, instant, 1)
        if next_start < end:
            start = next_start

        if start > end:
            # Started yesterday and today's end is still ahead: we are inside
            logger.debug(
                f"{instant} inside window that began "
                f"{_on_day(self.start_time, instant, -1)}"
            )
            return True

        return instant >= start

    def cancel_timers(self) -> None:
        """Release quiet-hours timers. A plain window owns none."""
        logger.info("Cancelling quiet hours timers")

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
Reminder Scheduling Package

Computes when the next mindfulness reminder should fire, honouring a
periodic or random cadence and a quiet-hours window, and picks which
reminder text to show with favourite weighting.
"""

from .timedate import (
    Duration,
    TimeOfDay,
    add_duration,
    subtract_duration,
    convert_time_of_day_to_today,
    convert_time_of_day_to_tomorrow,
    convert_time_of_day_to_yesterday,
)
from .quiet_hours import QuietHours, QuietHoursOracle
from .schedule import (
    PeriodicSchedule,
    RandomSchedule,
    ScheduleConfig,
    NextFireResult,
    ScheduleEngine,
    get_next_fire_date_impl,
    is_valid_periodic_interval,
    is_valid_random_interval,
)
from .pool import ReminderEntry, DEFAULT_REMINDERS
from .sampler import ReminderSampler, EmptyPoolError, DEFAULT_FAVOURITE_PROBABILITY
from .planner import NotificationPlanner, PlannedNotification
from .time_parser import (
    TimeParseError,
    parse_time_of_day,
    parse_schedule_expression,
    describe_schedule,
    validate_timezone,
)
from .config import ScheduleSettings

__all__ = [
    "Duration",
    "TimeOfDay",
    "add_duration",
    "subtract_duration",
    "convert_time_of_day_to_today",
    "convert_time_of_day_to_tomorrow",
    "convert_time_of_day_to_yesterday",
    "QuietHours",
    "QuietHoursOracle",
    "PeriodicSchedule",
    "RandomSchedule",
    "ScheduleConfig",
    "NextFireResult",
    "ScheduleEngine",
    "get_next_fire_date_impl",
    "is_valid_periodic_interval",
    "is_valid_random_interval",
    "ReminderEntry",
    "DEFAULT_REMINDERS",
    "ReminderSampler",
    "EmptyPoolError",
    "DEFAULT_FAVOURITE_PROBABILITY",
    "NotificationPlanner",
    "PlannedNotification",
    "TimeParseError",
    "parse_time_of_day",
    "parse_schedule_expression",
    "describe_schedule",
    "validate_timezone",
    "ScheduleSettings",
]

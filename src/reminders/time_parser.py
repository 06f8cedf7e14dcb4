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
Time Parser Module

Parses human-friendly time-of-day and schedule expressions for settings and
the command line.

Supports:
- Times of day: "21:00", "9pm", "9:30 am", "21:15:30", and anything else
  dateparser understands
- Periodic schedules: "hourly", "every 90 minutes", "every 2 hours",
  "every 1h30m", "every 1 hour 15 minutes"
- Random schedules: "random 30-60", "randomly 30 to 60 minutes",
  "between 30 and 60 minutes"
"""

import logging
import re

import dateparser
import pytz

from .schedule import PeriodicSchedule, RandomSchedule, ScheduleConfig
from .timedate import TimeOfDay

logger = logging.getLogger("mindfulnotifier.reminders.time_parser")

# Preset keywords for common periodic schedules
SCHEDULE_PRESETS = {
    "hourly": PeriodicSchedule(1, 0),
    "half-hourly": PeriodicSchedule(0, 30),
    "quarter-hourly": PeriodicSchedule(0, 15),
}

_CLOCK_PATTERN = re.compile(
    r"^(\d{1,2})(?::(\d{2}))?(?::(\d{2}))?\s*(am|pm)?$"
)

_PERIODIC_PATTERNS = [
    # every 1h30m, every 1 hour 15 minutes, every 2 hours and 5 mins
    re.compile(
        r"every\s+(\d+)\s*h(?:ours?|rs?)?\s*(?:and\s+)?(\d+)\s*m(?:in(?:ute)?s?)?$"
    ),
    # every 2 hours, every 3h
    re.compile(r"every\s+(\d+)\s*h(?:ours?|rs?)?$"),
    # every 90 minutes, every 45m
    re.compile(r"every\s+(\d+)\s*m(?:in(?:ute)?s?)?$"),
]

_RANDOM_PATTERNS = [
    re.compile(r"random(?:ly)?\s+(\d+)\s*(?:-|to)\s*(\d+)(?:\s*m(?:in(?:ute)?s?)?)?$"),
    re.compile(r"between\s+(\d+)\s+and\s+(\d+)(?:\s*m(?:in(?:ute)?s?)?)?$"),
]


class TimeParseError(Exception):
    """Raised when a time or schedule expression cannot be parsed."""

    pass


def validate_timezone(tz_name: str) -> bool:
    """
    Validate that a timezone name is valid.

    Args:
        tz_name: IANA timezone name (e.g., "America/Los_Angeles")

    Returns:
        True if valid, False otherwise
    """
    try:
        pytz.timezone(tz_name)
        return True
    except pytz.UnknownTimeZoneError:
        return False


def parse_time_of_day(expr: str) -> TimeOfDay:
    """
    Parse a time-of-day expression.

    Args:
        expr: Expression like "21:00", "9pm" or "9:30 am"

    Returns:
        The parsed TimeOfDay

    Raises:
        TimeParseError: If the expression is not a valid time of day
    """
    text = expr.strip().lower()
    if not text:
        raise TimeParseError("Empty time expression")

    match = _CLOCK_PATTERN.match(text)
    if match:
        hour = int(match.group(1))
        minute = int(match.group(2) or 0)
        second = int(match.group(3) or 0)
        meridiem = match.group(4)

        if meridiem:
            if hour < 1 or hour > 12:
                raise TimeParseError(f"Invalid 12-hour time: '{expr}'")
            # Convert to 24-hour
            if meridiem == "pm" and hour != 12:
                hour += 12
            elif meridiem == "am" and hour == 12:
                hour = 0

        if hour > 23 or minute > 59 or second > 59:
            raise TimeParseError(f"Time out of range: '{expr}'")
        return TimeOfDay(hour, minute, second)

    parsed = dateparser.parse(text, settings={"RETURN_AS_TIMEZONE_AWARE": False})
    if parsed is None:
        raise TimeParseError(
            f"Could not parse time of day: '{expr}'. "
            "Try formats like '21:00', '9pm' or '9:30 am'."
        )

    logger.debug(f"dateparser read '{expr}' as {parsed.time()}")
    return TimeOfDay(parsed.hour, parsed.minute, parsed.second)


def parse_schedule_expression(expr: str) -> ScheduleConfig:
    """
    Parse a schedule expression into a schedule config.

    Args:
        expr: Expression like "every 90 minutes" or "random 30-60"

    Returns:
        PeriodicSchedule or RandomSchedule

    Raises:
        TimeParseError: If the expression cannot be parsed
    """
    text = re.sub(r"\s+", " ", expr.strip().lower())
    if not text:
        raise TimeParseError("Empty schedule expression")

    if text in SCHEDULE_PRESETS:
        return SCHEDULE_PRESETS[text]
    if text == "every hour":
        return SCHEDULE_PRESETS["hourly"]

    combined, hours_only, minutes_only = _PERIODIC_PATTERNS
    match = combined.match(text)
    if match:
        return PeriodicSchedule(int(match.group(1)), int(match.group(2)))
    match = hours_only.match(text)
    if match:
        return PeriodicSchedule(int(match.group(1)), 0)
    match = minutes_only.match(text)
    if match:
        # Keep minutes as given; "every 90 minutes" is 0h 90m
        return PeriodicSchedule(0, int(match.group(1)))

    for pattern in _RANDOM_PATTERNS:
        match = pattern.match(text)
        if match:
            return RandomSchedule(int(match.group(1)), int(match.group(2)))

    raise TimeParseError(
        f"Could not parse schedule: '{expr}'. "
        "Try 'every 90 minutes', 'every 2 hours', 'every 1h30m' or 'random 30-60'."
    )


def describe_schedule(config: ScheduleConfig) -> str:
    """
    Convert a schedule config to a human-readable description.

    Args:
        config: PeriodicSchedule or RandomSchedule

    Returns:
        Description like "every 1h 30m" or "randomly every 30-60 minutes"
    """
    if isinstance(config, RandomSchedule):
        return f"randomly every {config.min_minutes}-{config.max_minutes} minutes"

    total = config.duration_hours * 60 + config.duration_minutes
    hours, minutes = divmod(total, 60)
    if total == 60:
        return "every hour"
    if hours and minutes:
        return f"every {hours}h {minutes}m"
    if hours:
        return f"every {hours} hours"
    return f"every {minutes} minutes"

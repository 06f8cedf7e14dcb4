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
Schedule Configuration

Settings for the scheduling engine, reminder selection and the planner.
Values can be overridden via environment variables.
"""

import logging
import os
import random
from dataclasses import dataclass
from typing import Optional

from .planner import DEFAULT_NOTIFICATION_BUFFER, NotificationPlanner, PoolProvider
from .quiet_hours import QuietHours
from .sampler import DEFAULT_FAVOURITE_PROBABILITY, ReminderSampler
from .schedule import (
    MIN_INTERVAL_MINUTES,
    PeriodicSchedule,
    RandomSchedule,
    ScheduleConfig,
    ScheduleEngine,
    is_valid_periodic_interval,
    is_valid_random_interval,
)
from .time_parser import parse_time_of_day, validate_timezone

logger = logging.getLogger("mindfulnotifier.reminders.config")

SCHEDULE_TYPES = ("periodic", "random")


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == "":
        return None
    return float(value)


@dataclass
class ScheduleSettings:
    """Configuration for reminder scheduling."""

    schedule_type: str = "random"

    # Periodic schedule
    periodic_hours: int = 1
    periodic_minutes: int = 0
    periodic_alignment: str = "midnight"

    # Random schedule
    random_min_minutes: int = 30
    random_max_minutes: int = 60

    # Quiet hours (local time in `timezone`)
    quiet_hours_start: str = "21:00"
    quiet_hours_end: str = "09:00"
    notify_quiet_hours: bool = False  # Advisory, for the delivery side only
    timezone: str = "UTC"

    # Reminder selection
    favourite_probability: float = DEFAULT_FAVOURITE_PROBABILITY
    batch_favourite_probability: Optional[float] = None  # None = favourite_probability

    # Planner
    notification_buffer: int = DEFAULT_NOTIFICATION_BUFFER
    min_interval_minutes: int = MIN_INTERVAL_MINUTES

    def __post_init__(self) -> None:
        if self.schedule_type not in SCHEDULE_TYPES:
            raise ValueError(
                f"Unknown schedule type '{self.schedule_type}'. "
                f"Expected one of: {', '.join(SCHEDULE_TYPES)}"
            )
        if not validate_timezone(self.timezone):
            logger.warning(f"Invalid timezone '{self.timezone}', falling back to UTC")
            self.timezone = "UTC"

    @classmethod
    def from_env(cls) -> "ScheduleSettings":
        """Create settings from environment variables with defaults."""
        return cls(
            schedule_type=os.getenv("SCHEDULE_TYPE", "random").strip().lower(),
            periodic_hours=int(os.getenv("SCHEDULE_PERIODIC_HOURS", "1")),
            periodic_minutes=int(os.getenv("SCHEDULE_PERIODIC_MINUTES", "0")),
            periodic_alignment=os.getenv("SCHEDULE_PERIODIC_ALIGNMENT", "midnight"),
            random_min_minutes=int(os.getenv("SCHEDULE_RANDOM_MIN", "30")),
            random_max_minutes=int(os.getenv("SCHEDULE_RANDOM_MAX", "60")),
            quiet_hours_start=os.getenv("QUIET_HOURS_START", "21:00"),
            quiet_hours_end=os.getenv("QUIET_HOURS_END", "09:00"),
            notify_quiet_hours=os.getenv("NOTIFY_QUIET_HOURS", "false").lower()
            == "true",
            timezone=os.getenv("SCHEDULE_TIMEZONE", "UTC"),
            favourite_probability=float(
                os.getenv("FAVOURITE_PROBABILITY", str(DEFAULT_FAVOURITE_PROBABILITY))
            ),
            batch_favourite_probability=_optional_float(
                os.getenv("BATCH_FAVOURITE_PROBABILITY")
            ),
            notification_buffer=int(
                os.getenv("NOTIFICATION_BUFFER", str(DEFAULT_NOTIFICATION_BUFFER))
            ),
            min_interval_minutes=int(
                os.getenv("MIN_INTERVAL_MINUTES", str(MIN_INTERVAL_MINUTES))
            ),
        )

    def schedule_config(self) -> ScheduleConfig:
        """Build the active schedule config, warning about short intervals."""
        if self.schedule_type == "periodic":
            if not is_valid_periodic_interval(
                self.periodic_hours, self.periodic_minutes, self.min_interval_minutes
            ):
                logger.warning(
                    f"Periodic interval {self.periodic_hours}h {self.periodic_minutes}m "
                    f"is shorter than {self.min_interval_minutes} minutes"
                )
            return PeriodicSchedule(
                self.periodic_hours, self.periodic_minutes, self.periodic_alignment
            )

        if not is_valid_random_interval(
            self.random_min_minutes, self.random_max_minutes, self.min_interval_minutes
        ):
            logger.warning(
                f"Random range {self.random_min_minutes}-{self.random_max_minutes} "
                f"minutes is inverted or below {self.min_interval_minutes} minutes"
            )
        return RandomSchedule(self.random_min_minutes, self.random_max_minutes)

    def build_quiet_hours(self) -> QuietHours:
        return QuietHours(
            parse_time_of_day(self.quiet_hours_start),
            parse_time_of_day(self.quiet_hours_end),
            self.notify_quiet_hours,
        )

    def build_engine(self, rng: Optional[random.Random] = None) -> ScheduleEngine:
        return ScheduleEngine(
            self.schedule_config(), self.build_quiet_hours(), rng, self.timezone
        )

    def build_sampler(self, rng: Optional[random.Random] = None) -> ReminderSampler:
        return ReminderSampler(rng, self.favourite_probability)

    def build_planner(
        self,
        pool_provider: Optional[PoolProvider] = None,
        rng: Optional[random.Random] = None,
    ) -> NotificationPlanner:
        """
        Build a planner wired from these settings.

        Args:
            pool_provider: Returns the current reminder pool (None: stock reminders)
            rng: Random source shared by the engine and the sampler

        Returns:
            A ready-to-use NotificationPlanner
        """
        rng = rng or random.Random()
        return NotificationPlanner(
            self.build_engine(rng),
            self.build_sampler(rng),
            pool_provider,
            favourite_probability=self.batch_favourite_probability,
            buffer_size=self.notification_buffer,
        )

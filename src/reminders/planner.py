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
Notification Planner Module

Builds a forward-looking batch of (instant, text) pairs for the delivery
side to register as platform notifications.

The planner is an explicit handle: callers create one from their settings
and pass it to whatever keeps the notification buffer topped up.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from .pool import ReminderEntry
from .sampler import ReminderSampler
from .schedule import ScheduleEngine

logger = logging.getLogger("mindfulnotifier.reminders.planner")

# Keep at least this many upcoming notifications registered
DEFAULT_NOTIFICATION_BUFFER = 30

PoolProvider = Callable[[], Optional[Sequence[ReminderEntry]]]


@dataclass(frozen=True)
class PlannedNotification:
    """One notification ready for delivery."""

    instant: datetime
    text: str
    was_post_quiet_adjustment: bool = False


class NotificationPlanner:
    """Pairs schedule instants with reminder texts."""

    def __init__(
        self,
        engine: ScheduleEngine,
        sampler: ReminderSampler,
        pool_provider: Optional[PoolProvider] = None,
        favourite_probability: Optional[float] = None,
        buffer_size: int = DEFAULT_NOTIFICATION_BUFFER,
    ):
        """
        Initialize the planner.

        Args:
            engine: Computes fire instants
            sampler: Chooses reminder texts
            pool_provider: Returns the current reminder pool; None (or a
                provider returning None) means the stock reminders
            favourite_probability: Batch bias override (None: sampler default)
            buffer_size: Batch size used when plan() is given no count
        """
        self.engine = engine
        self.sampler = sampler
        self.pool_provider = pool_provider
        self.favourite_probability = favourite_probability
        self.buffer_size = buffer_size

    def plan(
        self, count: Optional[int] = None, from_time: Optional[datetime] = None
    ) -> list[PlannedNotification]:
        """
        Plan the next `count` notifications.

        Each instant is computed from the previous one, starting at
        `from_time` (default: now).

        Args:
            count: Number of notifications (default: the buffer size)
            from_time: Where to continue scheduling from

        Returns:
            Planned notifications in chronological order
        """
        count = self.buffer_size if count is None else count
        pool = self.pool_provider() if self.pool_provider else None
        texts = self.sampler.select_batch(count, pool, self.favourite_probability)

        planned = []
        previous = from_time
        for text in texts:
            result = self.engine.get_next_fire_date(previous)
            planned.append(
                PlannedNotification(
                    instant=result.instant,
                    text=text,
                    was_post_quiet_adjustment=result.was_post_quiet_adjustment,
                )
            )
            previous = result.instant

        if planned:
            post_quiet = sum(1 for p in planned if p.was_post_quiet_adjustment)
            logger.info(
                f"Planned {len(planned)} notifications, last at {planned[-1].instant} "
                f"({post_quiet} after quiet hours)"
            )
        return planned

    def next_notification(
        self, from_time: Optional[datetime] = None
    ) -> PlannedNotification:
        """Plan a single notification using single-selection semantics."""
        pool = self.pool_provider() if self.pool_provider else None
        result = self.engine.get_next_fire_date(from_time)
        return PlannedNotification(
            instant=result.instant,
            text=self.sampler.select(pool),
            was_post_quiet_adjustment=result.was_post_quiet_adjustment,
        )

    def cancel(self) -> None:
        self.engine.cancel()

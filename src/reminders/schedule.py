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
Schedule Engine Module

Computes the instant at which the next reminder should fire.

Two schedule kinds are supported:
- PeriodicSchedule: fire on fixed interval boundaries counted from local
  midnight (a 2-hour interval lands on 00:00, 02:00, 04:00, ...)
- RandomSchedule: fire a random number of minutes after the previous one

Both raw algorithms ignore quiet hours. ScheduleEngine wraps them: when the
raw candidate falls inside quiet hours it is recomputed once from the end of
the quiet window, and the result is flagged as a post-quiet adjustment.
"""

import logging
import math
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Union

import pytz

from .quiet_hours import QuietHoursOracle
from .timedate import Duration, add_duration, localize, midnight, shift

logger = logging.getLogger("mindfulnotifier.reminders.schedule")

# Padding added before computing a fire time so that clock skew and
# processing latency never produce a time in the immediate past
ALARM_PADDING = Duration(minutes=2)

# Random offsets at or below this many minutes are pushed up to the padding
RANDOM_FLOOR_MINUTES = 1

# Shortest interval the delivery side can honour reliably
MIN_INTERVAL_MINUTES = 15

ALIGNMENTS = ("midnight", "epoch")

_EPOCH = datetime(1970, 1, 1, tzinfo=pytz.UTC)


@dataclass(frozen=True)
class PeriodicSchedule:
    """Fire every `duration_hours` h `duration_minutes` m, aligned to boundaries."""

    duration_hours: int = 1
    duration_minutes: int = 0
    # "midnight" is authoritative; "epoch" reproduces schedules computed by
    # the older epoch-relative alignment
    alignment: str = "midnight"

    @property
    def interval(self) -> timedelta:
        return timedelta(minutes=self.duration_hours * 60 + self.duration_minutes)


@dataclass(frozen=True)
class RandomSchedule:
    """Fire a uniformly random number of minutes in [min_minutes, max_minutes)."""

    min_minutes: int = 30
    max_minutes: int = 60


ScheduleConfig = Union[PeriodicSchedule, RandomSchedule]


@dataclass(frozen=True)
class NextFireResult:
    """Result of a quiet-hours-aware schedule computation."""

    instant: datetime
    was_post_quiet_adjustment: bool = False


def is_valid_periodic_interval(
    hours: int, minutes: int, minimum: int = MIN_INTERVAL_MINUTES
) -> bool:
    """Check if a periodic interval meets the minimum length in minutes."""
    return hours * 60 + minutes >= minimum


def is_valid_random_interval(
    min_minutes: int, max_minutes: int, minimum: int = MIN_INTERVAL_MINUTES
) -> bool:
    """Check if a random range is ordered and its floor meets the minimum."""
    return min_minutes >= minimum and max_minutes >= min_minutes


def _random_int(rng: random.Random, upper: int) -> int:
    # Uniform over [0, upper); an empty range yields 0
    return math.floor(rng.random() * upper)


def _periodic_next(
    config: PeriodicSchedule, from_time: datetime, adjust_from_quiet: bool
) -> datetime:
    interval = config.interval
    if interval <= timedelta(0):
        logger.warning(
            f"Non-positive periodic interval {config.duration_hours}h "
            f"{config.duration_minutes}m, using {ALARM_PADDING.minutes} minutes"
        )
        interval = ALARM_PADDING.to_timedelta()

    if not adjust_from_quiet:
        from_time = add_duration(from_time, ALARM_PADDING)

    logger.debug(
        f"Periodic next fire from {from_time}, interval={interval}, "
        f"adjust_from_quiet={adjust_from_quiet}"
    )

    if config.alignment == "epoch":
        raw = shift(from_time, interval)
        epoch = _EPOCH if raw.tzinfo is not None else _EPOCH.replace(tzinfo=None)
        return shift(raw, -((raw - epoch) % interval))

    offset = (from_time - midnight(from_time)) % interval
    if offset == timedelta(0):
        if adjust_from_quiet:
            # Never hand back the boundary we are escaping from
            return shift(from_time, interval)
        return from_time
    return shift(from_time, interval - offset)


def _random_next(
    config: RandomSchedule,
    from_time: datetime,
    adjust_from_quiet: bool,
    rng: random.Random,
) -> datetime:
    min_minutes = config.min_minutes
    max_minutes = config.max_minutes

    if max_minutes == min_minutes or min_minutes > max_minutes:
        # Degenerate range: fire at max exactly, or anywhere in [0, max)
        # once past quiet hours
        if adjust_from_quiet:
            next_minutes = _random_int(rng, max_minutes)
        else:
            next_minutes = max_minutes
    elif adjust_from_quiet:
        # Already waited through quiet hours, so the minimum is dropped
        next_minutes = _random_int(rng, max_minutes - min_minutes)
    else:
        next_minutes = min_minutes + _random_int(rng, max_minutes - min_minutes)

    if next_minutes <= RANDOM_FLOOR_MINUTES:
        next_minutes = ALARM_PADDING.minutes

    logger.debug(
        f"Random next fire from {from_time}: +{next_minutes}m, "
        f"adjust_from_quiet={adjust_from_quiet}"
    )
    return add_duration(from_time, Duration(minutes=next_minutes))


def get_next_fire_date_impl(
    config: ScheduleConfig,
    from_time: datetime,
    adjust_from_quiet: bool = False,
    rng: Optional[random.Random] = None,
) -> datetime:
    """
    Compute the next fire instant, ignoring quiet hours.

    Args:
        config: PeriodicSchedule or RandomSchedule
        from_time: Reference instant
        adjust_from_quiet: True when recomputing from the end of quiet hours
        rng: Random source for RandomSchedule (default: a fresh random.Random)

    Returns:
        The raw next fire instant

    Raises:
        TypeError: If config is not a known schedule kind
    """
    if isinstance(config, PeriodicSchedule):
        return _periodic_next(config, from_time, adjust_from_quiet)
    if isinstance(config, RandomSchedule):
        return _random_next(config, from_time, adjust_from_quiet, rng or random.Random())
    raise TypeError(f"Unknown schedule config: {type(config).__name__}")


class ScheduleEngine:
    """
    Quiet-hours-aware next fire computation.

    Holds no timers and no state between calls other than the random source,
    so one engine can be shared by any single scheduling call site.
    """

    def __init__(
        self,
        config: ScheduleConfig,
        quiet_hours: QuietHoursOracle,
        rng: Optional[random.Random] = None,
        timezone: str = "UTC",
    ):
        """
        Initialize the schedule engine.

        Args:
            config: PeriodicSchedule or RandomSchedule
            quiet_hours: Oracle for the quiet-hours window
            rng: Injectable random source (seed it for deterministic results)
            timezone: IANA timezone that "local midnight" refers to
        """
        if isinstance(config, PeriodicSchedule) and config.alignment not in ALIGNMENTS:
            raise ValueError(
                f"Unknown periodic alignment '{config.alignment}'. "
                f"Expected one of: {', '.join(ALIGNMENTS)}"
            )
        self.config = config
        self.quiet_hours = quiet_hours
        self.rng = rng or random.Random()
        self.tz = pytz.timezone(timezone)

    def to_local(self, instant: Optional[datetime]) -> datetime:
        if instant is None:
            return datetime.now(self.tz)
        if instant.tzinfo is None:
            return localize(instant, self.tz)
        return instant.astimezone(self.tz)

    def get_next_fire_date_impl(
        self, from_time: Optional[datetime] = None, adjust_from_quiet: bool = False
    ) -> datetime:
        """Raw next fire instant in the engine timezone, ignoring quiet hours."""
        return get_next_fire_date_impl(
            self.config, self.to_local(from_time), adjust_from_quiet, self.rng
        )

    def get_next_fire_date(self, from_time: Optional[datetime] = None) -> NextFireResult:
        """
        Compute the next fire instant, honouring quiet hours.

        Args:
            from_time: Reference instant (default: now). Naive values are
                read as wall-clock time in the engine timezone.

        Returns:
            NextFireResult with the instant and whether it was pushed past
            quiet hours
        """
        from_time = self.to_local(from_time)
        next_fire = self.get_next_fire_date_impl(from_time)

        if self.quiet_hours.is_in_quiet_hours(next_fire):
            quiet_end = self.to_local(self.quiet_hours.get_next_quiet_end(from_time))
            next_fire = self.get_next_fire_date_impl(quiet_end, adjust_from_quiet=True)
            logger.info(f"Scheduling next reminder, past quiet hours: {next_fire}")
            return NextFireResult(next_fire, was_post_quiet_adjustment=True)

        logger.info(f"Scheduling next reminder at {next_fire}")
        return NextFireResult(next_fire, was_post_quiet_adjustment=False)

    def cancel(self) -> None:
        """Ask the quiet-hours oracle to release its timers. Safe to repeat."""
        logger.info("Cancelling notification schedule")
        self.quiet_hours.cancel_timers()

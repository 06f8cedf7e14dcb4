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
Reminder Sampler Module

Chooses which reminder text goes with each scheduled notification.

Selection policy:
- Only enabled reminders are considered; if none are enabled the whole pool
  is used instead
- With probability `favourite_probability` the draw comes from favourites,
  otherwise from non-favourites, falling back to whichever side is non-empty
- A probability of 0 (or below) ignores favourites entirely

Batches are drawn round-robin: a pool is shuffled and consumed front to back
before being reshuffled, so nothing repeats until everything else in that
pool has been shown once.
"""

import logging
import random
from itertools import islice
from typing import Iterator, Optional, Sequence

from .pool import DEFAULT_REMINDERS, ReminderEntry

logger = logging.getLogger("mindfulnotifier.reminders.sampler")

# Chance of drawing from favourites when favourites exist
DEFAULT_FAVOURITE_PROBABILITY = 0.2


class EmptyPoolError(Exception):
    """Raised when the reminder pool has no entries at all."""

    pass


class ReminderSampler:
    """Favourite-weighted reminder selection over a caller-supplied pool."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        favourite_probability: float = DEFAULT_FAVOURITE_PROBABILITY,
    ):
        """
        Initialize the sampler.

        Args:
            rng: Injectable random source (seed it for deterministic results)
            favourite_probability: Default bias used when a call passes none
        """
        self.rng = rng or random.Random()
        self.favourite_probability = favourite_probability

    def _resolve_probability(self, favourite_probability: Optional[float]) -> float:
        if favourite_probability is None:
            return self.favourite_probability
        return favourite_probability

    def _enabled(self, pool: Optional[Sequence[ReminderEntry]]) -> list[ReminderEntry]:
        entries = list(DEFAULT_REMINDERS if pool is None else pool)
        if not entries:
            raise EmptyPoolError("Reminder pool is empty, nothing to select from")

        enabled = [entry for entry in entries if entry.enabled]
        if not enabled:
            logger.warning(
                f"No reminders enabled, selecting from all {len(entries)} reminders"
            )
            return entries
        return enabled

    def select(
        self,
        pool: Optional[Sequence[ReminderEntry]] = None,
        favourite_probability: Optional[float] = None,
    ) -> str:
        """
        Select one reminder text.

        Args:
            pool: Candidate reminders (default: the stock reminders)
            favourite_probability: Override for the sampler's default bias

        Returns:
            The selected reminder text

        Raises:
            EmptyPoolError: If the pool has no entries
        """
        probability = self._resolve_probability(favourite_probability)
        enabled = self._enabled(pool)

        if probability <= 0:
            return self.rng.choice(enabled).text

        favourites = [entry for entry in enabled if entry.favourite]
        non_favourites = [entry for entry in enabled if not entry.favourite]

        if favourites and self.rng.random() < probability:
            candidates = favourites
        elif non_favourites:
            candidates = non_favourites
        else:
            # Everything enabled is a favourite
            candidates = enabled

        return self.rng.choice(candidates).text

    def select_batch(
        self,
        n: int,
        pool: Optional[Sequence[ReminderEntry]] = None,
        favourite_probability: Optional[float] = None,
    ) -> list[str]:
        """
        Select exactly `n` reminder texts with bounded repetition.

        Args:
            n: Number of texts to return
            pool: Candidate reminders (default: the stock reminders)
            favourite_probability: Override for the sampler's default bias

        Returns:
            List of `n` reminder texts

        Raises:
            ValueError: If n is negative
            EmptyPoolError: If n > 0 and the pool has no entries
        """
        if n < 0:
            raise ValueError(f"Batch size must be non-negative, got {n}")
        if n == 0:
            return []

        probability = self._resolve_probability(favourite_probability)
        enabled = self._enabled(pool)

        if probability <= 0:
            return [entry.text for entry in islice(self._round_robin(enabled), n)]

        favourites = [entry for entry in enabled if entry.favourite]
        non_favourites = [entry for entry in enabled if not entry.favourite]
        favourite_cycle = self._round_robin(favourites)
        non_favourite_cycle = self._round_robin(non_favourites)

        logger.debug(
            f"Drawing {n} reminders: {len(favourites)} favourites, "
            f"{len(non_favourites)} others, p={probability}"
        )

        result = []
        while len(result) < n:
            if favourites and self.rng.random() < probability:
                entry = next(favourite_cycle)
            elif non_favourites:
                entry = next(non_favourite_cycle)
            else:
                entry = next(favourite_cycle)
            result.append(entry.text)
        return result

    def _round_robin(self, entries: list[ReminderEntry]) -> Iterator[ReminderEntry]:
        """
        Yield entries forever, reshuffling after every full pass.

        Entries sharing a text are cycled once, as the first of them, so the
        same text never comes up twice in a row.
        """
        unique = {}
        for entry in entries:
            unique.setdefault(entry.text, entry)
        entries = list(unique.values())
        if not entries:
            return
        last_text = None
        while True:
            order = list(entries)
            self.rng.shuffle(order)
            if len(order) > 1 and order[0].text == last_text:
                # Avoid showing the same text twice across a reshuffle
                order.append(order.pop(0))
            yield from order
            last_text = order[-1].text

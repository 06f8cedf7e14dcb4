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
Reminder Pool Module

Reminder entries and the stock set of mindfulness prompts.
"""

from dataclasses import dataclass
from typing import Iterable

DEFAULT_TAG = "default"


@dataclass(frozen=True)
class ReminderEntry:
    """A single reminder text with its selection flags."""

    text: str
    enabled: bool = True
    tag: str = DEFAULT_TAG
    favourite: bool = False


def entries_from_dicts(records: Iterable[dict]) -> list[ReminderEntry]:
    """
    Build entries from plain dict records.

    Missing flags take the entry defaults; `favourite` may be absent or None
    in records written before favourites existed.

    Args:
        records: Dicts with at least a "text" key

    Returns:
        List of ReminderEntry, in input order
    """
    return [
        ReminderEntry(
            text=record["text"],
            enabled=bool(record.get("enabled", True)),
            tag=record.get("tag") or DEFAULT_TAG,
            favourite=bool(record.get("favourite") or False),
        )
        for record in records
    ]


_DEFAULT_TEXTS = [
    "Are you aware?",
    "Breathe deeply. This is the present moment.",
    "Take a moment to pause, and come back to the present.",
    "Bring awareness into this moment.",
    "Let go of greed, aversion, and delusion.",
    "Respond, not react.",
    "All of this is impermanent.",
    "Accept the feeling of what is happening in this moment. Don't struggle "
    "against it. Instead, notice it. Take it in.",
    "RAIN: Recognize / Allow / Investigate with interest and care / "
    "Nurture with self-compassion",
    "Note any feeling tones in the moment: Pleasant / Unpleasant / Neutral.",
    "What is the attitude in the mind right now?",
    "May you be happy. May you be healthy. May you be free from harm. "
    "May you be peaceful.",
    '"Whatever it is that has the nature to arise will also pass away; '
    'therefore, there is nothing to want." -- Joseph Goldstein',
    '"Sitting quietly, Doing nothing, Spring comes, and the grass grows, '
    'by itself." -- Bashō',
]

DEFAULT_REMINDERS: tuple[ReminderEntry, ...] = tuple(
    ReminderEntry(text=text) for text in _DEFAULT_TEXTS
)

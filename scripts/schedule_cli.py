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
Reminder Schedule CLI

Command-line tool for previewing what a schedule configuration will do.
Settings come from the environment (a .env file is loaded if present) and can
be overridden per run.

Usage:
    # Show when the next reminder would fire
    python scripts/schedule_cli.py next

    # Preview the next 30 notifications, continuing from a given time
    python scripts/schedule_cli.py preview -n 30 --from "tomorrow 20:00"

    # Try a different schedule without touching the environment
    python scripts/schedule_cli.py preview --schedule "every 1h30m"

    # Draw a batch of reminder texts
    python scripts/schedule_cli.py sample -n 10 --favourite-probability 0.3

    # Check whether a time falls inside quiet hours
    python scripts/schedule_cli.py quiet --at "23:30"
"""

import argparse
import logging
import os
import random
import sys
from dataclasses import replace
from datetime import datetime
from typing import Optional

import dateparser
from dotenv import load_dotenv

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from reminders.config import ScheduleSettings
from reminders.schedule import PeriodicSchedule
from reminders.time_parser import (
    TimeParseError,
    describe_schedule,
    parse_schedule_expression,
)

load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(message)s",
)
logger = logging.getLogger(__name__)


def truncate(text: str, max_len: int = 60) -> str:
    """Truncate text with ellipsis."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def parse_when(expr: Optional[str], timezone: str) -> Optional[datetime]:
    """Parse a --from/--at value in the schedule timezone."""
    if not expr:
        return None
    parsed = dateparser.parse(
        expr,
        settings={
            "TIMEZONE": timezone,
            "RETURN_AS_TIMEZONE_AWARE": True,
            "PREFER_DATES_FROM": "future",
        },
    )
    if parsed is None:
        raise TimeParseError(f"Could not parse time: '{expr}'")
    return parsed


def load_settings(args: argparse.Namespace) -> ScheduleSettings:
    settings = ScheduleSettings.from_env()
    if args.timezone:
        settings = replace(settings, timezone=args.timezone)
    if args.schedule:
        config = parse_schedule_expression(args.schedule)
        if isinstance(config, PeriodicSchedule):
            settings = replace(
                settings,
                schedule_type="periodic",
                periodic_hours=config.duration_hours,
                periodic_minutes=config.duration_minutes,
            )
        else:
            settings = replace(
                settings,
                schedule_type="random",
                random_min_minutes=config.min_minutes,
                random_max_minutes=config.max_minutes,
            )
    return settings


def show_next(settings: ScheduleSettings, rng: random.Random, from_expr: Optional[str]) -> None:
    """Print the next fire time."""
    engine = settings.build_engine(rng)
    result = engine.get_next_fire_date(parse_when(from_expr, settings.timezone))
    print(f"Schedule: {describe_schedule(engine.config)} ({settings.timezone})")
    print(f"Next reminder: {result.instant:%Y-%m-%d %H:%M:%S %Z}")
    if result.was_post_quiet_adjustment:
        print("  (moved past quiet hours)")


def show_preview(
    settings: ScheduleSettings, rng: random.Random, count: int, from_expr: Optional[str]
) -> None:
    """Print a batch of planned notifications."""
    planner = settings.build_planner(rng=rng)
    planned = planner.plan(count, parse_when(from_expr, settings.timezone))

    print(f"Schedule: {describe_schedule(planner.engine.config)} ({settings.timezone})")
    print(
        f"Quiet hours: {settings.quiet_hours_start} - {settings.quiet_hours_end}"
    )
    print("-" * 90)
    print(f"{'#':<4} {'When':<22} {'Quiet':<6} {'Reminder':<58}")
    print("-" * 90)

    for i, notification in enumerate(planned, start=1):
        print(
            f"{i:<4} "
            f"{notification.instant:%Y-%m-%d %H:%M:%S}    "
            f"{'yes' if notification.was_post_quiet_adjustment else '':<6} "
            f"{truncate(notification.text, 58)}"
        )


def show_sample(
    settings: ScheduleSettings,
    rng: random.Random,
    count: int,
    favourite_probability: Optional[float],
) -> None:
    """Print a batch of reminder texts."""
    sampler = settings.build_sampler(rng)
    probability = (
        favourite_probability
        if favourite_probability is not None
        else settings.batch_favourite_probability
    )
    for i, text in enumerate(sampler.select_batch(count, None, probability), start=1):
        print(f"{i:<4} {text}")


def show_quiet(settings: ScheduleSettings, at_expr: Optional[str]) -> None:
    """Print quiet-hours status for a time."""
    engine = settings.build_engine()
    at = engine.to_local(parse_when(at_expr, settings.timezone))
    quiet_hours = engine.quiet_hours

    print(f"Quiet hours: {quiet_hours.start_time} - {quiet_hours.end_time} ({settings.timezone})")
    print(f"At {at:%Y-%m-%d %H:%M:%S %Z}:")
    if quiet_hours.is_in_quiet_hours(at):
        print(f"  In quiet hours, ends {quiet_hours.get_next_quiet_end(at):%Y-%m-%d %H:%M}")
    else:
        print(f"  Not in quiet hours, next starts {quiet_hours.get_next_quiet_start(at):%Y-%m-%d %H:%M}")


def main():
    parser = argparse.ArgumentParser(
        description="Preview reminder schedules",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--schedule", help="Schedule override, e.g. 'every 90 minutes' or 'random 30-60'")
    parser.add_argument("--timezone", help="IANA timezone override")
    parser.add_argument("--seed", type=int, help="Seed for reproducible output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show scheduling log output")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    next_parser = subparsers.add_parser("next", help="Show the next fire time")
    next_parser.add_argument("--from", dest="from_time", help="Reference time (default: now)")

    preview_parser = subparsers.add_parser("preview", help="Preview upcoming notifications")
    preview_parser.add_argument("-n", "--count", type=int, help="Number of notifications (default: buffer size)")
    preview_parser.add_argument("--from", dest="from_time", help="Reference time (default: now)")

    sample_parser = subparsers.add_parser("sample", help="Draw reminder texts")
    sample_parser.add_argument("-n", "--count", type=int, default=10, help="Number of texts")
    sample_parser.add_argument("--favourite-probability", type=float, help="Favourite bias override")

    quiet_parser = subparsers.add_parser("quiet", help="Check quiet hours")
    quiet_parser.add_argument("--at", help="Time to check (default: now)")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.verbose:
        logging.getLogger("mindfulnotifier").setLevel(logging.DEBUG)

    try:
        settings = load_settings(args)
        rng = random.Random(args.seed)

        if args.command == "next":
            show_next(settings, rng, args.from_time)
        elif args.command == "preview":
            count = args.count if args.count is not None else settings.notification_buffer
            show_preview(settings, rng, count, args.from_time)
        elif args.command == "sample":
            show_sample(settings, rng, args.count, args.favourite_probability)
        elif args.command == "quiet":
            show_quiet(settings, args.at)
    except (TimeParseError, ValueError) as e:
        logger.error(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

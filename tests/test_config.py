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

"""Tests for schedule settings."""

import logging
import random
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from reminders.config import ScheduleSettings
from reminders.quiet_hours import QuietHours
from reminders.schedule import PeriodicSchedule, RandomSchedule
from reminders.time_parser import TimeParseError
from reminders.timedate import TimeOfDay


class TestFromEnv:
    """Test loading settings from the environment."""

    def test_defaults(self):
        with patch.dict("os.environ", {}, clear=True):
            settings = ScheduleSettings.from_env()

        assert settings.schedule_type == "random"
        assert settings.random_min_minutes == 30
        assert settings.random_max_minutes == 60
        assert settings.quiet_hours_start == "21:00"
        assert settings.quiet_hours_end == "09:00"
        assert settings.notify_quiet_hours is False
        assert settings.timezone == "UTC"
        assert settings.favourite_probability == 0.2
        assert settings.batch_favourite_probability is None
        assert settings.notification_buffer == 30
        assert settings.min_interval_minutes == 15

    def test_overrides(self):
        env = {
            "SCHEDULE_TYPE": " Periodic ",
            "SCHEDULE_PERIODIC_HOURS": "2",
            "SCHEDULE_PERIODIC_MINUTES": "30",
            "SCHEDULE_PERIODIC_ALIGNMENT": "epoch",
            "QUIET_HOURS_START": "10pm",
            "QUIET_HOURS_END": "7:30",
            "NOTIFY_QUIET_HOURS": "TRUE",
            "SCHEDULE_TIMEZONE": "Europe/Berlin",
            "FAVOURITE_PROBABILITY": "0.5",
            "BATCH_FAVOURITE_PROBABILITY": "0.3",
            "NOTIFICATION_BUFFER": "12",
            "MIN_INTERVAL_MINUTES": "5",
        }
        with patch.dict("os.environ", env, clear=True):
            settings = ScheduleSettings.from_env()

        assert settings.schedule_type == "periodic"
        assert settings.schedule_config() == PeriodicSchedule(2, 30, "epoch")
        assert settings.notify_quiet_hours is True
        assert settings.timezone == "Europe/Berlin"
        assert settings.favourite_probability == 0.5
        assert settings.batch_favourite_probability == 0.3
        assert settings.notification_buffer == 12
        assert settings.min_interval_minutes == 5

    def test_blank_batch_probability(self):
        with patch.dict("os.environ", {"BATCH_FAVOURITE_PROBABILITY": "  "}, clear=True):
            assert ScheduleSettings.from_env().batch_favourite_probability is None

    def test_invalid_number(self):
        with patch.dict("os.environ", {"SCHEDULE_RANDOM_MIN": "soon"}, clear=True):
            with pytest.raises(ValueError):
                ScheduleSettings.from_env()


class TestValidation:
    """Test settings validation."""

    def test_unknown_schedule_type(self):
        with pytest.raises(ValueError, match="Unknown schedule type"):
            ScheduleSettings(schedule_type="cron")

    def test_invalid_timezone_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING):
            settings = ScheduleSettings(timezone="Nowhere/Special")
        assert settings.timezone == "UTC"
        assert "Invalid timezone" in caplog.text

    def test_short_periodic_interval_warns(self, caplog):
        settings = ScheduleSettings(schedule_type="periodic", periodic_hours=0, periodic_minutes=5)
        with caplog.at_level(logging.WARNING):
            config = settings.schedule_config()
        assert config == PeriodicSchedule(0, 5)
        assert "shorter than 15 minutes" in caplog.text

    def test_inverted_random_range_warns(self, caplog):
        settings = ScheduleSettings(random_min_minutes=60, random_max_minutes=40)
        with caplog.at_level(logging.WARNING):
            config = settings.schedule_config()
        assert config == RandomSchedule(60, 40)
        assert "inverted" in caplog.text

    def test_valid_config_is_quiet(self, caplog):
        with caplog.at_level(logging.WARNING):
            ScheduleSettings().schedule_config()
        assert caplog.records == []


class TestBuilders:
    """Test wiring components from settings."""

    def test_quiet_hours(self):
        settings = ScheduleSettings(quiet_hours_start="10pm", quiet_hours_end="06:30")
        quiet_hours = settings.build_quiet_hours()
        assert isinstance(quiet_hours, QuietHours)
        assert quiet_hours.start_time == TimeOfDay(22)
        assert quiet_hours.end_time == TimeOfDay(6, 30)

    def test_bad_quiet_hours(self):
        settings = ScheduleSettings(quiet_hours_start="25:00")
        with pytest.raises(TimeParseError):
            settings.build_quiet_hours()

    def test_engine(self):
        rng = random.Random(1)
        engine = ScheduleSettings(timezone="Asia/Tokyo").build_engine(rng)
        assert engine.config == RandomSchedule(30, 60)
        assert engine.rng is rng
        assert engine.tz.zone == "Asia/Tokyo"

    def test_sampler(self):
        sampler = ScheduleSettings(favourite_probability=0.4).build_sampler()
        assert sampler.favourite_probability == 0.4

    def test_planner_shares_random_source(self):
        settings = ScheduleSettings(batch_favourite_probability=0.3, notification_buffer=8)
        planner = settings.build_planner()
        assert planner.engine.rng is planner.sampler.rng
        assert planner.favourite_probability == 0.3
        assert planner.buffer_size == 8
        assert planner.sampler.favourite_probability == 0.2

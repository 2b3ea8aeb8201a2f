"""
Unit tests for SettingsService and the system_settings configuration source.
"""

import pytest

from core.constants import SETTING_TIME_ZONE, SETTING_TIME_ZONE_LABEL
from models import SystemSetting
from services.calendar_clock import CalendarClock
from services.settings_service import ScheduleSettings, SettingsService, SystemSettingsSource


class TestScheduleSettings:
    """Test schedule window validation."""

    def test_defaults(self):
        settings = ScheduleSettings()
        assert (settings.start_time, settings.end_time, settings.interval_minutes) == ("08:00", "18:00", 30)

    def test_normalizes_times(self):
        settings = ScheduleSettings(start_time="8:00", end_time="17:30:00")
        assert settings.start_time == "08:00"
        assert settings.end_time == "17:30"

    def test_end_must_follow_start(self):
        with pytest.raises(ValueError):
            ScheduleSettings(start_time="18:00", end_time="08:00")

    def test_interval_bounds(self):
        with pytest.raises(ValueError):
            ScheduleSettings(interval_minutes=0)


class TestSettingsService:
    """Test key/value settings access."""

    def test_set_and_get(self, db_session):
        SettingsService.set_setting(db_session, "a", "1")
        SettingsService.set_setting(db_session, "a", "2")
        SettingsService.set_setting(db_session, "b", "3")
        db_session.commit()

        assert SettingsService.get_settings(db_session, ["a", "b", "missing"]) == {"a": "2", "b": "3"}
        assert db_session.query(SystemSetting).count() == 2

    def test_schedule_settings_from_database(self, db_session):
        SettingsService.set_setting(db_session, "schedule_start_time", "09:00")
        SettingsService.set_setting(db_session, "schedule_interval_minutes", "45")
        db_session.commit()

        settings = SettingsService.get_schedule_settings(db_session)
        assert settings.start_time == "09:00"
        assert settings.end_time == "18:00"
        assert settings.interval_minutes == 45

    def test_invalid_stored_schedule_falls_back_to_defaults(self, db_session):
        SettingsService.set_setting(db_session, "schedule_start_time", "25:00")
        db_session.commit()

        assert SettingsService.get_schedule_settings(db_session) == ScheduleSettings()


class TestSystemSettingsSource:
    """Test the SQLAlchemy-backed configuration source."""

    @pytest.mark.asyncio
    async def test_read_and_write(self, session_factory):
        source = SystemSettingsSource(session_factory)

        await source.write(SETTING_TIME_ZONE, "America/Manaus")
        assert await source.read([SETTING_TIME_ZONE, SETTING_TIME_ZONE_LABEL]) == {
            SETTING_TIME_ZONE: "America/Manaus"
        }

    @pytest.mark.asyncio
    async def test_clock_round_trip_through_database(self, session_factory):
        clock = CalendarClock(SystemSettingsSource(session_factory))
        assert await clock.get_time_zone() == "America/Sao_Paulo"

        await clock.update_time_zone("America/Rio_Branco", "Acre (UTC-5)")

        config = await clock.get_config()
        assert config.time_zone_id == "America/Rio_Branco"
        assert config.time_zone_label == "Acre (UTC-5)"

"""
Settings service for centralized system settings management.

Provides key/value access to the system_settings table, the SQLAlchemy-backed
ConfigurationSource used by the calendar clock, and the validated schedule
window used to generate bookable time slots.
"""

import asyncio
import logging
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from sqlalchemy.orm import Session

from core.constants import (
    SCHEDULE_SETTING_KEYS,
    SETTING_SCHEDULE_END_TIME,
    SETTING_SCHEDULE_INTERVAL_MINUTES,
    SETTING_SCHEDULE_START_TIME,
)
from core.database import SessionLocal
from models import SystemSetting
from shared_types.availability import ScheduleWindow
from utils.datetime_utils import minutes_to_time_string, parse_time_to_minutes

logger = logging.getLogger(__name__)


class ScheduleSettings(BaseModel):
    """Schema for the daily schedule window."""
    start_time: str = Field(default="08:00", description="First bookable time of the day (HH:MM)")
    end_time: str = Field(default="18:00", description="End of the bookable day (HH:MM), exclusive")
    interval_minutes: int = Field(default=30, ge=5, le=240, description="Minutes between consecutive slots")

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_time(cls, v: str) -> str:
        """Normalize to zero-padded HH:MM."""
        return minutes_to_time_string(parse_time_to_minutes(v))

    @model_validator(mode="after")
    def check_window(self) -> "ScheduleSettings":
        if parse_time_to_minutes(self.end_time) <= parse_time_to_minutes(self.start_time):
            raise ValueError("O horário final deve ser posterior ao horário inicial")
        return self

    def to_window(self) -> ScheduleWindow:
        return ScheduleWindow(
            start_time=self.start_time,
            end_time=self.end_time,
            interval_minutes=self.interval_minutes,
        )


class SettingsService:
    """
    Service class for settings operations.

    Provides centralized access to system settings with validation.
    """

    @staticmethod
    def get_settings(db: Session, keys: List[str]) -> Dict[str, str]:
        """
        Read several settings at once.

        Args:
            db: Database session
            keys: Setting keys to read

        Returns:
            Mapping of key to value for the keys that exist (missing keys are omitted)
        """
        rows = db.query(SystemSetting).filter(SystemSetting.setting_key.in_(keys)).all()
        return {row.setting_key: row.setting_value for row in rows if row.setting_value is not None}

    @staticmethod
    def set_setting(db: Session, key: str, value: str) -> None:
        """
        Create or replace one setting.

        The caller owns the transaction (commit/rollback).
        """
        setting = db.query(SystemSetting).filter(SystemSetting.setting_key == key).first()
        if setting:
            setting.setting_value = value
        else:
            db.add(SystemSetting(setting_key=key, setting_value=value))
        db.flush()

    @staticmethod
    def get_schedule_settings(db: Session) -> ScheduleSettings:
        """
        Get the validated schedule window.

        Stored values that fail validation are logged and replaced by the
        defaults, so slot generation always has a usable window.
        """
        raw = SettingsService.get_settings(db, SCHEDULE_SETTING_KEYS)
        values: Dict[str, object] = {}
        if SETTING_SCHEDULE_START_TIME in raw:
            values["start_time"] = raw[SETTING_SCHEDULE_START_TIME]
        if SETTING_SCHEDULE_END_TIME in raw:
            values["end_time"] = raw[SETTING_SCHEDULE_END_TIME]
        if SETTING_SCHEDULE_INTERVAL_MINUTES in raw:
            values["interval_minutes"] = raw[SETTING_SCHEDULE_INTERVAL_MINUTES]

        try:
            return ScheduleSettings.model_validate(values)
        except ValueError as e:
            logger.warning(f"Invalid schedule settings {raw}, using defaults: {e}")
            return ScheduleSettings()


class SystemSettingsSource:
    """
    ConfigurationSource backed by the system_settings table.

    Queries run in a worker thread with their own short-lived session so the
    event loop is never blocked by the database.
    """

    def __init__(self, session_factory: Optional[Callable[[], Session]] = None):
        self._session_factory = session_factory or SessionLocal

    def _read_sync(self, keys: List[str]) -> Dict[str, str]:
        db = self._session_factory()
        try:
            return SettingsService.get_settings(db, keys)
        finally:
            db.close()

    def _write_sync(self, key: str, value: str) -> None:
        db = self._session_factory()
        try:
            SettingsService.set_setting(db, key, value)
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    async def read(self, keys: List[str]) -> Dict[str, str]:
        return await asyncio.to_thread(self._read_sync, keys)

    async def write(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write_sync, key, value)

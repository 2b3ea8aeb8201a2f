"""
Calendar clock service: "today" and date display under the configured time zone.

The calendar configuration (time zone, labels and formats) lives in
system_settings and is read lazily, once per process, through a
ConfigurationSource. Concurrent readers share one in-flight load
(single-flight). Admin updates write through the source and invalidate the
cache so the next read fetches the new values.

A failed load never surfaces to callers: date display must always proceed,
so the default configuration is cached and used instead.
"""

import asyncio
import logging
from datetime import datetime
from typing import Dict, List, Optional, Protocol

from pydantic import BaseModel, ConfigDict

from core.config import DEFAULT_TIME_ZONE, DEFAULT_TIME_ZONE_LABEL
from core.constants import (
    CALENDAR_SETTING_KEYS,
    DEFAULT_DATE_FORMAT,
    DEFAULT_TIME_FORMAT,
    SETTING_DATE_FORMAT,
    SETTING_TIME_FORMAT,
    SETTING_TIME_ZONE,
    SETTING_TIME_ZONE_LABEL,
)
from utils.datetime_utils import to_display_date, today_in, tomorrow_in
from utils.timezones import is_known_timezone

logger = logging.getLogger(__name__)


class ConfigurationSource(Protocol):
    """Keyed configuration store (last write wins per key)."""

    async def read(self, keys: List[str]) -> Dict[str, str]:
        ...

    async def write(self, key: str, value: str) -> None:
        ...


class CalendarConfig(BaseModel):
    """Process-wide calendar configuration. Replaced wholesale, never mutated."""
    model_config = ConfigDict(frozen=True)

    time_zone_id: str = DEFAULT_TIME_ZONE
    time_zone_label: str = DEFAULT_TIME_ZONE_LABEL
    date_format: str = DEFAULT_DATE_FORMAT
    time_format: str = DEFAULT_TIME_FORMAT

    @classmethod
    def from_settings(cls, settings: Dict[str, str]) -> "CalendarConfig":
        """Build a config from raw settings, falling back per key to the defaults."""
        return cls(
            time_zone_id=settings.get(SETTING_TIME_ZONE) or DEFAULT_TIME_ZONE,
            time_zone_label=settings.get(SETTING_TIME_ZONE_LABEL) or DEFAULT_TIME_ZONE_LABEL,
            date_format=settings.get(SETTING_DATE_FORMAT) or DEFAULT_DATE_FORMAT,
            time_format=settings.get(SETTING_TIME_FORMAT) or DEFAULT_TIME_FORMAT,
        )


class CalendarClock:
    """
    Cached calendar configuration with single-flight loading.

    Inject one instance per process (the API keeps it on app.state) and a
    fake ConfigurationSource in tests.
    """

    def __init__(self, source: ConfigurationSource):
        self._source = source
        self._config: Optional[CalendarConfig] = None
        self._loading: Optional["asyncio.Task[CalendarConfig]"] = None

    @property
    def cached_config(self) -> Optional[CalendarConfig]:
        """The cached configuration, or None before the first load."""
        return self._config

    async def get_config(self) -> CalendarConfig:
        """
        Get the calendar configuration, loading it on first use.

        Concurrent callers await the same load; all of them observe the
        same resolved value.
        """
        if self._config is not None:
            return self._config

        if self._loading is None:
            self._loading = asyncio.ensure_future(self._load())

        loading = self._loading
        # Shielded so one cancelled caller does not cancel the load for the others
        config = await asyncio.shield(loading)

        # Only publish if no invalidation happened while this load was in flight
        if self._loading is loading:
            self._config = config
            self._loading = None
        return config

    async def _load(self) -> CalendarConfig:
        try:
            settings = await self._source.read(CALENDAR_SETTING_KEYS)
        except Exception as e:
            logger.exception(f"Failed to load calendar settings, using default time zone {DEFAULT_TIME_ZONE}: {e}")
            return CalendarConfig()

        config = CalendarConfig.from_settings(settings or {})
        if not is_known_timezone(config.time_zone_id):
            logger.error(f"Unknown stored time zone {config.time_zone_id!r}, using default time zone {DEFAULT_TIME_ZONE}")
            config = config.model_copy(
                update={"time_zone_id": DEFAULT_TIME_ZONE, "time_zone_label": DEFAULT_TIME_ZONE_LABEL}
            )
        logger.info(f"Calendar settings loaded: time zone {config.time_zone_id}")
        return config

    async def get_time_zone(self) -> str:
        """IANA identifier of the configured time zone."""
        config = await self.get_config()
        return config.time_zone_id

    def invalidate(self) -> None:
        """Drop the cached configuration so the next read fetches it again."""
        self._config = None
        self._loading = None

    async def today(self, now: Optional[datetime] = None) -> str:
        """Today's calendar date (YYYY-MM-DD) in the configured time zone."""
        return today_in(await self.get_time_zone(), now)

    async def tomorrow(self, now: Optional[datetime] = None) -> str:
        """Tomorrow's calendar date (YYYY-MM-DD) in the configured time zone."""
        return tomorrow_in(await self.get_time_zone(), now)

    @staticmethod
    def to_display_date(date_string: str) -> str:
        """Reshape YYYY-MM-DD into DD/MM/YYYY without building a timestamp."""
        return to_display_date(date_string)

    async def update_time_zone(self, time_zone_id: str, time_zone_label: str) -> None:
        """
        Persist a new time zone and invalidate the cache.

        Write failures propagate: the admin screen must know the save failed.
        """
        await self._source.write(SETTING_TIME_ZONE, time_zone_id)
        await self._source.write(SETTING_TIME_ZONE_LABEL, time_zone_label)
        self.invalidate()
        logger.info(f"Time zone updated to {time_zone_id} ({time_zone_label})")

"""
System setting model storing process-wide key/value configuration.

Holds the calendar configuration (time zone, date and time formats) and the
default schedule window. Each key is written independently; last write wins.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy import String, TIMESTAMP, Text
from sqlalchemy.orm import Mapped, mapped_column

from core.database import Base


class SystemSetting(Base):
    """A single configuration entry, e.g. ("timezone", "America/Sao_Paulo")."""

    __tablename__ = "system_settings"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    """Unique identifier for the setting row."""

    setting_key: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    """Setting name (see core.constants SETTING_* keys)."""

    setting_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    """Setting value, always stored as text."""

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True))

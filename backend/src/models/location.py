"""
Location models: the cities a clinic serves and when each one is open.

A location is a city where the clinic attends (with its own clinic name,
address and map link). Availability rows declare the calendar periods in
which the location accepts bookings.
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import String, ForeignKey, TIMESTAMP, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.database import Base
from core.constants import MAX_STRING_LENGTH
from shared_types.availability import AvailabilityPeriod


class Location(Base):
    """
    Service location (city) entity.

    display_order defines the stable location ordering used for color
    assignment and display order when several locations are open on one day.
    """

    __tablename__ = "locations"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    city_name: Mapped[str] = mapped_column(String(MAX_STRING_LENGTH))
    """City name shown to clients (e.g., 'Tefé-AM')."""

    clinic_name: Mapped[Optional[str]] = mapped_column(String(MAX_STRING_LENGTH), nullable=True)
    """Clinic name used at this location. Falls back to the default clinic name if empty."""

    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    map_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    display_order: Mapped[int] = mapped_column(Integer, default=0)
    """Stable ordering across locations (ascending, ties broken by id)."""

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True))

    availability: Mapped[List["LocationAvailability"]] = relationship(
        back_populates="location", cascade="all, delete-orphan"
    )


class LocationAvailability(Base):
    """
    A period during which a location accepts bookings.

    Dates are stored as canonical YYYY-MM-DD strings, never as timestamps,
    so "which day" comparisons are independent of any time zone.
    """

    __tablename__ = "location_availability"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    location_id: Mapped[int] = mapped_column(ForeignKey("locations.id"), index=True)

    start_date: Mapped[str] = mapped_column(String(10), index=True)
    """First day of the period (YYYY-MM-DD)."""

    end_date: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    """Last day of the period (YYYY-MM-DD), inclusive. NULL means a single-day period."""

    start_time: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    end_time: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)

    color: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    """Calendar color class. NULL means the color is derived from the location ordering."""

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True))

    location: Mapped["Location"] = relationship(back_populates="availability")

    def to_period(self) -> AvailabilityPeriod:
        """Convert to the storage-agnostic period used by the resolver."""
        return AvailabilityPeriod(
            location_id=self.location_id,
            start_date=self.start_date,
            end_date=self.end_date,
            start_time=self.start_time,
            end_time=self.end_time,
            color=self.color,
        )

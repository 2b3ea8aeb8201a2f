"""
Shared types for availability-related functionality.

This module contains shared data classes used by the availability resolver,
the booking API and the location store so they agree on one shape.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AvailabilityPeriod:
    """
    A date range during which a location accepts bookings.

    Dates are canonical YYYY-MM-DD strings. end_date None means a single-day
    period (end_date == start_date for comparison purposes).
    """
    location_id: int
    start_date: str
    end_date: Optional[str] = None
    start_time: Optional[str] = None  # Format: "HH:MM"
    end_time: Optional[str] = None  # Format: "HH:MM"
    color: Optional[str] = None  # Display color class chosen by the admin

    @property
    def effective_end_date(self) -> str:
        """End date used for comparisons."""
        return self.end_date or self.start_date

    def to_dict(self) -> dict[str, str | int | None]:
        """Convert to dictionary format."""
        return {
            "location_id": self.location_id,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "color": self.color,
        }


@dataclass(frozen=True)
class ScheduleWindow:
    """Daily opening hours used to generate bookable time slots."""
    start_time: str  # Format: "HH:MM"
    end_time: str  # Format: "HH:MM", exclusive
    interval_minutes: int


@dataclass(frozen=True)
class BookedSlot:
    """An existing booking occupying part of a day."""
    start_time: str  # Format: "HH:MM" or "HH:MM:SS"
    duration_minutes: int

"""
Availability service for shared scheduling and availability logic.

Resolves which locations are open on a calendar day and which times can still
be booked. Calendar days are canonical YYYY-MM-DD strings and are compared as
strings: lexicographic order equals chronological order for that format, and
no time zone can shift a string.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from core.constants import (
    APPOINTMENT_STATUS_CANCELED,
    CITY_COLORS,
    DEFAULT_PROCEDURE_DURATION_MINUTES,
    SAME_DAY_BOOKING_LEAD_MINUTES,
)
from models import Appointment, Location, LocationAvailability, Procedure
from services.calendar_clock import CalendarClock
from services.settings_service import SettingsService
from shared_types.availability import AvailabilityPeriod, BookedSlot, ScheduleWindow
from utils.datetime_utils import (
    is_canonical_date,
    minutes_to_time_string,
    now_in,
    parse_time_to_minutes,
)

logger = logging.getLogger(__name__)


def is_date_in_period(date: str, period: AvailabilityPeriod) -> bool:
    """Inclusive on both ends; a period without end_date covers only start_date."""
    return period.start_date <= date <= period.effective_end_date


def resolve_open_periods(date: str, periods: Iterable[AvailabilityPeriod]) -> List[AvailabilityPeriod]:
    """
    Return every period whose [start_date, end_date or start_date] contains date.

    All matches are returned in input order; picking among overlapping
    periods (color, display order) is left to the caller. Periods whose end
    precedes their start are not validated here, they simply match nothing.

    Args:
        date: Canonical YYYY-MM-DD calendar date
        periods: Availability periods to check

    Returns:
        Matching periods (empty list when none match)
    """
    return [period for period in periods if is_date_in_period(date, period)]


def open_location_ids(
    date: str,
    periods: Iterable[AvailabilityPeriod],
    location_order: Sequence[int] = (),
) -> List[int]:
    """
    Distinct ids of the locations open on date, in the stable location order.

    Locations missing from location_order come last, in the order their
    periods appear.
    """
    matched: List[int] = []
    for period in resolve_open_periods(date, periods):
        if period.location_id not in matched:
            matched.append(period.location_id)

    rank = {location_id: index for index, location_id in enumerate(location_order)}
    return sorted(matched, key=lambda location_id: rank.get(location_id, len(rank)))


def assign_location_colors(
    location_order: Sequence[int],
    periods: Iterable[AvailabilityPeriod] = (),
) -> Dict[int, str]:
    """
    Deterministic calendar color per location.

    A color set on a period wins for its location; otherwise the color is
    picked by the location's position in the stable ordering.
    """
    colors = {
        location_id: CITY_COLORS[index % len(CITY_COLORS)]
        for index, location_id in enumerate(location_order)
    }
    for period in periods:
        if period.color:
            colors[period.location_id] = period.color
    return colors


def generate_time_slots(schedule: ScheduleWindow) -> List[str]:
    """
    Generate HH:MM start times from start_time (inclusive) to end_time (exclusive).

    Args:
        schedule: Daily window and step between slots

    Returns:
        Slot start times, e.g. ["08:00", "08:30", ...]
    """
    start = parse_time_to_minutes(schedule.start_time)
    end = parse_time_to_minutes(schedule.end_time)
    if schedule.interval_minutes <= 0:
        return []
    return [minutes_to_time_string(minutes) for minutes in range(start, end, schedule.interval_minutes)]


def _overlaps(start1: int, end1: int, start2: int, end2: int) -> bool:
    """Check if two half-open minute intervals overlap."""
    return start1 < end2 and start2 < end1


def filter_available_slots(
    date: str,
    slots: Iterable[str],
    booked: Iterable[BookedSlot],
    duration_minutes: int,
    today: str,
    now_minutes: int,
) -> List[str]:
    """
    Drop slots that conflict with existing bookings or are too close to now.

    A slot [start, start + duration) conflicts with a booking
    [booked_start, booked_start + booked_duration) when they overlap. On the
    current day a slot must also start more than SAME_DAY_BOOKING_LEAD_MINUTES
    after now_minutes.

    Args:
        date: Day being booked (YYYY-MM-DD)
        slots: Candidate HH:MM start times
        booked: Existing bookings on that day
        duration_minutes: Duration of the procedure being booked
        today: Today's date in the clinic time zone (YYYY-MM-DD)
        now_minutes: Minutes after midnight of "now" in the clinic time zone

    Returns:
        Bookable slots, in input order
    """
    booked_ranges = [
        (start, start + booking.duration_minutes)
        for booking in booked
        for start in [parse_time_to_minutes(booking.start_time)]
    ]

    available: List[str] = []
    for slot in slots:
        start = parse_time_to_minutes(slot)
        if date == today and start <= now_minutes + SAME_DAY_BOOKING_LEAD_MINUTES:
            continue
        end = start + duration_minutes
        if any(_overlaps(start, end, booked_start, booked_end) for booked_start, booked_end in booked_ranges):
            continue
        available.append(slot)
    return available


class AvailabilityService:
    """
    Service class for availability operations.

    Reads locations, periods and bookings through SQLAlchemy and feeds them
    to the pure resolver functions above.
    """

    @staticmethod
    def validate_date(date: str) -> str:
        """
        Validate a requested calendar date.

        Raises:
            HTTPException: If the date is not a canonical YYYY-MM-DD date
        """
        if not is_canonical_date(date):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Data inválida (use o formato AAAA-MM-DD)"
            )
        return date

    @staticmethod
    def get_location_order(db: Session) -> List[int]:
        """Location ids in their stable display order."""
        rows = db.query(Location.id).order_by(Location.display_order, Location.id).all()
        return [row[0] for row in rows]

    @staticmethod
    def get_open_periods(db: Session, date: str, location_id: Optional[int] = None) -> List[AvailabilityPeriod]:
        """
        Periods covering date, optionally for one location.

        Rows are narrowed with start_date <= date in SQL (string comparison,
        same as the resolver) and the end bound is checked by the resolver.
        """
        query = db.query(LocationAvailability).filter(LocationAvailability.start_date <= date)
        if location_id is not None:
            query = query.filter(LocationAvailability.location_id == location_id)
        rows = query.order_by(LocationAvailability.start_date, LocationAvailability.id).all()
        return resolve_open_periods(date, [row.to_period() for row in rows])

    @staticmethod
    def get_booked_slots(db: Session, date: str) -> List[BookedSlot]:
        """Non-cancelled bookings on a day with their procedure durations."""
        rows = (
            db.query(Appointment.appointment_time, Procedure.duration_minutes)
            .join(Procedure, Appointment.procedure_id == Procedure.id)
            .filter(
                Appointment.appointment_date == date,
                Appointment.status != APPOINTMENT_STATUS_CANCELED,
                Appointment.appointment_time.isnot(None),
            )
            .all()
        )
        return [
            BookedSlot(start_time=start_time, duration_minutes=duration or DEFAULT_PROCEDURE_DURATION_MINUTES)
            for start_time, duration in rows
        ]

    @staticmethod
    async def get_available_times(
        db: Session,
        date: str,
        location_id: int,
        procedure_id: Optional[int],
        clock: CalendarClock,
    ) -> List[str]:
        """
        Bookable start times for a location on a day.

        Returns an empty list when the location is not open on that day.
        """
        AvailabilityService.validate_date(date)

        if not AvailabilityService.get_open_periods(db, date, location_id):
            logger.debug(f"Location {location_id} is not open on {date}")
            return []

        schedule = SettingsService.get_schedule_settings(db).to_window()
        slots = generate_time_slots(schedule)

        duration = DEFAULT_PROCEDURE_DURATION_MINUTES
        if procedure_id is not None:
            procedure = db.query(Procedure).filter(Procedure.id == procedure_id).first()
            if not procedure:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Procedimento não encontrado"
                )
            duration = procedure.duration_minutes or DEFAULT_PROCEDURE_DURATION_MINUTES

        time_zone = await clock.get_time_zone()
        now = now_in(time_zone)
        return filter_available_slots(
            date=date,
            slots=slots,
            booked=AvailabilityService.get_booked_slots(db, date),
            duration_minutes=duration,
            today=now.strftime("%Y-%m-%d"),
            now_minutes=now.hour * 60 + now.minute,
        )

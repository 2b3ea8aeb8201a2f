"""
Utility functions for consistent appointment queries.

This module contains reusable query functions so every service reads
appointments the same way: with their procedure loaded and converted to
storage-agnostic AppointmentSnapshot objects.
"""

from typing import List, Optional

from sqlalchemy.orm import Query, Session, joinedload

from core.constants import APPOINTMENT_STATUS_CANCELED
from models import Appointment
from shared_types.booking import AppointmentSnapshot


def filter_active_appointments(query: Query[Appointment]) -> Query[Appointment]:
    """
    Exclude cancelled appointments.

    Args:
        query: Base query for Appointment

    Returns:
        Query filtered to appointments that still occupy a slot or a package session
    """
    return query.filter(Appointment.status != APPOINTMENT_STATUS_CANCELED)


def find_appointment(db: Session, appointment_id: int) -> Optional[Appointment]:
    """Get an appointment row by id with its procedure and location loaded."""
    return (
        db.query(Appointment)
        .options(joinedload(Appointment.procedure), joinedload(Appointment.location))
        .filter(Appointment.id == appointment_id)
        .first()
    )


def find_appointment_snapshot(db: Session, appointment_id: int) -> Optional[AppointmentSnapshot]:
    """Get an appointment by id as a snapshot, or None if it does not exist."""
    appointment = find_appointment(db, appointment_id)
    return appointment.to_snapshot() if appointment else None


def list_package_appointments(db: Session, client_phone: str, procedure_id: int) -> List[Appointment]:
    """
    All non-cancelled appointments of one client for one procedure.

    These rows form the client's package for that procedure.
    """
    query = db.query(Appointment).filter(
        Appointment.client_phone == client_phone,
        Appointment.procedure_id == procedure_id,
    )
    return filter_active_appointments(query).all()


class AppointmentStore:
    """
    Read-only appointment lookup bound to a session.

    Passed to the package rules as the parent lookup.
    """

    def __init__(self, db: Session):
        self._db = db

    def find_by_id(self, appointment_id: int) -> Optional[AppointmentSnapshot]:
        return find_appointment_snapshot(self._db, appointment_id)

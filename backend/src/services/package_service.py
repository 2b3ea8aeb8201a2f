"""
Package service for multi-session treatment packages.

A package is a set of appointments of one client for one procedure with
total_sessions > 1. The first session (session_number == 1) is the anchor:
only its value counts toward revenue and only its payment status is
authoritative. Later sessions point at the anchor through package_parent_id
and mirror its payment status.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from core.constants import PAYMENT_STATUS_AWAITING
from models import Appointment
from shared_types.booking import AppointmentSnapshot, PackageSessionInfo, PackageSessionUpdate
from utils.appointment_queries import AppointmentStore, find_appointment, list_package_appointments

logger = logging.getLogger(__name__)

AppointmentLookup = Callable[[int], Optional[AppointmentSnapshot]]


def describe(appointment: AppointmentSnapshot) -> PackageSessionInfo:
    """
    Compute display metadata for an appointment's package session.

    Non-anchor sessions of a package get a return-visit marker appended to
    the procedure name, e.g. "Laser - Retorno - 2/5".
    """
    total_sessions = appointment.total_sessions or 1
    session_number = appointment.session_number or 1
    is_package = total_sessions > 1
    is_first_session = session_number == 1

    display_name = appointment.procedure_name or ""
    if is_package and not is_first_session:
        display_name = f"{display_name} - Retorno - {session_number}/{total_sessions}"

    return PackageSessionInfo(
        is_package=is_package,
        is_first_session=is_first_session,
        session_number=session_number,
        total_sessions=total_sessions,
        display_name=display_name,
        should_count_value=is_first_session,
    )


def resolve_payment_status(appointment: AppointmentSnapshot, lookup_by_id: AppointmentLookup) -> str:
    """
    Get the payment status shown for an appointment.

    Sessions with a package parent mirror the parent's status. The parent is
    looked up exactly once; if the lookup fails or finds nothing the appointment's own status
    is returned so the caller can always render something.

    Args:
        appointment: Appointment to resolve
        lookup_by_id: Read-only lookup returning a snapshot or None

    Returns:
        Payment status, "aguardando" when unset
    """
    own_status = appointment.payment_status or PAYMENT_STATUS_AWAITING
    if not appointment.package_parent_id:
        return own_status

    try:
        parent = lookup_by_id(appointment.package_parent_id)
    except Exception as e:
        logger.warning(
            f"Failed to look up package parent {appointment.package_parent_id} "
            f"for appointment {appointment.id}: {e}"
        )
        return own_status

    if parent is None:
        logger.warning(
            f"Package parent {appointment.package_parent_id} of appointment {appointment.id} not found"
        )
        return own_status
    return parent.payment_status or PAYMENT_STATUS_AWAITING


def resolve_value(appointment: AppointmentSnapshot) -> float:
    """Recorded payment value, else the procedure list price, else 0."""
    if appointment.payment_value is not None:
        return appointment.payment_value
    if appointment.procedure_price is not None:
        return appointment.procedure_price
    return 0.0


def package_value(appointment: AppointmentSnapshot) -> float:
    """
    Value counted toward revenue.

    Explicit return visits and non-anchor package sessions count as 0.
    """
    if appointment.return_of_appointment_id:
        return 0.0
    info = describe(appointment)
    if info.is_package and not info.is_first_session:
        return 0.0
    return resolve_value(appointment)


def format_session_progress(appointment: AppointmentSnapshot) -> str:
    """Progress label like "2/5 sessões", empty for single sessions."""
    info = describe(appointment)
    if not info.is_package:
        return ""
    return f"{info.session_number}/{info.total_sessions} sessões"


def _session_sort_key(appointment: AppointmentSnapshot) -> Tuple[str, str, str]:
    return (appointment.date, appointment.time or "00:00", appointment.created_at or "")


def renumber_package_sessions(
    appointments: Sequence[AppointmentSnapshot],
    total_sessions: int,
) -> List[PackageSessionUpdate]:
    """
    Renumber a package after sessions were added or removed by hand.

    Sessions are ordered by calendar day, then time (missing time sorts as
    00:00), then creation instant. The earliest becomes the anchor.

    Returns:
        One update per appointment, or an empty list when total_sessions <= 1
        or there is nothing to renumber
    """
    if not total_sessions or total_sessions <= 1 or not appointments:
        return []

    ordered = sorted(appointments, key=_session_sort_key)
    anchor_id = ordered[0].id
    return [
        PackageSessionUpdate(
            appointment_id=appointment.id,
            session_number=index + 1,
            total_sessions=total_sessions,
            package_parent_id=None if index == 0 else anchor_id,
        )
        for index, appointment in enumerate(ordered)
    ]


class PackageService:
    """
    Service class for package operations.

    Reads and writes appointments through SQLAlchemy; the session rules are
    the module-level functions above.
    """

    @staticmethod
    def get_package_summary(db: Session, appointment_id: int) -> dict:
        """
        Get session info, mirrored payment status and counted value of an appointment.

        Raises:
            HTTPException: If the appointment does not exist
        """
        appointment = find_appointment(db, appointment_id)
        if not appointment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Agendamento não encontrado"
            )

        snapshot = appointment.to_snapshot()
        store = AppointmentStore(db)
        return {
            "appointment_id": snapshot.id,
            "info": describe(snapshot),
            "payment_status": resolve_payment_status(snapshot, store.find_by_id),
            "value": resolve_value(snapshot),
            "counted_value": package_value(snapshot),
            "progress": format_session_progress(snapshot),
        }

    @staticmethod
    def recalculate_package_sessions(
        db: Session,
        client_phone: str,
        procedure_id: int,
        total_sessions: int,
    ) -> List[PackageSessionUpdate]:
        """
        Renumber the non-cancelled sessions of a client's package and persist it.

        The caller owns the transaction (commit/rollback).

        Returns:
            Applied updates (empty when nothing changed)
        """
        rows = list_package_appointments(db, client_phone, procedure_id)
        updates = renumber_package_sessions([row.to_snapshot() for row in rows], total_sessions)
        if not updates:
            return []

        by_id = {row.id: row for row in rows}
        for update in updates:
            row: Appointment = by_id[update.appointment_id]
            row.session_number = update.session_number
            row.total_sessions = update.total_sessions
            row.package_parent_id = update.package_parent_id
        db.flush()

        logger.info(
            f"Renumbered {len(updates)} sessions for procedure {procedure_id} "
            f"(anchor appointment {updates[0].appointment_id})"
        )
        return updates

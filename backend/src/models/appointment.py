"""
Appointment model representing a booked session of a procedure.

Appointments that belong to a multi-session package share a procedure and
client; the first session (session_number == 1) is the anchor that carries the
payment value and payment status, and every later session references it
through package_parent_id.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy import String, ForeignKey, Index, TIMESTAMP, Integer, Float
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.database import Base
from core.constants import MAX_STRING_LENGTH
from shared_types.booking import AppointmentSnapshot


class Appointment(Base):
    """
    Appointment entity for one client, procedure and calendar slot.

    The calendar day is stored as a canonical YYYY-MM-DD string and the time
    as HH:MM, so the booked day never depends on the server time zone.
    """

    __tablename__ = "appointments"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    client_name: Mapped[str] = mapped_column(String(MAX_STRING_LENGTH))
    client_phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    client_cpf: Mapped[Optional[str]] = mapped_column(String(11), nullable=True)
    """Cleaned CPF digits of the client."""

    procedure_id: Mapped[int] = mapped_column(ForeignKey("procedures.id"), index=True)
    location_id: Mapped[Optional[int]] = mapped_column(ForeignKey("locations.id"), nullable=True)

    appointment_date: Mapped[str] = mapped_column(String(10))
    """Calendar day of the appointment (YYYY-MM-DD)."""

    appointment_time: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    """Start time (HH:MM)."""

    status: Mapped[str] = mapped_column(String(50), default="pendente")
    """Current status, e.g. 'pendente', 'confirmado', 'cancelado', 'realizado'."""

    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    session_number: Mapped[int] = mapped_column(Integer, default=1)
    total_sessions: Mapped[int] = mapped_column(Integer, default=1)

    package_parent_id: Mapped[Optional[int]] = mapped_column(ForeignKey("appointments.id"), nullable=True)
    """Anchor session of the package. NULL for the anchor itself and for single sessions."""

    return_of_appointment_id: Mapped[Optional[int]] = mapped_column(ForeignKey("appointments.id"), nullable=True)
    """Set when this appointment is a free return visit of another appointment."""

    payment_status: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    payment_value: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True))

    procedure = relationship("Procedure")
    location = relationship("Location")

    __table_args__ = (
        Index("idx_appointments_date_status", "appointment_date", "status"),
        Index("idx_appointments_package", "client_phone", "procedure_id"),
    )

    def to_snapshot(self) -> AppointmentSnapshot:
        """Convert to the storage-agnostic snapshot used by the booking rules."""
        procedure = self.procedure
        return AppointmentSnapshot(
            id=self.id,
            date=self.appointment_date,
            time=self.appointment_time,
            status=self.status,
            procedure_id=self.procedure_id,
            procedure_name=procedure.name if procedure else "",
            procedure_price=procedure.price if procedure else None,
            session_number=self.session_number or 1,
            total_sessions=self.total_sessions or 1,
            package_parent_id=self.package_parent_id,
            payment_status=self.payment_status,
            payment_value=self.payment_value,
            return_of_appointment_id=self.return_of_appointment_id,
            client_name=self.client_name,
            client_phone=self.client_phone,
            notes=self.notes,
            location_id=self.location_id,
            created_at=self.created_at.isoformat() if self.created_at else None,
        )

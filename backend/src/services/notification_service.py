"""
Notification service for composing outbound WhatsApp messages.

Messages are composed here and handed to the delivery provider by the
caller; this service never sends anything itself.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from core.message_template_constants import (
    FALLBACK_MESSAGE_PARTS,
    TEMPLATE_CANCELLATION,
    TEMPLATE_CONFIRMATION,
    TEMPLATE_NEW_BOOKING,
    TEMPLATE_REMINDER,
    VAR_APPOINTMENT_DATE,
    VAR_APPOINTMENT_TIME,
    VAR_CLIENT_NAME,
    VAR_PROCEDURE_NAME,
)
from models import Appointment
from services.calendar_clock import CalendarClock
from services.message_template_service import MessageTemplateService
from utils.appointment_queries import find_appointment
from utils.phone_validator import normalize_whatsapp_phone

logger = logging.getLogger(__name__)


class NotificationEvent(Enum):
    CONFIRMATION = "confirmation"
    CANCELLATION = "cancellation"
    REMINDER = "reminder"
    NEW_BOOKING = "new_booking"


EVENT_TEMPLATE_TYPES: Dict[NotificationEvent, str] = {
    NotificationEvent.CONFIRMATION: TEMPLATE_CONFIRMATION,
    NotificationEvent.CANCELLATION: TEMPLATE_CANCELLATION,
    NotificationEvent.REMINDER: TEMPLATE_REMINDER,
    NotificationEvent.NEW_BOOKING: TEMPLATE_NEW_BOOKING,
}


@dataclass(frozen=True)
class OutboundMessage:
    """A composed message ready for the delivery provider."""
    phone: str
    message: str
    template_type: str


class NotificationService:
    """Service for composing appointment notifications to clients."""

    @staticmethod
    def build_fallback_message(
        template_type: str,
        variables: Dict[str, Optional[str]],
        notes: Optional[str],
        location_block: str,
    ) -> str:
        """
        Built-in message used when no template is stored for the type.

        Layout: heading, greeting, intro, one "- Label: value" line per
        detail, the location block, then the closing line.
        """
        heading, intro, outro = FALLBACK_MESSAGE_PARTS[template_type]

        details: List[str] = [
            f"- Data: {variables.get(VAR_APPOINTMENT_DATE) or ''}",
            f"- Horário: {variables.get(VAR_APPOINTMENT_TIME) or ''}",
            f"- Procedimento: {variables.get(VAR_PROCEDURE_NAME) or ''}",
        ]
        if notes and notes.strip():
            details.append(f"- Observações: {notes.strip()}")
        if location_block:
            details.extend(location_block.split("\n"))

        return "\n".join([
            heading,
            "",
            f"Olá {variables.get(VAR_CLIENT_NAME) or ''}!",
            "",
            intro,
            "\n".join(details),
            "",
            outro,
        ])

    @staticmethod
    def compose_for_appointment(
        db: Session,
        appointment: Appointment,
        event: NotificationEvent,
        clock: CalendarClock,
    ) -> OutboundMessage:
        """
        Compose the message for an appointment event.

        The stored template of the event type is used when configured,
        otherwise the built-in text.

        Raises:
            HTTPException: If the client's phone cannot be used for WhatsApp
        """
        template_type = EVENT_TEMPLATE_TYPES[event]

        try:
            phone = normalize_whatsapp_phone(appointment.client_phone)
        except ValueError as e:
            logger.warning(f"Appointment {appointment.id} has no usable phone: {e}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e)
            )

        variables = MessageTemplateService.build_appointment_variables(appointment, clock)
        template = MessageTemplateService.get_template(db, template_type)

        if template:
            message = MessageTemplateService.resolve(template, variables, location_record=appointment.location)
        else:
            logger.info(f"No template stored for {template_type}, using built-in text")
            location_block = MessageTemplateService.format_location_block(variables, appointment.location)
            message = NotificationService.build_fallback_message(
                template_type, variables, appointment.notes, location_block
            )

        return OutboundMessage(phone=phone, message=message, template_type=template_type)

    @staticmethod
    def compose(
        db: Session,
        appointment_id: int,
        event: NotificationEvent,
        clock: CalendarClock,
    ) -> OutboundMessage:
        """
        Compose the message for an appointment event by appointment id.

        Raises:
            HTTPException: If the appointment does not exist or has no usable phone
        """
        appointment = find_appointment(db, appointment_id)
        if not appointment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Agendamento não encontrado"
            )
        return NotificationService.compose_for_appointment(db, appointment, event, clock)

"""
Message template service for rendering appointment messages with placeholders.

Templates use {variable} placeholders in either of two vocabularies: the
canonical English names (e.g., {clientName}, {appointmentDate}) or their
Portuguese counterparts (e.g., {nomeCliente}, {dataAgendamento}). A static
synonym table makes both resolve to the same value. The derived
{locationBlock} holds the clinic name, city, address and map link as a
ready-to-send multi-line block.
"""

import logging
import re
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from core.config import DEFAULT_CITY_NAME, DEFAULT_CLINIC_NAME
from core.constants import LOCATION_PIN_PREFIX
from core.message_template_constants import (
    TEMPLATE_VARIABLE_SYNONYMS,
    VAR_APPOINTMENT_DATE,
    VAR_APPOINTMENT_TIME,
    VAR_CITY_NAME,
    VAR_CLIENT_NAME,
    VAR_CLIENT_PHONE,
    VAR_CLINIC_ADDRESS,
    VAR_CLINIC_LOCATION,
    VAR_CLINIC_MAP_URL,
    VAR_CLINIC_NAME,
    VAR_LOCATION_BLOCK,
    VAR_NOTES,
    VAR_PROCEDURE_NAME,
    VAR_SPECIFICATIONS,
)
from models import Appointment, WhatsAppTemplate
from services.calendar_clock import CalendarClock

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")

LOCATION_BLOCK_ALIAS = next(
    alternate for alternate, canonical in TEMPLATE_VARIABLE_SYNONYMS.items() if canonical == VAR_LOCATION_BLOCK
)


def _sanitize(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


class MessageTemplateService:
    """Service for rendering message templates with placeholders."""

    @staticmethod
    def build_variables(variables: Mapping[str, Optional[str]]) -> Dict[str, Optional[str]]:
        """
        Merge raw variables with their synonyms.

        Raw variables go in first; then, for every pair in the synonym table,
        a key that is present fills its missing counterpart. Explicitly
        supplied values are never overwritten.
        """
        merged: Dict[str, Optional[str]] = dict(variables)
        for alternate, canonical in TEMPLATE_VARIABLE_SYNONYMS.items():
            if alternate in merged and canonical not in merged:
                merged[canonical] = merged[alternate]
            elif canonical in merged and alternate not in merged:
                merged[alternate] = merged[canonical]
        return merged

    @staticmethod
    def format_location_block(
        location_inputs: Optional[Mapping[str, Optional[str]]] = None,
        location_record: Optional[Any] = None,
        default_clinic_name: str = DEFAULT_CLINIC_NAME,
        default_city_name: str = DEFAULT_CITY_NAME,
        icon_prefix: str = LOCATION_PIN_PREFIX,
    ) -> str:
        """
        Build the multi-line location block of a message.

        Precedence:
        1. A pre-built block ({clinicLocation}) is used as is, only its first
           non-empty line gets the pin prefix; empty lines are dropped.
        2. Otherwise the block is assembled from "{clinic} - {city}" (or the
           clinic alone), the address and the map URL. Each value prefers the
           explicit input, then the location record, then the default.
           Empty lines are omitted.

        Args:
            location_inputs: Variables supplied with the message (either vocabulary)
            location_record: Object with city_name, clinic_name, address and
                map_url attributes (e.g., a Location row), or None
            default_clinic_name: Clinic name used when neither input nor record has one
            default_city_name: City name used when neither input nor record has one
            icon_prefix: Prefix of the first line

        Returns:
            Lines joined with "\\n" (empty string when nothing is known)
        """
        inputs = MessageTemplateService.build_variables(location_inputs or {})

        prebuilt = _sanitize(inputs.get(VAR_CLINIC_LOCATION))
        if prebuilt:
            lines = [line.strip() for line in prebuilt.split("\n") if line.strip()]
            if lines:
                return "\n".join([icon_prefix + lines[0]] + lines[1:])

        def record_value(field: str) -> str:
            return _sanitize(getattr(location_record, field, None)) if location_record is not None else ""

        city_name = (
            _sanitize(inputs.get(VAR_CITY_NAME)) or record_value("city_name") or _sanitize(default_city_name)
        )
        clinic_name = (
            _sanitize(inputs.get(VAR_CLINIC_NAME)) or record_value("clinic_name") or _sanitize(default_clinic_name)
        )
        address = _sanitize(inputs.get(VAR_CLINIC_ADDRESS)) or record_value("address")
        map_url = _sanitize(inputs.get(VAR_CLINIC_MAP_URL)) or record_value("map_url")

        lines: List[str] = []
        first_line = f"{clinic_name} - {city_name}" if city_name else clinic_name
        if first_line:
            lines.append(icon_prefix + first_line)
        if address:
            lines.append(address)
        if map_url:
            lines.append(map_url)
        return "\n".join(lines)

    @staticmethod
    def render_message(template: str, context: Mapping[str, Optional[str]]) -> str:
        """
        Replace {key} placeholders with values from context.

        Keys are matched literally (regex-escaped), longest first to avoid
        substring conflicts. None values render as empty strings and
        placeholders without a key in context stay in the output as is.

        Args:
            template: Message template with placeholders
            context: Placeholder values

        Returns:
            Rendered message
        """
        message = template
        for key in sorted(context.keys(), key=len, reverse=True):
            value = context.get(key)
            replacement = "" if value is None else str(value)
            message = re.sub(re.escape(f"{{{key}}}"), lambda _: replacement, message)
        return message

    @staticmethod
    def _build_context(
        variables: Mapping[str, Optional[str]],
        location_inputs: Optional[Mapping[str, Optional[str]]],
        location_record: Optional[Any],
    ) -> Dict[str, Optional[str]]:
        raw: Dict[str, Optional[str]] = dict(variables)
        if VAR_LOCATION_BLOCK not in raw and LOCATION_BLOCK_ALIAS not in raw:
            raw[VAR_LOCATION_BLOCK] = MessageTemplateService.format_location_block(
                location_inputs if location_inputs is not None else variables,
                location_record,
            )
        return MessageTemplateService.build_variables(raw)

    @staticmethod
    def resolve(
        template: str,
        variables: Mapping[str, Optional[str]],
        location_inputs: Optional[Mapping[str, Optional[str]]] = None,
        location_record: Optional[Any] = None,
    ) -> str:
        """
        Render a template with merged variables and the derived location block.

        Location fields are read from location_inputs when given, otherwise
        from the variables themselves. A locationBlock supplied by the caller
        is kept.
        """
        context = MessageTemplateService._build_context(variables, location_inputs, location_record)
        return MessageTemplateService.render_message(template, context)

    @staticmethod
    def extract_used_placeholders(template: str, context: Mapping[str, Optional[str]]) -> Dict[str, str]:
        """
        Extract placeholders used in template and their values from context.

        Returns:
            Dictionary mapping placeholder names to their values (as strings)
        """
        used: Dict[str, str] = {}
        for key in context.keys():
            if f"{{{key}}}" in template:
                value = context.get(key)
                used[key] = "" if value is None else str(value)
        return used

    @staticmethod
    def find_unresolved_placeholders(template: str, context: Mapping[str, Optional[str]]) -> List[str]:
        """Placeholder names in template with no value in context, in order of first use."""
        unresolved: List[str] = []
        for name in PLACEHOLDER_PATTERN.findall(template):
            if name not in context and name not in unresolved:
                unresolved.append(name)
        return unresolved

    @staticmethod
    def build_appointment_variables(appointment: Appointment, clock: CalendarClock) -> Dict[str, Optional[str]]:
        """
        Build the standard variable set for an appointment.

        Returns dict with canonical keys:
        - {clientName}, {clientPhone}
        - {appointmentDate}: DD/MM/YYYY
        - {appointmentTime}: HH:MM
        - {procedureName}
        - {notes}: "\\n📝 Observações: ..." when the appointment has notes, otherwise empty
        - {cityName}, {clinicName}, {clinicAddress}, {clinicMapUrl}: from the location
        - {specifications}: empty unless filled by the caller
        """
        location = appointment.location
        procedure = appointment.procedure

        if appointment.notes and appointment.notes.strip():
            notes = f"\n📝 Observações: {appointment.notes.strip()}"
        else:
            notes = ""

        return {
            VAR_CLIENT_NAME: appointment.client_name,
            VAR_CLIENT_PHONE: appointment.client_phone or "",
            VAR_APPOINTMENT_DATE: clock.to_display_date(appointment.appointment_date),
            VAR_APPOINTMENT_TIME: appointment.appointment_time or "",
            VAR_PROCEDURE_NAME: procedure.name if procedure else "",
            VAR_NOTES: notes,
            VAR_CITY_NAME: location.city_name if location else "",
            VAR_CLINIC_NAME: (location.clinic_name if location else None) or DEFAULT_CLINIC_NAME,
            VAR_CLINIC_ADDRESS: location.address if location else "",
            VAR_CLINIC_MAP_URL: location.map_url if location else "",
            VAR_SPECIFICATIONS: "",
        }

    @staticmethod
    def get_template(db: Session, template_type: str) -> Optional[str]:
        """Stored template text for a type, or None when not configured."""
        template = db.query(WhatsAppTemplate).filter(WhatsAppTemplate.template_type == template_type).first()
        if template and template.template_content and template.template_content.strip():
            return template.template_content
        return None

    @staticmethod
    def preview(
        template: str,
        variables: Mapping[str, Optional[str]],
        location_record: Optional[Any] = None,
    ) -> Dict[str, Any]:
        """
        Render a template for the admin preview.

        Returns:
            Dict with the rendered text, the placeholders used with their
            values, and the placeholders that have no value
        """
        context = MessageTemplateService._build_context(variables, None, location_record)
        return {
            "rendered": MessageTemplateService.render_message(template, context),
            "used_placeholders": MessageTemplateService.extract_used_placeholders(template, context),
            "unresolved_placeholders": MessageTemplateService.find_unresolved_placeholders(template, context),
        }

"""
Phone number validation utilities.

Provides centralized phone number cleaning and WhatsApp normalization
for outbound messages.
"""

import re
from typing import Optional

from core.constants import (
    WHATSAPP_COUNTRY_CODE,
    WHATSAPP_PHONE_MAX_DIGITS,
    WHATSAPP_PHONE_MIN_DIGITS,
)


def clean_phone_number(phone: str) -> str:
    """
    Clean phone number by removing every non-digit character.

    Args:
        phone: Phone number string (may contain spaces, dashes, parentheses, etc.)

    Returns:
        Cleaned phone number (digits only)
    """
    return re.sub(r'\D', '', phone)


def normalize_whatsapp_phone(phone: Optional[str]) -> str:
    """
    Normalize a Brazilian phone number for WhatsApp delivery.

    Prepends the country code (55) when absent and checks the final length:
    country code + area code + 8 or 9 digit number = 12 or 13 digits.

    Args:
        phone: Phone number as typed by the client, e.g. "(97) 98123-4567"

    Returns:
        Digits with country code, e.g. "5597981234567"

    Raises:
        ValueError: If phone number is missing or has an invalid length
    """
    if not phone or not phone.strip():
        raise ValueError('Telefone é obrigatório')

    cleaned = clean_phone_number(phone)

    # Area code + 8 or 9 digit number without country code
    if len(cleaned) in (WHATSAPP_PHONE_MIN_DIGITS - 2, WHATSAPP_PHONE_MAX_DIGITS - 2):
        normalized = f"{WHATSAPP_COUNTRY_CODE}{cleaned}"
    else:
        normalized = cleaned

    if (
        not normalized.startswith(WHATSAPP_COUNTRY_CODE)
        or not WHATSAPP_PHONE_MIN_DIGITS <= len(normalized) <= WHATSAPP_PHONE_MAX_DIGITS
    ):
        raise ValueError(f'Formato de telefone inválido: {phone}. Use o formato (XX) XXXXX-XXXX')

    return normalized

"""
Brazilian time zones offered in the admin settings.

Based on the official division of Brazilian time zones. Values are IANA
identifiers understood by zoneinfo.
"""

from dataclasses import dataclass, field
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.config import DEFAULT_TIME_ZONE_LABEL


@dataclass(frozen=True)
class BrazilianTimezone:
    """A selectable time zone with its display label and UTC offset."""
    value: str
    label: str
    offset: str
    states: List[str] = field(default_factory=list)


BRAZILIAN_TIMEZONES: List[BrazilianTimezone] = [
    BrazilianTimezone(
        value="America/Noronha",
        label="Fernando de Noronha (UTC-2)",
        offset="UTC-2",
        states=["Fernando de Noronha"],
    ),
    BrazilianTimezone(
        value="America/Sao_Paulo",
        label="Brasília (UTC-3)",
        offset="UTC-3",
        states=[
            "São Paulo", "Rio de Janeiro", "Minas Gerais", "Espírito Santo",
            "Bahia", "Sergipe", "Alagoas", "Pernambuco", "Paraíba",
            "Rio Grande do Norte", "Ceará", "Piauí", "Maranhão",
            "Tocantins", "Goiás", "Distrito Federal",
            "Paraná", "Santa Catarina", "Rio Grande do Sul",
        ],
    ),
    BrazilianTimezone(
        value="America/Manaus",
        label="Manaus (UTC-4)",
        offset="UTC-4",
        states=["Amazonas", "Roraima", "Rondônia", "Mato Grosso", "Mato Grosso do Sul"],
    ),
    BrazilianTimezone(
        value="America/Rio_Branco",
        label="Acre (UTC-5)",
        offset="UTC-5",
        states=["Acre"],
    ),
]


def find_timezone(value: str) -> Optional[BrazilianTimezone]:
    """Look up a catalog entry by IANA identifier."""
    return next((tz for tz in BRAZILIAN_TIMEZONES if tz.value == value), None)


def get_timezone_label(value: str) -> str:
    """Friendly name of a time zone, defaulting to Brasília."""
    tz = find_timezone(value)
    return tz.label if tz else DEFAULT_TIME_ZONE_LABEL


def get_timezone_offset(value: str) -> str:
    """UTC offset label of a time zone, defaulting to UTC-3."""
    tz = find_timezone(value)
    return tz.offset if tz else "UTC-3"


def is_known_timezone(value: str) -> bool:
    """Check that zoneinfo can convert "now" into the time zone."""
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def is_supported_timezone(value: str) -> bool:
    """
    Check that a time zone is in the catalog and known to zoneinfo.

    The catalog limits what admins may pick.
    """
    return find_timezone(value) is not None and is_known_timezone(value)

"""
CPF (Brazilian national identity number) validation utilities.

Provides centralized CPF cleaning, checksum validation, formatting and masking
for consistent handling across the booking flow and the admin screens.

Validation never raises: malformed input yields False (or the input string
unchanged for formatting helpers) and callers decide whether to reject.
"""

import re
from typing import Optional

CPF_LENGTH = 11
_NON_DIGITS = re.compile(r"\D")


def clean_cpf(cpf: Optional[str]) -> str:
    """
    Remove every non-digit character from a CPF.

    Args:
        cpf: CPF string (may contain dots, dashes, spaces, etc.)

    Returns:
        Digits only
    """
    if not cpf:
        return ""
    return _NON_DIGITS.sub("", cpf)


def is_valid_cpf_format(cpf: Optional[str]) -> bool:
    """Check that the cleaned CPF has exactly 11 digits."""
    return len(clean_cpf(cpf)) == CPF_LENGTH


def _check_digit(digits: str, first_weight: int) -> int:
    """Weighted-sum check digit: weights count down from first_weight to 2."""
    total = sum(int(digit) * weight for digit, weight in zip(digits, range(first_weight, 1, -1)))
    remainder = total % 11
    return 0 if remainder < 2 else 11 - remainder


def is_valid_cpf(cpf: Optional[str]) -> bool:
    """
    Validate a CPF using its two check digits.

    A CPF is valid when it has 11 digits, is not a repeated-digit sequence
    (e.g. 111.111.111-11), and both check digits match:
    - digit 10 from digits 1-9 with weights 10..2
    - digit 11 from digits 1-10 with weights 11..2

    Args:
        cpf: CPF in any punctuation (e.g. "529.982.247-25" or "52998224725")

    Returns:
        True if the CPF is valid
    """
    cleaned = clean_cpf(cpf)
    if len(cleaned) != CPF_LENGTH:
        return False

    if len(set(cleaned)) == 1:
        return False

    if _check_digit(cleaned[:9], 10) != int(cleaned[9]):
        return False

    return _check_digit(cleaned[:10], 11) == int(cleaned[10])


def format_cpf(cpf: str) -> str:
    """
    Format a CPF as XXX.XXX.XXX-XX.

    Returns the input unchanged when it does not hold exactly 11 digits.
    """
    cleaned = clean_cpf(cpf)
    if len(cleaned) != CPF_LENGTH:
        return cpf
    return f"{cleaned[:3]}.{cleaned[3:6]}.{cleaned[6:9]}-{cleaned[9:]}"


def mask_cpf(cpf: str) -> str:
    """
    Mask a CPF for display as XXX.***.**X-XX.

    Reveals the first three digits, digit 9 and the check digits only.
    Returns the input unchanged when it does not hold exactly 11 digits.
    """
    cleaned = clean_cpf(cpf)
    if len(cleaned) != CPF_LENGTH:
        return cpf
    return f"{cleaned[:3]}.***.**{cleaned[8]}-{cleaned[9:]}"


def validate_cpf(cpf: Optional[str]) -> str:
    """
    Validate a CPF and return its cleaned digits.

    Args:
        cpf: CPF string to validate

    Returns:
        Cleaned CPF (11 digits)

    Raises:
        ValueError: If the CPF is missing or invalid
    """
    if not cpf or not cpf.strip():
        raise ValueError("CPF é obrigatório")

    if not is_valid_cpf_format(cpf):
        raise ValueError("CPF deve conter 11 dígitos")

    if not is_valid_cpf(cpf):
        raise ValueError("CPF inválido")

    return clean_cpf(cpf)

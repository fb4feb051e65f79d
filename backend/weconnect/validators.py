"""Shared validation utilities"""

import re
from typing import Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{0,15}$")
PHONE_SEPARATORS = re.compile(r"[\s\-().]")


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email.strip()) is not None


def is_valid_phone(phone: Optional[str]) -> bool:
    if not phone:
        return False
    return PHONE_PATTERN.match(PHONE_SEPARATORS.sub("", phone)) is not None


def to_e164(phone: Optional[str]) -> Optional[str]:
    """
    Normalize a phone number for SMS delivery.

    US numbers (10 digits, or 11 starting with 1) become +1XXXXXXXXXX.
    Numbers already carrying a leading + keep their country code.
    Returns None when the number cannot be normalized.
    """
    if not phone:
        return None

    stripped = phone.strip()
    digits = re.sub(r"\D", "", stripped)

    if stripped.startswith("+"):
        return f"+{digits}" if 8 <= len(digits) <= 15 else None

    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]
    if len(digits) != 10:
        return None
    return f"+1{digits}"

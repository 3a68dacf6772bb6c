"""Shared validation utilities"""

import re
from datetime import time
from typing import Optional

GENDERS = {"male", "female", "other", "prefer_not_to_say"}


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize an international phone number to E.164 format.

    Args:
        phone: Phone number string in various formats (spaces, dashes, parentheses)

    Returns:
        Normalized phone number (+XXXXXXXXXXX)

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    has_plus = phone.strip().startswith("+")
    digits = re.sub(r"\D", "", phone)

    if not has_plus and digits.startswith("00"):
        digits = digits[2:]

    # E.164 allows up to 15 digits; anything under 8 is not a dialable number
    if len(digits) < 8 or len(digits) > 15:
        raise ValueError("Phone number must contain between 8 and 15 digits")

    return f"+{digits}"


def validate_gender(gender: Optional[str]) -> Optional[str]:
    if not gender:
        return gender
    gender = gender.strip().lower()
    if gender not in GENDERS:
        raise ValueError(f"gender must be one of: {', '.join(sorted(GENDERS))}")
    return gender


def validate_time_window(start: time, end: time) -> None:
    """Raises ValueError unless start is strictly before end"""
    if start >= end:
        raise ValueError("start_time must be before end_time")


def normalize_tags(values: Optional[list[str]]) -> Optional[list[str]]:
    """Trim, drop blanks and case-insensitive duplicates, keep first spelling"""
    if values is None:
        return None
    seen = set()
    result = []
    for value in values:
        cleaned = (value or "").strip()
        if cleaned and cleaned.lower() not in seen:
            seen.add(cleaned.lower())
            result.append(cleaned)
    return result

"""
Phone number utilities for GetTogether.
Storage: always the normalized '+<digits>' form.
Display: use format_phone_display for emails and API responses.
"""

import re

from django.conf import settings

MIN_PHONE_DIGITS = 10
MAX_PHONE_DIGITS = 15


def normalize_phone_e164(raw: str, default_country_code: str = None) -> str:
    """
    Normalize a phone number to E.164 ('+' followed by digits).

    Numbers written without a leading '+' are treated as national numbers
    and get the default country code (India, 91) prefixed.

    Args:
        raw: Raw phone string (e.g. '+91 98765 43210', '98765-43210')
        default_country_code: Overrides settings.DEFAULT_PHONE_COUNTRY_CODE

    Returns:
        Normalized string, empty if the number cannot be a valid phone
    """
    if not raw or not isinstance(raw, str):
        return ''
    stripped = raw.strip()
    has_plus = stripped.startswith('+')
    cleaned = re.sub(r'\D', '', stripped)
    if not cleaned:
        return ''

    if not has_plus:
        country_code = default_country_code or getattr(settings, 'DEFAULT_PHONE_COUNTRY_CODE', '91')
        # National trunk prefix
        cleaned = cleaned.lstrip('0')
        if not (len(cleaned) > MIN_PHONE_DIGITS and cleaned.startswith(country_code)):
            cleaned = country_code + cleaned

    if cleaned.startswith('0') or not MIN_PHONE_DIGITS <= len(cleaned) <= MAX_PHONE_DIGITS:
        return ''
    # India: national significant number is 10 digits starting with 6-9
    if cleaned.startswith('91') and not re.fullmatch(r'91[6-9]\d{9}', cleaned):
        return ''
    return f"+{cleaned}"


def is_valid_phone(raw: str) -> bool:
    """Return True if the number parses to a valid E.164 phone."""
    return bool(normalize_phone_e164(raw))


def format_phone_display(raw: str) -> str:
    """
    Format phone for display (e.g. '+91 98765 43210' for India).

    Returns the original value when it cannot be parsed.
    """
    norm = normalize_phone_e164(raw)
    if not norm:
        return raw or ''
    digits = norm[1:]
    if digits.startswith('91') and len(digits) == 12:
        return f"+91 {digits[2:7]} {digits[7:]}"
    return norm

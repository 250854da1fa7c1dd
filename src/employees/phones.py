"""Phone number canonicalisation.

Stored numbers and inbound webhook numbers share one canonical form: the
E.164 number without its ``+`` (``33612345678``).  WhatsApp delivers
``from`` in exactly that form.  Numbers typed in national format
(``06 12 34 56 78``) need the tenant country to be understood.
"""
import re

import phonenumbers
from phonenumbers import NumberParseException, PhoneNumberFormat

_SEPARATORS = re.compile(r"[\s\-.()/]")


def _parse_valid(text, region):
    try:
        number = phonenumbers.parse(text, region)
    except NumberParseException:
        return None
    if not phonenumbers.is_valid_number(number):
        return None
    return number


def normalize_phone(raw, region=None) -> str | None:
    """Return the canonical form of *raw*, or ``None`` when it is not a phone number.

    *region* is an ISO 3166 country code (``"FR"``) used to read numbers
    written without their international prefix.  Digits that already
    carry a country code (the WhatsApp form) are accepted with or without
    *region*.
    """
    if not isinstance(raw, str):
        return None
    cleaned = _SEPARATORS.sub("", raw.strip())
    if cleaned.startswith("+"):
        digits = cleaned[1:]
    elif cleaned.startswith("00"):
        digits = cleaned[2:]
    else:
        digits = None
    if digits is not None:
        candidates = [("+" + digits, None)]
    else:
        digits = cleaned
        candidates = [("+" + digits, None)]
        if region:
            candidates.insert(0, (digits, region.upper()))
    if not digits.isdigit():
        return None

    for text, default_region in candidates:
        number = _parse_valid(text, default_region)
        if number is not None:
            return phonenumbers.format_number(number, PhoneNumberFormat.E164)[1:]
    return None

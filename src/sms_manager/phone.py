from __future__ import annotations

from .dialing_codes import DIALING_CODES


def get_dialing_code(country: str) -> str | None:
    """Dialing code for an ISO-3166 alpha-2 country code, any case."""
    return DIALING_CODES.get(country.strip().upper())


def normalize_phone(phone: str, country: str) -> str:
    """
    Turn a national phone number into international "+<code><number>" form.

    Numbers that already start with "+" are returned as-is, and so are
    numbers whose country has no known dialing code. The number itself is
    not cleaned up or validated; Twilio rejects what it cannot deliver to.
    """
    if phone.startswith("+"):
        return phone

    code = get_dialing_code(country)
    if not code:
        return phone

    return f"+{code}{phone}"

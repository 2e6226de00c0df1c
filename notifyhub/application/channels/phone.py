"""Phone number normalization for SMS delivery."""

from __future__ import annotations

import re

DEFAULT_COUNTRY_CODE = "92"
_SEPARATORS = re.compile(r"[\s\-()]")


def normalize_phone_number(
    raw: str | None, *, default_country_code: str = DEFAULT_COUNTRY_CODE
) -> str | None:
    """Return ``raw`` in international dialing format or ``None``.

    ``03001234567`` becomes ``+923001234567`` with the default country code;
    numbers that already start with ``+`` are returned unchanged. Numbers too
    short to be international cannot be resolved.
    """

    if not raw:
        return None

    cleaned = _SEPARATORS.sub("", raw)
    if not cleaned:
        return None

    if cleaned.startswith("+"):
        return cleaned

    if cleaned.startswith("0"):
        return f"+{default_country_code}{cleaned[1:]}"

    if cleaned.startswith(default_country_code) and len(cleaned) >= 12:
        return f"+{cleaned}"

    if len(cleaned) >= 10:
        return f"+{cleaned}"

    return None


__all__ = ["DEFAULT_COUNTRY_CODE", "normalize_phone_number"]

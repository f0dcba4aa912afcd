from __future__ import annotations

import re

from billed.constants import DEFAULT_PCT

FIELD_TYPE = "expense-type"
FIELD_NAME = "expense-name"
FIELD_DATE = "datepicker"
FIELD_AMOUNT = "amount"
FIELD_VAT = "vat"
FIELD_PCT = "pct"
FIELD_COMMENTARY = "commentary"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_int(text: str | None) -> int | None:
    """Parse the leading integer of a form value. Returns None when there is none.

    Mirrors browser ``parseInt``: '50' -> 50, '12.5' -> 12, '50 EUR' -> 50,
    'abc' -> None.
    """
    if not text:
        return None
    match = _LEADING_INT.match(text)
    if match is None:
        return None
    return int(match.group(1))


def parse_pct(text: str | None) -> int:
    """Parse the VAT percentage, falling back to the default rate."""
    value = parse_int(text)
    if not value or value < 0:
        return DEFAULT_PCT
    return value

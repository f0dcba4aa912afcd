from __future__ import annotations

from datetime import datetime

from billed.constants import DEFAULT_LOCALE, MONTHS_SHORT, STATUS_LABELS


def format_date(raw: str, locale: str = DEFAULT_LOCALE) -> str:
    """Render a stored 'YYYY-MM-DD' date for the bill list: '2004-04-04' -> '4 Avr. 04'.

    Raises ``ValueError`` when ``raw`` is not a valid calendar date.
    """
    parsed = datetime.strptime(raw, "%Y-%m-%d").date()
    months = MONTHS_SHORT.get(locale, MONTHS_SHORT[DEFAULT_LOCALE])
    return f"{parsed.day} {months[parsed.month]}. {parsed.year % 100:02d}"


def format_status(raw: str, locale: str = DEFAULT_LOCALE) -> str:
    labels = STATUS_LABELS.get(locale, STATUS_LABELS[DEFAULT_LOCALE])
    return labels.get(raw, raw)

from __future__ import annotations

"""German date and ISO 8601 duration formatting for tooltips."""

import re
from typing import Mapping, Optional

__all__ = [
    "MONTHS",
    "format_date",
    "build_date_tooltip",
    "format_iso_duration",
]

MONTHS = (
    "Januar", "Februar", "März", "April", "Mai", "Juni",
    "Juli", "August", "September", "Oktober", "November", "Dezember",
)

_REPEAT_RE = re.compile(r"^R(\d*)/(.+)$")
_DURATION_RE = re.compile(
    r"^P(?:(\d+)Y)?(?:(\d+)M)?(?:(\d+)W)?(?:(\d+)D)?"
    r"(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?$",
    re.IGNORECASE,
)

# (singular, plural) per duration component, in pattern group order
_DURATION_UNITS = (
    ("Jahr", "Jahre"),
    ("Monat", "Monate"),
    ("Woche", "Wochen"),
    ("Tag", "Tage"),
    ("Stunde", "Stunden"),
    ("Minute", "Minuten"),
    ("Sekunde", "Sekunden"),
)


def _month_name(value: str) -> Optional[str]:
    if not value.isdecimal():
        return None
    index = int(value)
    if 1 <= index <= len(MONTHS):
        return MONTHS[index - 1]
    return None


def format_date(iso_date: Optional[str]) -> str:
    """Format ``YYYY-MM-DD`` or ``YYYY-MM`` in German; return anything else unchanged.

    >>> format_date("1423-03-15")
    '15. März 1423'
    >>> format_date("1423-03")
    'März 1423'
    """
    if not iso_date:
        return ""

    parts = iso_date.split("-")
    if len(parts) == 3 and parts[2].isdecimal():
        month = _month_name(parts[1])
        if month:
            return f"{int(parts[2])}. {month} {parts[0]}"
    elif len(parts) == 2:
        month = _month_name(parts[1])
        if month:
            return f"{month} {parts[0]}"
    return iso_date


def build_date_tooltip(attributes: Mapping[str, str]) -> str:
    """Build the tooltip text for a ``date``/``time`` element.

    Exactly one date phrase is chosen, by precedence ``when``, ``from`` +
    ``to``, ``from``, ``to``, ``notBefore`` + ``notAfter``, ``notBefore``,
    ``notAfter``. Calendar, type, period and duration follow as further
    `` | `` separated segments. Returns '' when none of them is present.
    """
    def get(name: str) -> str:
        return attributes.get(name) or ""

    when = get("when")
    date_from = get("from")
    date_to = get("to")
    not_before = get("notBefore")
    not_after = get("notAfter")
    calendar = get("calendar")
    date_type = get("type")
    period = get("period")
    duration = get("dur-iso") or get("dur")

    parts = []
    if when:
        parts.append(format_date(when))
    elif date_from and date_to:
        parts.append(f"{format_date(date_from)} - {format_date(date_to)}")
    elif date_from:
        parts.append(f"ab {format_date(date_from)}")
    elif date_to:
        parts.append(f"bis {format_date(date_to)}")
    elif not_before and not_after:
        parts.append(f"zwischen {format_date(not_before)} und {format_date(not_after)}")
    elif not_before:
        parts.append(f"nicht vor {format_date(not_before)}")
    elif not_after:
        parts.append(f"nicht nach {format_date(not_after)}")

    if calendar:
        parts.append(f"Kalender: {calendar}")
    if date_type:
        parts.append(f"Typ: {date_type}")
    if period:
        parts.append(f"Periode: {period}")
    if duration:
        parts.append(f"Dauer: {format_iso_duration(duration)}")

    return " | ".join(parts)


def format_iso_duration(duration: Optional[str]) -> str:
    """Render an ISO 8601 duration such as ``P1Y2M`` as German text.

    ``Rn/<duration>`` is rendered as ``n× wiederholt (<duration>)``.
    Unparseable input is returned unchanged.
    """
    if not duration:
        return ""

    repeat = _REPEAT_RE.match(duration)
    if repeat:
        count, inner = repeat.groups()
        repeated = format_iso_duration(inner)
        if count:
            return f"{count}× wiederholt ({repeated})"
        return f"wiederholt ({repeated})"

    match = _DURATION_RE.match(duration)
    if not match:
        return duration

    parts = []
    for value, (singular, plural) in zip(match.groups(), _DURATION_UNITS):
        amount = int(value or "0")
        if amount:
            parts.append(f"{amount} {singular if amount == 1 else plural}")

    return " ".join(parts) if parts else duration

"""Cell-level normalizers for the raw spreadsheet values.

Every function is pure apart from the optional ``IssueSink`` it receives. Value
normalizers (`optional_str`, `parse_numeric`, `parse_date`) never record
issues: the caller knows which column it is reading and decides whether a
``None`` result deserves a warning. Fraction and exterior parsing record their
own warnings because their fallback policy is part of the format.
"""

from __future__ import annotations

import math
import re
from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING, Final

from coproimport.domain.issues import warn
from coproimport.domain.model import EMPTY_TANTIEME, Exterior, Tantieme

if TYPE_CHECKING:
    from coproimport.domain.issues import IssueSink

# Spreadsheet day 25569 is 1970-01-01; day 60 is the phantom 1900-02-29.
SPREADSHEET_EPOCH_OFFSET_DAYS: Final[int] = 25569
_UNIX_EPOCH: Final[date] = date(1970, 1, 1)

_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
_SERIAL_RE = re.compile(r"^\d+$")
_ISO_PREFIX_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
_DAY_FIRST_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_FRACTION_RE = re.compile(r"^(\d+)\s*/\s*(\d+)$")
_INTEGER_RE = re.compile(r"^(\d+)$")

EXTERIOR_SURFACE_SEPARATOR: Final[str] = ", "


def optional_str(value: object) -> str | None:
    """Return the trimmed string form of ``value`` or ``None`` when blank."""

    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_numeric(value: object) -> float | None:
    """Parse a decimal accepting a comma as decimal separator."""

    text = optional_str(value)
    if text is None:
        return None
    normalized = text.replace(",", ".", 1)
    if not _DECIMAL_RE.match(normalized):
        return None
    number = float(normalized)
    return number if math.isfinite(number) else None


def parse_date(value: object) -> date | None:
    """Parse a spreadsheet serial, an ISO-8601 string or ``DD/MM/YYYY``."""

    text = optional_str(value)
    if text is None:
        return None
    for parser in (_parse_serial_date, _parse_iso_date, _parse_day_first_date):
        parsed = parser(text)
        if parsed is not None:
            return parsed
    return None


def _parse_serial_date(text: str) -> date | None:
    if not _SERIAL_RE.match(text):
        return None
    try:
        return _UNIX_EPOCH + timedelta(days=int(text) - SPREADSHEET_EPOCH_OFFSET_DAYS)
    except (OverflowError, ValueError):
        return None


def _parse_iso_date(text: str) -> date | None:
    if not _ISO_PREFIX_RE.match(text):
        return None
    candidate = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC)
    return parsed.date()


def _parse_day_first_date(text: str) -> date | None:
    match = _DAY_FIRST_RE.match(text)
    if match is None:
        return None
    day, month, year = (int(group) for group in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_tantieme(
    value: object,
    *,
    column: str,
    sink: IssueSink,
    lot_number: str,
) -> Tantieme:
    """Parse an ownership-share fraction such as ``"411/10000"``."""

    text = optional_str(value)
    if text is None:
        return EMPTY_TANTIEME

    fraction = _FRACTION_RE.match(text)
    if fraction is not None:
        return Tantieme(num=int(fraction.group(1)), den=int(fraction.group(2)))

    integer = _INTEGER_RE.match(text)
    if integer is not None:
        warn(
            sink,
            "tantieme_denominator_missing",
            entity_type="lot",
            entity_key=lot_number,
            message=f"Tantieme denominator missing for {column}",
            payload={"column": column, "value": text},
        )
        return Tantieme(num=int(integer.group(1)), den=None)

    warn(
        sink,
        "edd_tantieme_invalid_format",
        entity_type="lot",
        entity_key=lot_number,
        message=f'Invalid tantieme format for {column}: "{text}"',
        payload={"column": column, "value": text},
    )
    return EMPTY_TANTIEME


def parse_exteriors(
    types_value: object,
    surfaces_value: object,
    *,
    sink: IssueSink,
    lot_number: str,
) -> tuple[Exterior, ...] | None:
    """Pair exterior type tokens with their surfaces.

    A single exterior keeps its surface cell whole (it may hold a decimal comma);
    several exteriors have their surfaces separated by ``", "`` exactly.
    """

    types_text = optional_str(types_value)
    if types_text is None:
        return None
    types = [token.strip() for token in types_text.split(",") if token.strip()]
    if not types:
        return None

    surfaces: list[float | None] = []
    surfaces_text = optional_str(surfaces_value)
    if surfaces_text is not None:
        if len(types) == 1:
            surfaces = [parse_numeric(surfaces_text)]
        else:
            surfaces = [
                parse_numeric(token) for token in surfaces_text.split(EXTERIOR_SURFACE_SEPARATOR)
            ]

    if surfaces and len(surfaces) != len(types):
        warn(
            sink,
            "edd_exteriors_surface_count_mismatch",
            entity_type="lot",
            entity_key=lot_number,
            message=f"Exteriors count ({len(types)}) != surfaces count ({len(surfaces)})",
            payload={"exteriors": types, "surfaces": surfaces},
        )

    return tuple(
        Exterior(type=exterior_type, surface_m2=surfaces[index] if index < len(surfaces) else None)
        for index, exterior_type in enumerate(types)
    )

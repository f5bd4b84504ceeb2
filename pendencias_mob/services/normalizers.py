from __future__ import annotations

import logging
import math
import numbers
from datetime import date, datetime
from typing import Any

from openpyxl.utils.datetime import MAC_EPOCH, WINDOWS_EPOCH, from_excel

from ..models.config_models import DateOrder

"""Field normalizers: raw cell value -> canonical string.

All functions here are total. Whatever the input, they return either a value
in canonical form or "" (an unparseable field is dropped silently, the row
itself is kept). Nothing in this module raises on bad data.

Canonical date form is ``DD/MM/YYYY``, zero padded.
"""

__all__ = [
    "DATE_FORMAT",
    "WEEKDAY_TOKENS",
    "clean_identifier",
    "format_date",
    "normalize_date",
    "parse_canonical_date",
    "to_text",
]

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d/%m/%Y"

# Células que o Excel exporta só com o dia da semana
WEEKDAY_TOKENS = frozenset({
    "mon", "tue", "wed", "thu", "fri", "sat", "sun",
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
    "seg", "ter", "qua", "qui", "sex", "sab", "sáb", "dom",
})

_IDENTIFIER_ARTIFACTS = str.maketrans("", "", "\"'=")


def format_date(d: date) -> str:
    return f"{d.day:02d}/{d.month:02d}/{d.year:04d}"


def _safe_date(year: int, month: int, day: int) -> str:
    if not 1000 <= year <= 9999:
        return ""
    try:
        return format_date(date(year, month, day))
    except ValueError:
        return ""


def _from_serial(value: float, epoch: int) -> str:
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return ""
    if value < 1:
        return ""
    try:
        dt = from_excel(value, epoch=MAC_EPOCH if epoch == 1904 else WINDOWS_EPOCH)
    except (OverflowError, ValueError, TypeError):
        return ""
    if not isinstance(dt, datetime):
        return ""
    return _safe_date(dt.year, dt.month, dt.day)


def _from_iso_text(text: str) -> str:
    parts = text.split("-")
    if len(parts) != 3:
        return ""
    year, month, day = parts
    day = day.split("T", 1)[0]
    # isdecimal, não isdigit: "²" passa em isdigit mas int() rejeita
    if not (year.isdecimal() and month.isdecimal() and day.isdecimal()):
        return ""
    return _safe_date(int(year), int(month), int(day))


def _from_slash_text(text: str, order: DateOrder) -> str:
    parts = text.split("/")
    if len(parts) != 3 or not all(p.isdecimal() for p in parts):
        return ""
    first, second, year = parts
    if len(year) != 4:
        return ""
    p1, p2 = int(first), int(second)
    if p1 > 12 and p2 > 12:
        return ""
    if p1 > 12:
        day, month = p1, p2
    elif p2 > 12:
        day, month = p2, p1
    elif order is DateOrder.MONTH_FIRST:
        day, month = p2, p1
    else:
        day, month = p1, p2
    return _safe_date(int(year), month, day)


def normalize_date(
    value: Any,
    order: DateOrder = DateOrder.DAY_FIRST,
    epoch: int = 1900,
) -> str:
    """Normalize a raw cell into ``DD/MM/YYYY`` or "".

    Accepted inputs:
    - native ``date``/``datetime``: Y/M/D taken as-is, no timezone arithmetic
    - int/float: spreadsheet date serial (1900 or 1904 epoch)
    - text: time-of-day suffix dropped; ``YYYY-MM-DD`` reordered; slash dates
      disambiguated by magnitude (a part > 12 must be the day), ties resolved
      by ``order``; the year must have exactly four digits

    >>> normalize_date("2024-01-05")
    '05/01/2024'
    >>> normalize_date("02/13/2024")
    '13/02/2024'
    >>> normalize_date("5/1/24")
    ''
    """
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, datetime):
        return _safe_date(value.year, value.month, value.day)
    if isinstance(value, date):
        return _safe_date(value.year, value.month, value.day)
    if isinstance(value, numbers.Real):
        return _from_serial(float(value), epoch)

    text = str(value).strip()
    if not text:
        return ""
    # "2026-01-12 00:00:00" -> "2026-01-12"
    text = text.split(None, 1)[0]
    if text.casefold() in WEEKDAY_TOKENS:
        return ""
    if "-" in text and len(text.split("-")[0]) == 4:
        return _from_iso_text(text)
    if "/" in text:
        return _from_slash_text(text, order)
    return ""


def parse_canonical_date(text: str) -> date | None:
    """Parse a ``DD/MM/YYYY`` string produced by :func:`normalize_date`."""
    if not text:
        return None
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError:
        return None


def to_text(value: Any) -> str:
    """Render a plain cell as a canonical string ("" for blanks)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Sim" if value else "Não"
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        # 12345.0 vindo do Excel -> "12345"
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, numbers.Integral):
        return str(int(value))
    if isinstance(value, datetime):
        if value.time() == datetime.min.time():
            return format_date(value)
        return value.strftime("%d/%m/%Y %H:%M")
    if isinstance(value, date):
        return format_date(value)
    return str(value).strip()


def clean_identifier(value: Any) -> str:
    """Strip spreadsheet quoting artifacts from CPF/CNPJ-like values.

    No digit count or checksum validation is done.

    >>> clean_identifier('="12.345.678/0001-99"')
    '12.345.678/0001-99'
    """
    return to_text(value).translate(_IDENTIFIER_ARTIFACTS).strip()

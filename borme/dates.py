"""
borme.dates
===========

Spanish bulletin dates (``29.08.25``, ``1/6/1997``) to ISO ``YYYY-MM-DD``.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional

ENTRY_DATE_RE = re.compile(r"I/A\s+\d+\s*\((\d{1,2}\.\d{1,2}\.\d{2,4})\)")
DATE_PATTERNS = (
    re.compile(r"\d{1,2}\.\d{1,2}\.\d{2,4}"),
    re.compile(r"\d{1,2}/\d{1,2}/\d{2,4}"),
    re.compile(r"\d{1,2}-\d{1,2}-\d{2,4}"),
)
ISO_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")


def format_spanish_date(value: Optional[str]) -> Optional[str]:
    """
    ``DD.MM.YY[YY]`` → ``YYYY-MM-DD``.

    Two-digit years below 50 are 20xx, the rest 19xx.  Anything that is not
    a real calendar date returns ``None``.

    >>> format_spanish_date("1.6.97")
    '1997-06-01'
    """
    if not value or not isinstance(value, str):
        return None
    parts = re.split(r"[./-]", value.strip())
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        return None
    day, month, year = parts
    if len(year) == 2:
        year = ("20" if int(year) < 50 else "19") + year
    try:
        return date(int(year), int(month), int(day)).isoformat()
    except ValueError:
        return None


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse an ISO date (a datetime prefix is fine) or a Spanish date."""
    if not value or not isinstance(value, str):
        return None
    match = ISO_RE.match(value.strip())
    if match:
        try:
            return datetime.strptime(match.group(0), "%Y-%m-%d").date()
        except ValueError:
            return None
    iso = format_spanish_date(value)
    return date.fromisoformat(iso) if iso else None


def to_iso(value: Optional[str]) -> Optional[str]:
    """Normalize *value* to ``YYYY-MM-DD`` or ``None``."""
    parsed = parse_date(value)
    return parsed.isoformat() if parsed else None


def extract_entry_date(text: Optional[str]) -> Optional[str]:
    """
    Registration date of an entry.

    The ``I/A n (DD.MM.YY)`` registry stamp wins; otherwise the last date
    found in the text.
    """
    if not text:
        return None
    match = ENTRY_DATE_RE.search(text)
    if match:
        return format_spanish_date(match.group(1))
    for pattern in DATE_PATTERNS:
        found = pattern.findall(text)
        if found:
            return format_spanish_date(found[-1])
    return None

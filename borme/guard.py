"""
borme.guard
===========

Period protection for bulletin text.

Bulletin entries are period-separated, but so are role abbreviations
(``Adm. Solid.``), dates (``29.08.25``), registry references
(``S 8 , H M 200035, I/A 1 (29.08.25).``) and Spanish-formatted amounts
(``3.000,00``).  :func:`guard_text` swaps each of those substrings for a
placeholder free of periods so that the text can be split safely, and
:meth:`GuardedText.restore` puts the originals back.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Pattern, Tuple

# ---------------------------------------------------------------------------
# Protected patterns, in priority order
# ---------------------------------------------------------------------------
ABBREVIATIONS: Tuple[str, ...] = (
    "ADM", "ADMIN", "APOD", "APODER",
    "CONS", "CONSJ", "CONSEJERO",
    "PRES", "PRESID", "PRESIDENT",
    "SEC", "SECR", "SECRETARIO",
    "TES", "TESOR", "TESORERO",
    "VICE", "VICEPR", "VICEPRES",
    "DIR", "DTOR", "DIRECTOR",
    "GER", "GERENTE",
    "LIQ", "LIQUID",
    "MANCOM", "MANCO",
    "SOLID", "SOLIDA", "SOLIDAR",
    "UNICO", "ÚNICO",
)

ABBREVIATION_RE = re.compile(r"\b(?:%s)\.(?: *)" % "|".join(ABBREVIATIONS), re.IGNORECASE)
DATE_RE = re.compile(r"\b\d{1,2}\.\d{1,2}\.\d{2,4}\b")
REGISTRY_CODE_RE = re.compile(r"[ST]\s+\d+\s*,\s*[LFH]\s+[A-Z]*\s*\d+[^.]*\([^)]*\)\.")
DECIMAL_RE = re.compile(r"\b\d{1,3}(?:\.\d{3})*,\d{2}\b")

PROTECTED: Tuple[Tuple[str, Pattern[str]], ...] = (
    ("abbreviation", ABBREVIATION_RE),
    ("date", DATE_RE),
    ("registry", REGISTRY_CODE_RE),
    ("decimal", DECIMAL_RE),
)

# Full registry-data reference as it closes an entry.
REGISTRY_DATA_RE = re.compile(
    r"\b[ST]\s+\d+\s*,\s*[LFH]\s+[A-Z]*\s*\d+\s*,?\s*[SF]?\s*\d*\s*,?\s*H?\s*[A-Z]*\s*\d*"
    r"\s*,?\s*I/A\s+\d+\s*\([^)]+\)\."
)

# Private-use code points: no periods, no digits, no word characters.
_OPEN = "\ue000"
_CLOSE = "\ue001"
_INDEX_BASE = 0xE100


def _token(index: int) -> str:
    return f"{_OPEN}{chr(_INDEX_BASE + index)}{_CLOSE}"


def is_registry_data(text: str) -> bool:
    """True if *text* contains a registry-data reference."""
    return bool(text) and REGISTRY_DATA_RE.search(text) is not None


@dataclass(frozen=True)
class Span:
    kind: str
    token: str
    original: str


@dataclass(frozen=True)
class GuardedText:
    """Text with protected substrings replaced by placeholder tokens."""

    text: str
    spans: Tuple[Span, ...] = ()

    def restore(self, piece: str) -> str:
        """
        Put the protected substrings back into *piece*.

        Spans are restored newest first: a registry code captured after a
        date has already been protected carries the date's token inside it.
        """
        for span in reversed(self.spans):
            if span.token in piece:
                piece = piece.replace(span.token, span.original)
        return piece

    def split(self, sep: str = ".") -> List[str]:
        """Split on *sep* and restore every piece (pieces are not trimmed)."""
        return [self.restore(piece) for piece in self.text.split(sep)]


def guard_text(text: str) -> GuardedText:
    """
    Protect every period that does not end a sentence.

    >>> g = guard_text("Adm. Solid.: ANA RUIZ PEREZ. Capital: 3.000,00 Euros.")
    >>> [g.restore(p).strip() for p in g.text.split(".") if p.strip()]
    ['Adm. Solid.: ANA RUIZ PEREZ', 'Capital: 3.000,00 Euros']
    """
    if not text:
        return GuardedText("")

    spans: List[Span] = []

    def _protect(kind: str):
        def _sub(match: "re.Match[str]") -> str:
            token = _token(len(spans))
            spans.append(Span(kind, token, match.group(0)))
            return token
        return _sub

    guarded = text
    for kind, pattern in PROTECTED:
        guarded = pattern.sub(_protect(kind), guarded)
    return GuardedText(guarded, tuple(spans))

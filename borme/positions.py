"""
borme.positions
===============

Resolution of free-text position strings (``Adm. Solid.``, ``LIQUIDADOR``,
``Consejero Delegado``) to a canonical officer position.

The cascade is:

1. reject business prose;
2. exact, case/accent-insensitive match against the vocabulary;
3. the abbreviation table (``ADM. SOLID.`` → ``Administrador Solidario``);
4. containment either way against the vocabulary, longest term first;
5. a fixed table of fallback patterns.

Anything that survives none of them is dropped by the caller.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Pattern, Tuple

from .names import is_business_text
from .vocabulary import Vocabulary, fold, strip_accents

logger = logging.getLogger(__name__)

# (label as printed in the bulletin, canonical position); order matters
ABBREVIATIONS: Tuple[Tuple[str, str], ...] = (
    ("Adm. Solid.", "Administrador Solidario"),
    ("Adm. Mancom.", "Administrador Mancomunado"),
    ("Adm. Manco.", "Administrador Mancomunado"),
    ("Adm. Único", "Administrador Único"),
    ("Adm. Unico", "Administrador Único"),
    ("Adm.", "Administrador"),
    ("Administrador", "Administrador"),
    ("Liquidador", "Liquidador"),
    ("Presidente", "Presidente"),
    ("Secretario", "Secretario"),
    ("Consejero", "Consejero"),
    ("Gerente", "Gerente"),
    ("Director", "Director"),
    ("Apoderado", "Apoderado"),
    ("Apoder.", "Apoderado"),
    ("Socio Único", "Socio Único"),
    ("Socio Unico", "Socio Único"),
)

FALLBACK_PATTERNS: Tuple[Tuple[Pattern[str], str], ...] = (
    (re.compile(r"ADM\.?\s*SOLID\.?", re.I), "Administrador Solidario"),
    (re.compile(r"ADM\.?\s*MANCOM\.?", re.I), "Administrador Mancomunado"),
    (re.compile(r"ADM\.?\s*MANCO\.?", re.I), "Administrador Mancomunado"),
    (re.compile(r"ADM\.?\s*[UÚ]NICO\.?", re.I), "Administrador Único"),
    (re.compile(r"^ADM\.?$", re.I), "Administrador"),
    (re.compile(r"ADMINISTRADOR", re.I), "Administrador"),
    (re.compile(r"LIQUIDADOR", re.I), "Liquidador"),
    (re.compile(r"PRESIDENTE", re.I), "Presidente"),
    (re.compile(r"SECRETARIO", re.I), "Secretario"),
    (re.compile(r"CONSEJERO", re.I), "Consejero"),
    (re.compile(r"GERENTE", re.I), "Gerente"),
    (re.compile(r"DIRECTOR", re.I), "Director"),
    (re.compile(r"APODERADO", re.I), "Apoderado"),
    (re.compile(r"APODER\.?", re.I), "Apoderado"),
    (re.compile(r"SOCIO\s+[UÚ]NICO", re.I), "Socio Único"),
)


def squash(text: str) -> str:
    """Upper case, no accents, periods as spaces: ``Adm. Solid.`` → ``ADM SOLID``."""
    return " ".join(strip_accents(text).upper().replace(".", " ").split())


def _contains_tokens(haystack: List[str], needle: List[str]) -> bool:
    n = len(needle)
    return any(haystack[i:i + n] == needle for i in range(len(haystack) - n + 1))


_ABBREVIATION_KEYS = tuple((squash(label).split(), position) for label, position in ABBREVIATIONS)


def _exact(clean: str, vocab: Vocabulary) -> Optional[str]:
    keys = {fold(clean), fold(clean.rstrip("."))}
    for position in vocab.officer_positions:
        if fold(position) in keys:
            return position
    return None


def _abbreviation(clean: str) -> Optional[str]:
    tokens = squash(clean).split()
    for key, position in _ABBREVIATION_KEYS:
        if _contains_tokens(tokens, key):
            return position
    return None


def _partial(clean: str, vocab: Vocabulary) -> Optional[str]:
    key = fold(clean)
    for position in vocab.positions_longest_first():
        term = fold(position)
        if (term in key and len(term) > 3) or (key in term and len(key) > 3):
            return position
    return None


def _fallback(text: str) -> Optional[str]:
    clean = re.sub(r"[.:\s]+$", "", text.strip()).upper()
    for pattern, position in FALLBACK_PATTERNS:
        if pattern.search(clean):
            return position
    return None


def resolve_position(text: Optional[str], vocab: Vocabulary) -> Optional[str]:
    """
    Map a position string to its canonical name, or ``None``.

    >>> from borme.vocabulary import EMPTY_VOCABULARY
    >>> resolve_position("Adm. Solid.", EMPTY_VOCABULARY)
    'Administrador Solidario'
    """
    if not text or not text.strip():
        return None
    if is_business_text(text):
        return None

    clean = re.sub(r"[:\s]+$", "", text.strip())
    for step in (
        lambda: _exact(clean, vocab),
        lambda: _abbreviation(clean),
        lambda: _partial(clean, vocab),
        lambda: _fallback(text),
    ):
        position = step()
        if position:
            return position

    logger.debug(f"No officer position for {text!r}")
    return None


def label_pattern(label: str) -> str:
    """
    Regex source matching *label* with optional periods and flexible spacing.

    ``Adm. Solid.`` → ``Adm\\.?\\s*Solid\\.?``
    """
    words = [re.escape(word).replace(r"\.", r"\.?") for word in label.split()]
    return r"\s*".join(words)


def position_labels(vocab: Vocabulary) -> List[str]:
    """Every printed label the inline extractor looks for, longest first."""
    labels = list(vocab.officer_positions) + [label for label, _ in ABBREVIATIONS]
    seen = set()
    unique = []
    for label in labels:
        if label not in seen:
            seen.add(label)
            unique.append(label)
    return sorted(unique, key=len, reverse=True)

"""
borme.names
===========

Officer-name cleaning and the filters that keep business prose, registry
codes and position titles out of the officer lists.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from .guard import is_registry_data
from .settings import settings
from .vocabulary import Vocabulary

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Business-activity detection
# ---------------------------------------------------------------------------
BUSINESS_KEYWORDS = (
    "cnae", "actividad", "objeto social", "industria", "comercio", "servicios",
    "representación", "gestión", "asesoramiento", "explotación", "venta",
    "distribución", "fabricación", "producción", "construcción", "hostelería",
    "restaurante", "hotel", "turismo", "inmobiliaria", "consultoría", "ingeniería",
    "tecnología", "software", "informática", "telecomunicaciones", "transporte",
    "logística", "almacenamiento", "importación", "exportación", "mayorista",
    "minorista", "intermediarios", "corretaje", "mediación", "artículo",
    "estatutos", "modificación", "ampliación", "reducción",
)

CNAE_RE = re.compile(r"cnae\s*\d+", re.IGNORECASE)

BUSINESS_PATTERNS = (
    re.compile(r"\b(?:la|el|los|las)\s+(?:industria|comercio|venta|distribución|fabricación)", re.I),
    re.compile(r"\b(?:toda\s+clase\s+de|sin\s+excepción|sin\s+limitación)", re.I),
    re.compile(r"\b(?:actividades|operaciones|servicios|productos)\b", re.I),
    re.compile(r"\b(?:por\s+cuenta\s+propia|de\s+terceros)\b", re.I),
)

# Words a person name never contains.
NON_NAME_WORDS = ("cnae", "actividad", "industria", "comercio", "objeto", "social", "servicios")

FORBIDDEN_CHARS_RE = re.compile(r"[\d@#$%^&*()_+=\[\]{}|\\:\";'<>?,./]")
CAPITAL_START_RE = re.compile(r"^[A-ZÁÉÍÓÚÑÜ]")

# Bulletin keywords that bleed into the tail of a name.
TRAILING_TERMS = (
    "ESTATUTARIAS", "ESTATUTARIOS", "NOMBRAMIENTOS", "REELECCIONES", "CESES",
    "DIMISIONES", "REVOCACIONES", "OTROS CONCEPTOS", "DATOS REGISTRALES",
    "CONSTITUCION", "CONSTITUCIÓN", "DISOLUCION", "DISOLUCIÓN", "AMPLIACION",
    "AMPLIACIÓN", "REDUCCION", "REDUCCIÓN", "LIQUIDADOR", "LIQUIDADORES",
)

_TRAILING_RES = tuple(
    (
        re.compile(rf"\.\s*{re.escape(term)}\s*\.?\s*$", re.IGNORECASE),
        re.compile(rf"\s+{re.escape(term)}\s*\.?\s*$", re.IGNORECASE),
    )
    for term in TRAILING_TERMS
)

NAME_SEPARATOR_RE = re.compile(r"[;,]")


def is_business_text(text: Optional[str], max_length: Optional[int] = None) -> bool:
    """True if *text* reads like an activity description rather than a name."""
    if not text:
        return False
    limit = settings.business_text_max_length if max_length is None else max_length
    lower = text.lower()
    result = (
        any(keyword in lower for keyword in BUSINESS_KEYWORDS)
        or CNAE_RE.search(text) is not None
        or len(text) > limit
        or any(p.search(text) for p in BUSINESS_PATTERNS)
    )
    if result:
        logger.debug(f"Business text rejected: {text[:50]!r}")
    return result


def clean_officer_name(name: Optional[str]) -> str:
    """
    Upper-case *name*, collapse whitespace and strip trailing bulletin keywords.

    >>> clean_officer_name("  perez  garcia juan. Nombramientos")
    'PEREZ GARCIA JUAN'
    """
    if not name:
        return ""
    cleaned = " ".join(name.split()).upper()
    for after_period, after_space in _TRAILING_RES:
        cleaned = after_period.sub("", cleaned)
        cleaned = after_space.sub("", cleaned)
    cleaned = re.sub(r"[.;,]+$", "", cleaned)
    cleaned = re.sub(r"^\s*[-–—]\s*", "", cleaned)
    return cleaned.strip()


def is_valid_name(
    text: Optional[str], vocab: Vocabulary, max_length: Optional[int] = None
) -> bool:
    """
    Decide whether *text* can be a person's name.

    A valid name has at least two words, starts with a capital letter, has no
    digits or punctuation (Spanish diacritics and hyphens are fine), fits in
    ``max_length`` characters and is neither a position title, a registry
    reference nor business prose.
    """
    if not text or len(text) < 3:
        return False
    if len(text.split()) < 2:
        return False
    if FORBIDDEN_CHARS_RE.search(text):
        return False
    limit = settings.max_name_length if max_length is None else max_length
    if len(text) > limit:
        return False
    if is_registry_data(text):
        return False
    if vocab.is_position(text):
        return False
    if is_business_text(text):
        return False
    lower = text.lower()
    if any(word in lower for word in NON_NAME_WORDS):
        return False
    return CAPITAL_START_RE.match(text) is not None


def split_names(names_part: str, vocab: Vocabulary) -> List[str]:
    """Split a ``;``/``,`` separated list and keep the cleaned, valid names."""
    names = []
    for raw in NAME_SEPARATOR_RE.split(names_part or ""):
        name = clean_officer_name(raw)
        if name and len(name) > 2 and is_valid_name(name, vocab):
            names.append(name)
    return names

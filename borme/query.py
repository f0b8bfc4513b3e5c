"""
borme.query
===========

Coarse classifiers for free-text search queries.

These are tunable heuristics used to route a query (company lookup, officer
lookup, relationship analysis, ...).  Nothing in the extraction core depends
on them.  Matching is on words of the accent-folded query, so ``sl`` does
not fire inside ``consulting`` and ``que`` does not fire inside ``Vázquez``;
role and relationship words also match their plurals (``administradores``).
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Optional, Tuple

from .vocabulary import fold

logger = logging.getLogger(__name__)


class QueryType(Enum):
    RELATIONSHIP = "relationship_analysis"
    OFFICER = "officer_search"
    PERSON = "person_search"
    COMPANY = "company_search"
    GENERAL = "general_search"

    def __str__(self) -> str:
        return self.value


CONFIDENCE = {
    QueryType.RELATIONSHIP: 0.9,
    QueryType.OFFICER: 0.8,
    QueryType.PERSON: 0.7,
    QueryType.COMPANY: 0.6,
    QueryType.GENERAL: 0.5,
}

QUESTION_WORDS = (
    "quien", "quienes", "que", "cual", "cuales", "como", "cuando", "donde", "por que", "porque",
)
ACTION_WORDS = ("administrador", "director", "consejero", "relacion", "conectado", "vinculo")
COMPANY_INDICATORS = (
    "sl", "sa", "slu", "slne", "sociedad", "empresa", "grupo", "compania",
    "consulting", "associates", "corp", "inc", "ltd",
)
OFFICER_WORDS = (
    "administrador", "director", "consejero", "apoderado", "presidente",
    "secretario", "vocal", "quien", "quienes", "cargo", "directivos",
)
RELATIONSHIP_WORDS = (
    "relacion", "relacionado", "conectado", "conexion", "vinculo",
    "entre", "comun", "compartido", "compartida",
)

PERSON_RE = re.compile(r"^[A-ZÁÉÍÓÚÑ][a-záéíóúñ]+(\s+[A-ZÁÉÍÓÚÑ][a-záéíóúñ]+)+$")
OF_COMPANY_RE = re.compile(r"\bde\s+([^?]+)", re.IGNORECASE)
PAIR_SPLIT_RE = re.compile(r"\s+y\s+|\s+entre\s+", re.IGNORECASE)


def _has_any(query: str, words, whole: bool = True) -> bool:
    """
    True if any of *words* occurs in the folded query.

    With *whole* false a word only has to start a query word, so
    ``administrador`` also matches ``administradores``.
    """
    # "S.L." and "S.A." count as "sl" / "sa"
    text = " ".join(re.findall(r"\w+", fold(query.replace(".", ""))))
    alternation = "|".join(re.escape(w) for w in words)
    tail = r"\b" if whole else ""
    return re.search(rf"\b(?:{alternation}){tail}", text) is not None


def is_simple_company_name(query: Optional[str]) -> bool:
    """
    Guess whether *query* is a bare company name rather than a question.

    >>> is_simple_company_name("Explora Consulting SL")
    True
    >>> is_simple_company_name("quien es el administrador de Explora")
    False
    """
    if not query or not isinstance(query, str) or not query.strip():
        return False
    if _has_any(query, QUESTION_WORDS) or _has_any(query, ACTION_WORDS, whole=False):
        return False

    word_count = len(query.split())
    if _has_any(query, COMPANY_INDICATORS) and 2 <= word_count <= 6:
        return True
    return 2 <= word_count <= 4 and "?" not in query


def interpret_query(query: Optional[str]) -> Tuple[QueryType, float]:
    """
    Classify *query* and return ``(type, confidence)``.

    Relationship wording beats officer wording, which beats a capitalised
    2–4 word person name; company indicators come next.
    """
    if not query or not isinstance(query, str):
        return QueryType.GENERAL, CONFIDENCE[QueryType.GENERAL]

    text = query.strip()
    word_count = len(text.split())
    is_person = 2 <= word_count <= 4 and PERSON_RE.match(text) is not None
    has_company = _has_any(text, COMPANY_INDICATORS)

    if _has_any(text, RELATIONSHIP_WORDS, whole=False):
        kind = QueryType.RELATIONSHIP
    elif _has_any(text, OFFICER_WORDS, whole=False):
        kind = QueryType.OFFICER
    elif is_person and not has_company:
        kind = QueryType.PERSON
    elif has_company:
        kind = QueryType.COMPANY
    else:
        kind = QueryType.GENERAL

    logger.debug(f"Query {query!r} interpreted as {kind.value}")
    return kind, CONFIDENCE[kind]


def company_in_officer_query(query: str) -> str:
    """``"administradores de ACME SL"`` → ``"ACME SL"``; the whole query otherwise."""
    match = OF_COMPANY_RE.search(query or "")
    return match.group(1).strip() if match else (query or "").strip()


def company_pair(query: str) -> Optional[Tuple[str, str]]:
    """The two company names of ``"relación entre A y B"``, or ``None``."""
    parts = [p.strip() for p in PAIR_SPLIT_RE.split(query or "") if len(p.strip()) > 3]
    if len(parts) < 2:
        return None
    return parts[-2], parts[-1]

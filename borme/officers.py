"""
borme.officers
==============

Officer extraction: who was appointed, re-elected, revoked or ceased, and in
which position.

Extraction is an ordered chain of strategy tiers.  Every strategy has the
same signature, ``(text, vocab) -> list[OfficerEvent]``, and a tier is only
tried when all earlier tiers came back empty:

1. category-structured sections together with inline category patterns
   (both always run; their results are merged and deduplicated);
2. direct ``Position: Names`` lines;
3. names found right after a known position keyword.

Events returned here carry no date, company or entry id; the entry pipeline
stamps those on.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .classifier import category_blocks, find_category
from .guard import is_registry_data
from .identity import normalize_name
from .models import CategorizedOfficers, OfficerCategory, OfficerEvent
from .names import clean_officer_name, is_business_text, is_valid_name, split_names
from .positions import label_pattern, position_labels, resolve_position
from .segmenter import split_sections
from .vocabulary import OFFICER_HEADERS, Vocabulary

logger = logging.getLogger(__name__)

Strategy = Callable[[str, Vocabulary], List[OfficerEvent]]

# Sections inspected after an officer header before giving up.
MAX_BLOCK_SECTIONS = 5

SOCIO_UNICO = "Socio Único"
SOCIO_UNICO_PATTERNS = (
    re.compile(r"Socio\s+[uú]nico\s*:\s*(.+)", re.IGNORECASE),
    re.compile(r"Socio\s+[uú]nico\s+(.+)", re.IGNORECASE),
)

_INLINE_STOP = r"Datos\s*registrales|Disolución|Extinción"
_OFFICER_LABELS = tuple(OFFICER_HEADERS)


def _alternation(labels: Iterable[str]) -> str:
    return "|".join(re.escape(label) for label in labels)


def _event(
    name: str, position: str, category: OfficerCategory, raw: str
) -> OfficerEvent:
    return OfficerEvent(
        person_name=name,
        position=position,
        category=category,
        normalized_name=normalize_name(name),
        raw_entry=raw,
    )


def events_from_pair(
    position_part: str,
    names_part: str,
    category: OfficerCategory,
    vocab: Vocabulary,
    raw: str = "",
) -> List[OfficerEvent]:
    """One event per valid name in *names_part*, if *position_part* resolves."""
    if not names_part or is_business_text(names_part):
        return []
    position = resolve_position(position_part, vocab)
    if not position:
        return []
    raw = raw or f"{position_part}: {names_part}"
    return [_event(name, position, category, raw) for name in split_names(names_part, vocab)]


def events_from_section(
    section: str, category: OfficerCategory, vocab: Vocabulary
) -> List[OfficerEvent]:
    """Parse a single ``Position: Name; Name`` section."""
    position_part, sep, names_part = section.partition(":")
    if not sep or not position_part.strip():
        return []
    return events_from_pair(position_part.strip(), names_part.strip(), category, vocab, raw=section)


# ---------------------------------------------------------------------------
# Tier 1a: category-structured sections
# ---------------------------------------------------------------------------
def _block_events(
    body: Sequence[str], category: OfficerCategory, vocab: Vocabulary
) -> List[OfficerEvent]:
    events: List[OfficerEvent] = []
    for section in body[:MAX_BLOCK_SECTIONS]:
        if is_registry_data(section) or find_category(section, vocab):
            break
        events.extend(events_from_section(section, category, vocab))
    return events


def _socio_unico_events(body: Sequence[str], vocab: Vocabulary) -> List[OfficerEvent]:
    """The sole shareholder named after ``Declaración de unipersonalidad``."""
    for index, section in enumerate(body[:MAX_BLOCK_SECTIONS]):
        if is_registry_data(section) or find_category(section, vocab):
            break
        for pattern in SOCIO_UNICO_PATTERNS:
            match = pattern.search(section)
            if match:
                name = clean_officer_name(match.group(1))
                if len(name) > 2 and is_valid_name(name, vocab):
                    return [_event(name, SOCIO_UNICO, OfficerCategory.APPOINTMENT, section)]
        if index == 0:
            name = clean_officer_name(section)
            if name and is_valid_name(name, vocab):
                return [_event(name, SOCIO_UNICO, OfficerCategory.APPOINTMENT, section)]
    return []


def extract_by_categories(text: str, vocab: Vocabulary) -> List[OfficerEvent]:
    """Officers listed under exact category headers (``Nombramientos.``, ...)."""
    events: List[OfficerEvent] = []
    for block in category_blocks(split_sections(text), vocab):
        category = OFFICER_HEADERS.get(block.category)
        if category is not None:
            found = _block_events(block.body, category, vocab)
        elif block.category == "Declaración de unipersonalidad":
            found = _socio_unico_events(block.body, vocab)
        else:
            continue
        logger.debug(f"{len(found)} officers under '{block.category}'")
        events.extend(found)
    return events


# ---------------------------------------------------------------------------
# Tier 1b: inline category patterns
# ---------------------------------------------------------------------------
def _inline_position_regex(label: str) -> "re.Pattern[str]":
    return re.compile(
        rf"(?<!\w){label_pattern(label)}\s*:\s*([^.]+?)"
        rf"(?=\.(?:\s|$)|\s*(?:{_alternation(_OFFICER_LABELS)}|Otros\s*conceptos|{_INLINE_STOP}|$))",
        re.IGNORECASE,
    )


def parse_inline_content(
    content: str, category: OfficerCategory, vocab: Vocabulary
) -> List[OfficerEvent]:
    """
    Read ``Position: Names`` pairs out of the text following an inline header.

    Falls back to section-by-section parsing when no known position label
    appears in *content*.
    """
    normalized = " ".join(content.split())
    events: List[OfficerEvent] = []
    for label in position_labels(vocab):
        for match in _inline_position_regex(label).finditer(normalized):
            names_part = match.group(1).strip()
            events.extend(
                events_from_pair(label, names_part, category, vocab, raw=f"{label}: {names_part}")
            )
    if events:
        return events

    for section in split_sections(content):
        if is_registry_data(section):
            continue
        events.extend(events_from_section(section, category, vocab))
    return events


def extract_inline_categories(text: str, vocab: Vocabulary) -> List[OfficerEvent]:
    """
    Officer categories run together in one stretch of text, e.g.
    ``Ceses/Dimisiones. Adm. Solid.: A;B. Nombramientos. Liquidador: C.``

    A label only counts at the start of the entry or of a sentence, so the
    ``nombramientos`` of ``Cancelaciones de oficio de nombramientos`` is not
    read as a header of its own.
    """
    events: List[OfficerEvent] = []
    for label, category in OFFICER_HEADERS.items():
        others = _alternation(l for l in _OFFICER_LABELS if l != label)
        pattern = re.compile(
            rf"(?:^|(?<=[.\n]))\s*{re.escape(label)}\.\s*(.*?)(?=\s*(?:{others}|{_INLINE_STOP}|$))",
            re.IGNORECASE | re.DOTALL,
        )
        for match in pattern.finditer(text):
            content = match.group(1).strip()
            if content:
                events.extend(parse_inline_content(content, category, vocab))
    return events


# ---------------------------------------------------------------------------
# Tier 2: direct "Position: Names" lines
# ---------------------------------------------------------------------------
def _lines(text: str) -> List[str]:
    return [line.strip() for s in split_sections(text) for line in s.splitlines() if line.strip()]


def extract_direct_patterns(text: str, vocab: Vocabulary) -> List[OfficerEvent]:
    """Uncategorised ``Position: Names`` lines, read as appointments."""
    events: List[OfficerEvent] = []
    for line in _lines(text):
        if is_registry_data(line) or find_category(line, vocab) or is_business_text(line):
            continue
        events.extend(events_from_section(line, OfficerCategory.APPOINTMENT, vocab))
    return events


# ---------------------------------------------------------------------------
# Tier 3: names next to position keywords
# ---------------------------------------------------------------------------
PROXIMITY_KEYWORDS: Tuple[str, ...] = (
    "ADMINISTRADOR ÚNICO", "ADMINISTRADOR UNICO", "ADM. ÚNICO", "ADM. UNICO",
    "ADM.ÚNICO", "ADM.UNICO", "ADMINISTRADOR", "ADMINISTRADORA", "ADM.", "ADMIN.",
    "PRESIDENTE", "PRESIDENTA", "PRES.", "SECRETARIO", "SECRETARIA", "SECR.",
    "CONSEJERO", "CONSEJERA", "CONS.", "GERENTE", "GERENT.", "DIRECTOR", "DIRECTORA",
    "DIR.", "ÚNICO", "UNICO", "SOLIDARIO", "SOLIDARIA", "SOCIO ÚNICO", "SOCIO UNICO",
)


def _keyword_regex(keyword: str) -> "re.Pattern[str]":
    tail = r"(?!\w)" if keyword[-1].isalnum() else ""
    return re.compile(
        rf"(?<!\w){re.escape(keyword)}{tail}[\s:]*((?:[^\W\d_]|\s)+)", re.IGNORECASE
    )


def extract_by_proximity(text: str, vocab: Vocabulary) -> List[OfficerEvent]:
    """Last resort: a capitalised run of words right after a position keyword."""
    events: List[OfficerEvent] = []
    seen = set()
    for keyword in PROXIMITY_KEYWORDS:
        for match in _keyword_regex(keyword).finditer(text):
            name = clean_officer_name(match.group(1))
            if name in seen or not is_valid_name(name, vocab):
                continue
            position = resolve_position(keyword, vocab)
            if not position:
                continue
            seen.add(name)
            events.append(_event(name, position, OfficerCategory.APPOINTMENT, match.group(0)))
    return events


# ---------------------------------------------------------------------------
# Chain
# ---------------------------------------------------------------------------
STRATEGY_CHAIN: Tuple[Tuple[Strategy, ...], ...] = (
    (extract_by_categories, extract_inline_categories),
    (extract_direct_patterns,),
    (extract_by_proximity,),
)


def extract_officers(
    text: Optional[str],
    vocab: Vocabulary,
    chain: Sequence[Sequence[Strategy]] = STRATEGY_CHAIN,
) -> CategorizedOfficers:
    """
    Run the strategy chain over *text*.

    The first tier that yields anything wins; its events are bucketed by
    category and deduplicated on (name, position), first occurrence kept.
    """
    if not text or not isinstance(text, str):
        return CategorizedOfficers()

    for tier in chain:
        events: List[OfficerEvent] = []
        for strategy in tier:
            events.extend(strategy(text, vocab))
        if events:
            names = ", ".join(s.__name__ for s in tier)
            logger.debug(f"{len(events)} officer events from {names}")
            return CategorizedOfficers.from_events(events).deduplicated()

    logger.debug("No officers extracted from entry")
    return CategorizedOfficers()

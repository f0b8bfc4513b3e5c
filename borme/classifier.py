"""
borme.classifier
================

Category classification of bulletin sections.

Two matching modes are kept strictly apart:

* **exact** (:func:`find_category_exact`) decides where a category block
  *starts*; a section must be, case- and accent-insensitively, one of the
  vocabulary's top-level categories.
* **fuzzy** (:func:`find_category`, :func:`mentions_category`) recognises a
  category mentioned *inside* free text: containment plus a few synonym
  rules.  Constitution detail lines (``Domicilio: ...``) are folded into
  ``Constitución`` here and nowhere else.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional

from .models import CategoryBlock, Section
from .segmenter import split_sections
from .vocabulary import Vocabulary, fold

logger = logging.getLogger(__name__)

CONSTITUTION = "Constitución"

CONSTITUTION_DETAIL_RE = re.compile(
    r"^(?:Comienzo de operaciones|Domicilio|Capital|Objeto social)\s*:", re.IGNORECASE
)


def _synonym_match(category: str, section: str) -> bool:
    """Synonym rules; both arguments already folded."""
    if category == "modificaciones estatutarias":
        return "modificacion" in section or "estatutaria" in section
    if category == "ampliacion del objeto social":
        return "ampliacion" in section and "objeto" in section
    if category == "cambio de objeto social":
        return "cambio" in section and "objeto" in section
    return False


def find_category_exact(section: Optional[str], vocab: Vocabulary) -> Optional[str]:
    """Return the vocabulary category *section* is exactly equal to, if any."""
    if not section:
        return None
    key = fold(section)
    for category in vocab.top_level:
        if fold(category) == key:
            return category
    return None


def find_category(section: Optional[str], vocab: Vocabulary) -> Optional[str]:
    """
    Fuzzy classification of a single section.

    Order: constitution detail line, exact match, containment, synonyms.
    """
    if not section:
        return None
    clean = section.strip()
    if CONSTITUTION_DETAIL_RE.match(clean):
        return CONSTITUTION

    exact = find_category_exact(clean, vocab)
    if exact:
        return exact

    key = fold(clean)
    for category in vocab.top_level:
        folded = fold(category)
        if folded in key or _synonym_match(folded, key):
            return category
    return None


def mentions_category(text: Optional[str], category: str) -> bool:
    """True if *category* is mentioned anywhere in *text*."""
    if not text or not category:
        return False
    folded = fold(category)
    if folded in fold(text):
        return True
    return any(_synonym_match(folded, fold(s)) for s in split_sections(text))


def label_sections(sections: Iterable[str], vocab: Vocabulary) -> List[Section]:
    """Attach a fuzzily resolved category (possibly ``None``) to every section."""
    return [Section(text=s, category=find_category(s, vocab)) for s in sections]


def category_blocks(sections: List[str], vocab: Vocabulary) -> List[CategoryBlock]:
    """
    Group *sections* under their exact category headers.

    Every exact header opens a block that consumes all following sections up
    to the next exact header.  Sections before the first header are ignored.
    """
    headers = [find_category_exact(s, vocab) for s in sections]
    blocks: List[CategoryBlock] = []
    i = 0
    while i < len(sections):
        category = headers[i]
        if category is None:
            i += 1
            continue
        j = i + 1
        while j < len(sections) and headers[j] is None:
            j += 1
        blocks.append(CategoryBlock(category=category, body=tuple(sections[i + 1:j])))
        logger.debug(f"Block '{category}' spans {j - i - 1} sections")
        i = j
    return blocks

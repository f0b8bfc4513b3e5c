"""
borme.segmenter
===============

Split a bulletin entry into its ordered, period-delimited sections.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .guard import guard_text

logger = logging.getLogger(__name__)


def split_sections(text: Optional[str]) -> List[str]:
    """
    Return the non-empty, trimmed sections of *text*.

    Periods inside abbreviations, dates, registry codes and decimal amounts
    are not treated as boundaries.

    >>> split_sections("Nombramientos. Adm. Unico: ANA RUIZ PEREZ. Capital: 3.000,00 Euros.")
    ['Nombramientos', 'Adm. Unico: ANA RUIZ PEREZ', 'Capital: 3.000,00 Euros']
    """
    if not text or not isinstance(text, str):
        return []

    guarded = guard_text(text)
    sections = [piece.strip() for piece in guarded.split(".")]
    sections = [s for s in sections if s]
    logger.debug(f"Split entry into {len(sections)} sections ({len(guarded.spans)} protected)")
    return sections

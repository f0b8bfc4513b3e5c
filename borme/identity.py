"""
borme.identity
==============

Name normalization and best-effort grouping of spelling variants.

The same person shows up in the bulletin as ``GOSLIN COX BRUCE RIDGWAY``
and ``GOSLIN BRUCE RIDGWAY``, with or without accents and honorifics.
Matching favours surname agreement over generic token overlap: under Spanish
naming conventions two matching surnames say more than a shared first name.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from typing import Dict, Iterable, List, Optional

from .vocabulary import strip_accents

logger = logging.getLogger(__name__)

_PREFIX_RE = re.compile(r"^(?:DON|DOÑA|D\.|DÑA\.)\s+", re.IGNORECASE)
_SUFFIX_RE = re.compile(r"\s+(?:JR\.?|SR\.?|III?|IV)$", re.IGNORECASE)


def normalize_name(name: Optional[str]) -> str:
    """
    Canonical comparison form of a personal name.

    >>> normalize_name("  Doña  María   López Ruiz ")
    'MARIA LOPEZ RUIZ'
    """
    if not name:
        return ""
    text = " ".join(name.upper().split())
    text = _PREFIX_RE.sub("", text)
    text = _SUFFIX_RE.sub("", text)
    return strip_accents(text).strip()


def significant_parts(name: Optional[str]) -> List[str]:
    """
    First name plus the two surnames.

    Tokens of a single character are ignored; names of up to three tokens are
    kept whole.
    """
    parts = [p for p in normalize_name(name).split(" ") if len(p) > 1]
    if len(parts) <= 3:
        return parts
    return [parts[0]] + parts[-2:]


def names_similar(a: Optional[str], b: Optional[str], threshold: Optional[float] = None) -> bool:
    """
    Decide whether two names probably belong to the same person.

    Rules, in order: equal after normalization; a side with fewer than two
    significant parts only matches by equality; matching final surnames (and
    second-to-last ones when both names have three or more parts); otherwise a
    Jaccard overlap of at least *threshold* or two shared parts.
    """
    if not a or not b:
        return False
    if threshold is None:
        from .settings import settings

        threshold = settings.name_similarity_threshold

    norm_a, norm_b = normalize_name(a), normalize_name(b)
    if norm_a == norm_b:
        return True

    parts_a, parts_b = significant_parts(a), significant_parts(b)
    if len(parts_a) < 2 or len(parts_b) < 2:
        return False

    set_a, set_b = set(parts_a), set(parts_b)
    shared = set_a & set_b
    jaccard = len(shared) / len(set_a | set_b)

    last_match = parts_a[-1] == parts_b[-1]
    second_match = len(parts_a) >= 3 and len(parts_b) >= 3 and parts_a[-2] == parts_b[-2]
    if last_match and second_match:
        return True

    return jaccard >= threshold or len(shared) >= 2


def canonical_variant(names: Iterable[str]) -> str:
    """The most frequent upper-cased variant; ties go to the first seen."""
    counts = Counter(" ".join(n.upper().split()) for n in names if n)
    if not counts:
        return ""
    return counts.most_common(1)[0][0]


def group_by_person(names: Iterable[str]) -> Dict[str, List[str]]:
    """
    Group name variants that probably denote one person.

    Each group is seeded by the first unassigned name and collects every later
    name similar to that seed.  Keys are canonical variants.

    >>> group_by_person(["GOSLIN COX BRUCE RIDGWAY", "GOSLIN BRUCE RIDGWAY", "ANA RUIZ PEREZ"])
    {'GOSLIN COX BRUCE RIDGWAY': ['GOSLIN COX BRUCE RIDGWAY', 'GOSLIN BRUCE RIDGWAY'], 'ANA RUIZ PEREZ': ['ANA RUIZ PEREZ']}
    """
    items = [n for n in names if n]
    assigned = [False] * len(items)
    groups: Dict[str, List[str]] = {}

    for i, seed in enumerate(items):
        if assigned[i]:
            continue
        assigned[i] = True
        members = [seed]
        for j in range(i + 1, len(items)):
            if not assigned[j] and names_similar(seed, items[j]):
                assigned[j] = True
                members.append(items[j])
        key = canonical_variant(members)
        groups.setdefault(key, []).extend(members)

    logger.debug(f"Grouped {len(items)} names into {len(groups)} people")
    return groups

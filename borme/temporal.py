"""
borme.temporal
==============

Who holds which office *now*, worked out from the order of appointment and
cessation events across any number of entries.

Events are keyed by normalized name and exact position (and company, when
asked).  Each key's events are sorted by date and folded left to right:
appointments and re-elections switch the position on and record the date,
cessations and revocations switch it off.  Only the chronologically last
event decides the outcome.  Undated events sort first.

The resolver keeps no state between calls; callers that accumulate events
re-run it over the full set.
"""

from __future__ import annotations

import logging
import re
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .dates import parse_date, to_iso
from .identity import canonical_variant, group_by_person, normalize_name
from .models import (
    CurrentPosition,
    OfficerCategory,
    OfficerEvent,
    OfficerRecord,
    OfficerResolution,
    OfficerStatus,
)
from .settings import settings

logger = logging.getLogger(__name__)

Key = Tuple[str, ...]


@dataclass
class PositionState:
    """Result of folding one key's events."""
    position: str
    company_name: Optional[str]
    active: bool = False
    since: Optional[str] = None
    category: Optional[OfficerCategory] = None


def _sentinel() -> date:
    return parse_date(settings.undated_sentinel) or date(1900, 1, 1)


def sort_events(events: Iterable[OfficerEvent]) -> List[OfficerEvent]:
    """Chronological order; undated or malformed dates first, ties kept in input order."""
    floor = _sentinel()
    return sorted(events, key=lambda e: parse_date(e.date) or floor)


def event_key(event: OfficerEvent, by_company: bool = False) -> Key:
    name = event.normalized_name or normalize_name(event.person_name)
    if by_company:
        return (name, event.position, event.company_name or "")
    return (name, event.position)


def fold_events(events: Iterable[OfficerEvent]) -> PositionState:
    """Left fold of one key's chronologically sorted events."""
    state: Optional[PositionState] = None
    for event in events:
        if state is None:
            state = PositionState(position=event.position, company_name=event.company_name)
        if event.is_appointment:
            state.active = True
            state.since = event.date
            state.category = event.category
            state.company_name = event.company_name or state.company_name
        elif event.is_cessation:
            state.active = False
            state.since = None
    if state is None:
        raise ValueError("fold_events needs at least one event")
    return state


def resolve_officers(events: Iterable[OfficerEvent], by_company: bool = False) -> OfficerResolution:
    """
    Resolve current and past officers from *events*.

    Parameters
    ----------
    events : iterable of OfficerEvent
        Events for one company or query scope; anything else is ignored.
    by_company : bool, default=False
        Also key positions by company, for scopes spanning several companies.
    """
    timeline = sort_events(e for e in (events or ()) if isinstance(e, OfficerEvent))
    if not timeline:
        return OfficerResolution()

    by_key: "OrderedDict[Key, List[OfficerEvent]]" = OrderedDict()
    for event in timeline:
        by_key.setdefault(event_key(event, by_company), []).append(event)

    states: Dict[Key, PositionState] = {key: fold_events(evts) for key, evts in by_key.items()}
    for key, state in states.items():
        logger.debug(f"{' / '.join(key)}: {'active' if state.active else 'inactive'}")

    people = group_by_person(OrderedDict.fromkeys(key[0] for key in by_key))
    records: List[OfficerRecord] = []
    for members in people.values():
        member_set = set(members)
        keys = [key for key in by_key if key[0] in member_set]
        history = [e for e in timeline if event_key(e, by_company) in keys]
        current = [
            CurrentPosition(
                position=states[key].position,
                company_name=states[key].company_name,
                since=states[key].since,
                category=states[key].category,
            )
            for key in keys
            if states[key].active
        ]
        records.append(
            OfficerRecord(
                canonical_name=canonical_variant(e.person_name for e in history),
                current_positions=current,
                history=history,
                status=OfficerStatus.ACTIVE if current else OfficerStatus.INACTIVE,
            )
        )

    return OfficerResolution(
        current_officers=[r for r in records if r.is_active],
        all_officers=records,
        timeline=timeline,
    )


# ---------------------------------------------------------------------------
# Flat officer records from search results
# ---------------------------------------------------------------------------
_CATEGORY_BY_VALUE = {c.value: c for c in OfficerCategory}


def infer_category(record: Mapping[str, Any]) -> OfficerCategory:
    """
    Category of a flat officer record.

    An explicit ``event_type`` wins; then a ``ceased`` status or a removal
    date; then keywords in the position text; otherwise an appointment.
    """
    explicit = _CATEGORY_BY_VALUE.get(str(record.get("event_type") or "").lower())
    if explicit:
        return explicit
    if record.get("status") == "ceased" or record.get("removal_date"):
        return OfficerCategory.CESSATION
    position = str(record.get("position") or "").lower()
    if re.search(r"\breelec", position):
        return OfficerCategory.REELECTION
    if re.search(r"\brevoc", position):
        return OfficerCategory.REVOCATION
    if re.search(r"\b(?:ces|dimis)", position):
        return OfficerCategory.CESSATION
    return OfficerCategory.APPOINTMENT


def officer_events_from_records(records: Iterable[Any]) -> List[OfficerEvent]:
    """
    Convert already-extracted officer dicts into :class:`OfficerEvent` values.

    Records without a name or position are skipped.
    """
    events: List[OfficerEvent] = []
    for record in records or ():
        if isinstance(record, OfficerEvent):
            events.append(record)
            continue
        if not isinstance(record, Mapping):
            continue
        name = record.get("name") or record.get("person_name")
        position = record.get("position")
        if not isinstance(name, str) or not name.strip() or not isinstance(position, str):
            continue
        category = infer_category(record)
        raw_date = record.get("date") or record.get("appointment_date") or record.get("event_date")
        if category.is_cessation and record.get("removal_date"):
            raw_date = record["removal_date"]
        events.append(
            OfficerEvent(
                person_name=" ".join(name.split()),
                position=position.strip(),
                category=category,
                normalized_name=normalize_name(name),
                date=to_iso(raw_date) if isinstance(raw_date, str) else None,
                company_name=record.get("company_name") or record.get("company"),
                source_entry_id=record.get("source_entry_id") or record.get("identifier"),
                raw_entry=str(record.get("raw_entry") or ""),
            )
        )
    return events

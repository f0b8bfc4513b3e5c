"""
borme.parser
============

Entry → company record pipeline.

:func:`parse_entry` reads one entry's text; :func:`parse_company` wraps it
with everything around the text: company-name recovery, entry dating,
address fallbacks and gap filling from the upstream ``parsed_details``.
Neither function raises on malformed input; they return empty structures.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .classifier import category_blocks
from .dates import extract_entry_date, to_iso
from .events import (
    address_from_domicile_change,
    address_from_erratum,
    derive_company_status,
    extract_corporate_events,
    extract_name_changes,
    looks_like_address,
    parse_constitution_details,
)
from .guard import REGISTRY_DATA_RE
from .identity import normalize_name
from .models import (
    CategorizedOfficers,
    CompanyRecord,
    Entry,
    EntryParse,
    OfficerCategory,
    OfficerEvent,
)
from .officers import extract_officers
from .segmenter import split_sections
from .temporal import officer_events_from_records
from .vocabulary import Vocabulary, default_vocabulary

logger = logging.getLogger(__name__)

# "127261 - EXPLORA CONSULTING SL(2007)." on a line of its own
HEADER_LINE_RE = re.compile(r"^\d+\s*[-–—]\s*([^.\n]+?)(?:\s*\(\d{4}\))?\.?$", re.MULTILINE)
# ... or running straight into the first category
HEADER_INLINE_RE = re.compile(
    r"^\s*\d+\s*[-–—]\s*(.+?)(?:\s*\(\d{4}\))?\.\s+(?=[A-ZÁÉÍÓÚÑ][a-záéíóúñ])"
)

_LEADING_NOISE_RE = re.compile(r"^[:\s]+")


def clean_field_value(value: Any) -> Any:
    """Strip the leading ``: `` some upstream values carry (``": 3.000,00 Euros."``)."""
    if not isinstance(value, str):
        return value
    return _LEADING_NOISE_RE.sub("", value).strip()


# ---------------------------------------------------------------------------
# Entry text
# ---------------------------------------------------------------------------
def parse_entry(text: Optional[str], vocab: Optional[Vocabulary] = None) -> EntryParse:
    """
    Extract officers, categories, constitution details, name changes and
    corporate events from a single entry's text.
    """
    if not text or not isinstance(text, str):
        return EntryParse()
    vocab = vocab if vocab is not None else default_vocabulary()

    result = EntryParse()
    registry = REGISTRY_DATA_RE.search(text)
    if registry:
        result.registry_data = registry.group(0)

    for block in category_blocks(split_sections(text), vocab):
        if block.category not in result.categories:
            result.categories.append(block.category)
        if block.category == "Constitución" and result.constitution is None:
            result.constitution = parse_constitution_details(block.text)
        elif block.category == "Cambio de domicilio social" and block.body:
            candidate = block.body[0].strip()
            if looks_like_address(candidate):
                result.new_address = candidate.rstrip(".")

    result.officers = extract_officers(text, vocab)
    result.name_changes, result.previous_names = extract_name_changes(text)
    result.corporate_events = extract_corporate_events(text, vocab)

    logger.debug(
        f"Parsed entry: {result.officers.total()} officers, "
        f"{len(result.corporate_events)} events, categories={result.categories}"
    )
    return result


# ---------------------------------------------------------------------------
# Company record
# ---------------------------------------------------------------------------
def extract_company_name(entry: Entry) -> Optional[str]:
    """
    Company name of *entry*.

    The numbered header line is the most reliable source; then the name
    hint (repairing hints truncated at ``&``); then a header that runs into
    the first category; then ``parsed_details``.
    """
    text = entry.text or ""
    match = HEADER_LINE_RE.search(text)
    if match:
        return match.group(1).strip()

    inline = HEADER_INLINE_RE.search(text)
    inline_name = inline.group(1).strip() if inline else None

    hint = entry.company_name
    if hint:
        if hint.endswith(" &") and inline_name and len(inline_name) > len(hint):
            logger.info(f"Name hint {hint!r} looks truncated, using {inline_name!r}")
            return inline_name
        return hint.strip()

    if inline_name:
        return inline_name

    detail_name = entry.parsed_details.get("company_name")
    if isinstance(detail_name, str) and detail_name.strip():
        return clean_field_value(detail_name)
    return None


def _stamp(
    officers: CategorizedOfficers, when: Optional[str], company: Optional[str], entry_id: Optional[str]
) -> CategorizedOfficers:
    return officers.map(
        lambda e: e.stamped(
            date=e.date or when,
            company_name=e.company_name or company,
            source_entry_id=e.source_entry_id or entry_id,
        )
    )


def _detail_officers(details: Mapping[str, Any]) -> List[OfficerEvent]:
    """Officer arrays and ``administrators`` strings from ``parsed_details``."""
    events: List[OfficerEvent] = []
    for category in OfficerCategory:
        items = details.get(category.value)
        if not isinstance(items, list):
            continue
        records = [dict(item, event_type=category.value) for item in items if isinstance(item, Mapping)]
        events.extend(officer_events_from_records(records))

    administrators = details.get("administrators")
    if isinstance(administrators, list):
        for admin in administrators:
            if isinstance(admin, str) and admin.strip():
                name = " ".join(admin.split())
                events.append(
                    OfficerEvent(
                        person_name=name,
                        position="Administrador",
                        category=OfficerCategory.APPOINTMENT,
                        normalized_name=normalize_name(name),
                    )
                )
    return events


def _fill_from_details(record: CompanyRecord, details: Mapping[str, Any]) -> None:
    """Fill gaps in *record*; extracted values are never overridden."""
    def _value(*keys: str) -> Optional[str]:
        for key in keys:
            value = clean_field_value(details.get(key))
            if isinstance(value, str) and value:
                return value
        return None

    record.cif = record.cif or _value("cif")
    record.address = record.address or _value("cambio_de_domicilio_social", "address", "domicilio")
    record.activity = record.activity or _value("activity", "objeto_social")
    record.capital = record.capital or _value("capital")

    if record.officers.total() == 0:
        events = _detail_officers(details)
        if events:
            record.officers = CategorizedOfficers.from_events(events)
            record.parsing_method = "parsed_details"


def parse_company(raw: Any, vocab: Optional[Vocabulary] = None) -> CompanyRecord:
    """
    Build a :class:`CompanyRecord` from a raw search-service entry.

    *raw* may be an :class:`~borme.models.Entry`, the service's dict shape or
    bare entry text.  Anything else yields an empty record.

    Example
    -------
    >>> rec = parse_company({"full_entry": "1 - ACME SL. Disolución. Voluntaria."})
    >>> rec.status.value
    'dissolved_voluntary'
    """
    entry = Entry.from_raw(raw)
    vocab = vocab if vocab is not None else default_vocabulary()

    record = CompanyRecord(
        identifier=entry.identifier,
        raw_content=entry.text or entry.content,
    )
    if not entry.text and not entry.content and not entry.parsed_details:
        record.company_name = entry.company_name
        return record

    record.company_name = extract_company_name(entry)
    entry_date = to_iso(entry.date) or extract_entry_date(entry.text)

    if entry.text:
        parsed = parse_entry(entry.text, vocab)
        record.parsing_method = "enhanced"
        record.officers = parsed.officers
        record.registry_data = parsed.registry_data
        record.categories = list(parsed.categories)
        record.name_changes = list(parsed.name_changes)
        record.previous_names = list(parsed.previous_names)
        record.corporate_events = [
            e if e.date else replace(e, date=entry_date) for e in parsed.corporate_events
        ]
        record.status = derive_company_status(record.corporate_events)

        if parsed.constitution is not None:
            c = parsed.constitution
            record.constitution_date = c.constitution_date or record.constitution_date
            record.address = c.address or record.address
            record.capital = c.capital or record.capital
            record.total_capital = c.total_capital or record.total_capital
            record.activity = c.activity or record.activity
            record.cnae_code = c.cnae_code or record.cnae_code
        if parsed.new_address:
            record.address = parsed.new_address

    if not record.constitution_date and entry.operations_start_date:
        record.constitution_date = to_iso(entry.operations_start_date) or entry.operations_start_date

    if entry.text and not record.address:
        record.address = address_from_domicile_change(entry.text) or address_from_erratum(entry.text)

    if entry.parsed_details:
        _fill_from_details(record, entry.parsed_details)

    if entry.content and record.officers.total() == 0:
        fallback = parse_entry(entry.content, vocab)
        record.officers = fallback.officers
        record.parsing_method = "fallback"

    record.officers = _stamp(record.officers, entry_date, record.company_name, entry.identifier)
    logger.debug(
        f"Company {record.company_name!r}: {record.officers.total()} officers, "
        f"status={record.status.value}, method={record.parsing_method}"
    )
    return record


# ---------------------------------------------------------------------------
# Officer input from search results
# ---------------------------------------------------------------------------
def normalize_officer_input(officers: Any) -> CategorizedOfficers:
    """
    Convert search-service officer data into :class:`CategorizedOfficers`.

    Accepts a flat list of officer dicts (category inferred per record) or a
    mapping keyed by the four category names.
    """
    if isinstance(officers, CategorizedOfficers):
        return officers
    if isinstance(officers, Mapping):
        events: List[OfficerEvent] = []
        for category in OfficerCategory:
            items = officers.get(category.value)
            if isinstance(items, list):
                events.extend(
                    officer_events_from_records(
                        dict(i, event_type=category.value) if isinstance(i, Mapping) else i
                        for i in items
                    )
                )
        return CategorizedOfficers.from_events(events)
    if isinstance(officers, (list, tuple)):
        return CategorizedOfficers.from_events(officer_events_from_records(officers))
    return CategorizedOfficers()


def officer_summary(officers: Any) -> Dict[str, Any]:
    """Counts per category plus the flattened officer list."""
    book = normalize_officer_input(officers)
    return {
        "total": book.total(),
        "has_changes": bool(book.revocaciones or book.ceses_dimisiones),
        "recent_appointments": bool(book.nombramientos),
        "recent_reelections": bool(book.reelecciones),
        "appointments_count": len(book.nombramientos),
        "reelections_count": len(book.reelecciones),
        "revocations_count": len(book.revocaciones),
        "cessations_count": len(book.ceses_dimisiones),
        "officers": [e.to_dict() for e in book.events()],
    }


def parse_companies(raws: Iterable[Any], vocab: Optional[Vocabulary] = None) -> List[CompanyRecord]:
    """:func:`parse_company` over a batch of entries."""
    vocab = vocab if vocab is not None else default_vocabulary()
    return [parse_company(raw, vocab) for raw in raws or ()]

"""
borme.models
============

Dataclasses and enums representing bulletin entries and everything the
engine extracts from them.  These objects are intentionally lightweight; they
carry **no** external-library dependencies so that importing `borme` stays
fast even in constrained environments.

Every value here is produced by a pure function and never mutated by the
engine once it has been returned.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

# Name the search service reports when it has none.
PLACEHOLDER_COMPANY_NAME = "Empresa Española"

_HTML_TAG_RE = re.compile(r"<[^>]*>")


class Group(Enum):
    """High-level group a top-level bulletin category belongs to."""
    LIFECYCLE = "lifecycle"
    CAPITAL = "capital"
    STRUCTURAL = "structural"
    IDENTITY = "identity"
    GOVERNANCE = "governance"
    OWNERSHIP = "ownership"
    OFFICERS = "officers"
    ADMINISTRATIVE = "administrative"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value


class OfficerCategory(Enum):
    """The four officer-event categories used across the engine."""
    APPOINTMENT = "nombramientos"
    REELECTION = "reelecciones"
    REVOCATION = "revocaciones"
    CESSATION = "ceses_dimisiones"

    @property
    def is_appointment(self) -> bool:
        return self in (OfficerCategory.APPOINTMENT, OfficerCategory.REELECTION)

    @property
    def is_cessation(self) -> bool:
        return self in (OfficerCategory.REVOCATION, OfficerCategory.CESSATION)

    def __str__(self) -> str:
        return self.value


class OfficerStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"

    def __str__(self) -> str:
        return self.value


class DissolutionType(Enum):
    VOLUNTARY = "voluntary"
    JUDICIAL = "judicial"
    BANKRUPTCY = "bankruptcy"
    UNKNOWN = "unknown"


class CompanyStatus(Enum):
    """Derived legal status of a company, most terminal values last."""
    UNKNOWN = "unknown"
    ACTIVE = "active"
    SUSPENDED = "suspended"
    BANKRUPT = "bankrupt"
    DISSOLVED = "dissolved"
    DISSOLVED_VOLUNTARY = "dissolved_voluntary"
    DISSOLVED_JUDICIAL = "dissolved_judicial"
    DISSOLVED_BANKRUPTCY = "dissolved_bankruptcy"
    EXTINCT = "extinct"

    @property
    def label(self) -> str:
        """Display label used by the bulletin's own vocabulary."""
        return _STATUS_LABELS[self]

    def __str__(self) -> str:
        return self.value


_STATUS_LABELS = {
    CompanyStatus.UNKNOWN: "Desconocido",
    CompanyStatus.ACTIVE: "Activa",
    CompanyStatus.SUSPENDED: "Suspensión de Pagos",
    CompanyStatus.BANKRUPT: "En Quiebra/Concurso",
    CompanyStatus.DISSOLVED: "Disuelta",
    CompanyStatus.DISSOLVED_VOLUNTARY: "Disuelta (Voluntaria)",
    CompanyStatus.DISSOLVED_JUDICIAL: "Disuelta (Judicial)",
    CompanyStatus.DISSOLVED_BANKRUPTCY: "Disuelta (Concursal)",
    CompanyStatus.EXTINCT: "Extinguida",
}


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Entry:
    """
    One raw bulletin entry.

    Parameters
    ----------
    text : str
        Full entry text as published (``"127261 - ACME SL. Nombramientos. ..."``).
    identifier : str | None
        Source identifier of the entry (BORME id).
    date : str | None
        Publication date, ISO ``YYYY-MM-DD``.
    parsed_details : mapping, default={}
        Partially structured fields from an upstream parser (key → text or list).
    company_name : str | None
        Name hint supplied alongside the text.
    operations_start_date : str | None
        Upstream value used when the text carries no "Comienzo de operaciones".
    content : str | None
        Secondary free text (summary/content) parsed only as a last resort.
    """
    text: str = ""
    identifier: Optional[str] = None
    date: Optional[str] = None
    parsed_details: Mapping[str, Any] = field(default_factory=dict)
    company_name: Optional[str] = None
    operations_start_date: Optional[str] = None
    content: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Any) -> "Entry":
        """
        Build an Entry from the dict shape returned by the search service.

        Unknown or malformed input yields an empty Entry instead of raising.
        """
        if isinstance(raw, Entry):
            return raw
        if isinstance(raw, str):
            return cls(text=raw)
        if not isinstance(raw, Mapping):
            return cls()

        def _str(value: Any) -> Optional[str]:
            return value if isinstance(value, str) and value.strip() else None

        highlights = raw.get("highlights") if isinstance(raw.get("highlights"), Mapping) else {}
        highlighted = _str(highlights.get("company_name"))
        if highlighted:
            highlighted = _str(_HTML_TAG_RE.sub("", highlighted).strip())
        name = _str(raw.get("name"))
        if name == PLACEHOLDER_COMPANY_NAME:
            name = None

        details = raw.get("parsed_details")
        return cls(
            text=_str(raw.get("full_entry")) or "",
            identifier=_str(raw.get("identifier")) or _str(raw.get("id")),
            date=_str(raw.get("indexed_date")) or _str(raw.get("date")),
            parsed_details=dict(details) if isinstance(details, Mapping) else {},
            company_name=name or highlighted or _str(raw.get("company_name")),
            operations_start_date=_str(raw.get("operations_start_date")),
            content=_str(raw.get("content")) or _str(raw.get("text")) or _str(raw.get("summary")),
        )


@dataclass(frozen=True)
class Section:
    """A period-delimited piece of an entry, optionally labelled with a category."""
    text: str
    category: Optional[str] = None


@dataclass(frozen=True)
class CategoryBlock:
    """An exact category header plus the sections it governs."""
    category: str
    body: Tuple[str, ...] = ()

    @property
    def text(self) -> str:
        return " ".join(self.body)


# ---------------------------------------------------------------------------
# Officers
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class OfficerEvent:
    """
    A single appointment or cessation of a person in a position.

    ``normalized_name`` is the identity key used by the temporal resolver;
    ``raw_entry`` keeps the fragment the event was read from and does not take
    part in equality.
    """
    person_name: str
    position: str
    category: OfficerCategory
    normalized_name: str = ""
    date: Optional[str] = None
    company_name: Optional[str] = None
    source_entry_id: Optional[str] = None
    raw_entry: str = field(default="", compare=False)

    @property
    def is_appointment(self) -> bool:
        return self.category.is_appointment

    @property
    def is_cessation(self) -> bool:
        return self.category.is_cessation

    def stamped(self, **changes: Any) -> "OfficerEvent":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.person_name,
            "normalized_name": self.normalized_name,
            "position": self.position,
            "category": self.category.value,
            "date": self.date,
            "company_name": self.company_name,
            "source_entry_id": self.source_entry_id,
            "raw_entry": self.raw_entry,
        }


@dataclass
class CategorizedOfficers:
    """Officer events split into the four bulletin categories."""
    nombramientos: List[OfficerEvent] = field(default_factory=list)
    reelecciones: List[OfficerEvent] = field(default_factory=list)
    revocaciones: List[OfficerEvent] = field(default_factory=list)
    ceses_dimisiones: List[OfficerEvent] = field(default_factory=list)

    @classmethod
    def from_events(cls, events: List[OfficerEvent]) -> "CategorizedOfficers":
        book = cls()
        for event in events:
            book.bucket(event.category).append(event)
        return book

    def bucket(self, category: OfficerCategory) -> List[OfficerEvent]:
        return getattr(self, category.value)

    def events(self) -> List[OfficerEvent]:
        """All events, category by category in bulletin order."""
        return [e for category in OfficerCategory for e in self.bucket(category)]

    def total(self) -> int:
        return sum(len(self.bucket(category)) for category in OfficerCategory)

    def deduplicated(self) -> "CategorizedOfficers":
        """Drop events repeating a (name, position) pair inside one category."""
        result = CategorizedOfficers()
        for category in OfficerCategory:
            seen = set()
            for event in self.bucket(category):
                key = (event.person_name, event.position)
                if key in seen:
                    continue
                seen.add(key)
                result.bucket(category).append(event)
        return result

    def map(self, fn) -> "CategorizedOfficers":
        return CategorizedOfficers.from_events([fn(e) for e in self.events()])

    def __iter__(self) -> Iterator[OfficerEvent]:
        return iter(self.events())

    def __len__(self) -> int:
        return self.total()

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            category.value: [e.to_dict() for e in self.bucket(category)]
            for category in OfficerCategory
        }


@dataclass(frozen=True)
class CurrentPosition:
    position: str
    company_name: Optional[str]
    since: Optional[str]
    category: Optional[OfficerCategory] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": self.position,
            "company_name": self.company_name,
            "since": self.since,
            "category": self.category.value if self.category else None,
        }


@dataclass
class OfficerRecord:
    """A person together with the positions they currently hold and their history."""
    canonical_name: str
    current_positions: List[CurrentPosition] = field(default_factory=list)
    history: List[OfficerEvent] = field(default_factory=list)
    status: OfficerStatus = OfficerStatus.INACTIVE

    @property
    def is_active(self) -> bool:
        return self.status is OfficerStatus.ACTIVE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.canonical_name,
            "status": self.status.value,
            "current_positions": [p.to_dict() for p in self.current_positions],
            "history": [e.to_dict() for e in self.history],
        }


@dataclass
class OfficerResolution:
    """Output of the temporal resolver."""
    current_officers: List[OfficerRecord] = field(default_factory=list)
    all_officers: List[OfficerRecord] = field(default_factory=list)
    timeline: List[OfficerEvent] = field(default_factory=list)

    @property
    def past_officers(self) -> List[OfficerRecord]:
        return [o for o in self.all_officers if not o.is_active]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_officers": [o.to_dict() for o in self.current_officers],
            "all_officers": [o.to_dict() for o in self.all_officers],
            "timeline": [e.to_dict() for e in self.timeline],
            "total_events": len(self.timeline),
        }


# ---------------------------------------------------------------------------
# Company
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class CorporateEvent:
    """A non-officer event detected in an entry (constitution, capital change, ...)."""
    type: str
    group: Group
    date: Optional[str] = None
    details: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "group": self.group.value,
            "date": self.date,
            "details": dict(self.details),
        }


@dataclass(frozen=True)
class ConstitutionDetails:
    constitution_date: Optional[str] = None
    address: Optional[str] = None
    capital: Optional[str] = None
    total_capital: Optional[str] = None
    activity: Optional[str] = None
    cnae_code: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "constitution_date": self.constitution_date,
            "address": self.address,
            "capital": self.capital,
            "total_capital": self.total_capital,
            "activity": self.activity,
            "cnae_code": self.cnae_code,
        }


@dataclass(frozen=True)
class NameChange:
    new_name: str
    change_type: str
    date: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"new_name": self.new_name, "change_type": self.change_type, "date": self.date}


@dataclass
class EntryParse:
    """Everything read directly out of one entry's text."""
    officers: CategorizedOfficers = field(default_factory=CategorizedOfficers)
    registry_data: Optional[str] = None
    categories: List[str] = field(default_factory=list)
    constitution: Optional[ConstitutionDetails] = None
    new_address: Optional[str] = None
    name_changes: List[NameChange] = field(default_factory=list)
    previous_names: List[str] = field(default_factory=list)
    corporate_events: List[CorporateEvent] = field(default_factory=list)


@dataclass
class CompanyRecord:
    """
    Structured company record handed to graph builders and the UI.

    Parameters
    ----------
    company_name : str | None
        Legal name as published (``None`` when nothing could be recovered).
    status : CompanyStatus
        Derived from ``corporate_events``.
    parsing_method : str
        ``enhanced`` (text extraction), ``parsed_details`` (upstream officers),
        ``fallback`` (secondary content) or ``empty``.
    """
    company_name: Optional[str] = None
    identifier: Optional[str] = None
    cif: Optional[str] = None
    address: Optional[str] = None
    activity: Optional[str] = None
    capital: Optional[str] = None
    total_capital: Optional[str] = None
    cnae_code: Optional[str] = None
    constitution_date: Optional[str] = None
    registry_data: Optional[str] = None
    officers: CategorizedOfficers = field(default_factory=CategorizedOfficers)
    corporate_events: List[CorporateEvent] = field(default_factory=list)
    status: CompanyStatus = CompanyStatus.UNKNOWN
    name_changes: List[NameChange] = field(default_factory=list)
    previous_names: List[str] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)
    parsing_method: str = "empty"
    raw_content: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "company_name": self.company_name,
            "identifier": self.identifier,
            "cif": self.cif,
            "address": self.address,
            "activity": self.activity,
            "capital": self.capital,
            "total_capital": self.total_capital,
            "cnae_code": self.cnae_code,
            "constitution_date": self.constitution_date,
            "registry_data": self.registry_data,
            "officers": self.officers.to_dict(),
            "corporate_events": [e.to_dict() for e in self.corporate_events],
            "status": self.status.value,
            "status_label": self.status.label,
            "name_changes": [c.to_dict() for c in self.name_changes],
            "previous_names": list(self.previous_names),
            "categories": list(self.categories),
            "parsing_method": self.parsing_method,
            "raw_content": self.raw_content,
        }

"""
borme.portfolio
===============

An in-memory ledger of bulletin entries grouped by company, keyed by a
slugified version of the company name.

A company accumulates entries over time (constitution, appointments,
cessations, dissolution ...).  :meth:`CompanyLedger.get` folds them into one
:class:`~borme.models.CompanyRecord` and :meth:`CompanyLedger.officers`
re-runs the temporal resolver over every officer event seen so far.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional

from .dates import parse_date
from .events import derive_company_status
from .models import CategorizedOfficers, CompanyRecord, CompanyStatus, OfficerResolution
from .parser import parse_company
from .temporal import resolve_officers
from .vocabulary import Vocabulary

logger = logging.getLogger(__name__)

_SCALARS = (
    "identifier", "cif", "address", "activity", "capital", "total_capital",
    "cnae_code", "constitution_date", "registry_data",
)


def slugify(name: Optional[str]) -> str:
    """lower-cased, dash-separated key used as unique identifier."""
    return " ".join((name or "").split()).lower().replace(" ", "-")


def _record_date(record: CompanyRecord) -> str:
    dates = [e.date for e in record.officers if e.date]
    dates += [e.date for e in record.corporate_events if e.date]
    parsed = [d for d in (parse_date(x) for x in dates) if d]
    return max(parsed).isoformat() if parsed else ""


def merge_records(records: Iterable[CompanyRecord]) -> CompanyRecord:
    """
    Fold several records of one company into a single record.

    Records are applied oldest first, so later values win for the scalar
    fields; a missing value never erases a known one.  Officer and corporate
    events are concatenated and the status is derived again over all of them.
    """
    ordered = sorted(records, key=_record_date)
    merged = CompanyRecord()
    if not ordered:
        return merged

    events = []
    for record in ordered:
        merged.company_name = record.company_name or merged.company_name
        for attr in _SCALARS:
            value = getattr(record, attr)
            if value:
                setattr(merged, attr, value)
        events.extend(record.officers.events())
        merged.corporate_events.extend(record.corporate_events)
        merged.name_changes.extend(record.name_changes)
        for name in record.previous_names:
            if name not in merged.previous_names:
                merged.previous_names.append(name)
        for category in record.categories:
            if category not in merged.categories:
                merged.categories.append(category)
        merged.raw_content = record.raw_content or merged.raw_content

    merged.officers = CategorizedOfficers.from_events(events)
    merged.status = derive_company_status(merged.corporate_events)
    merged.parsing_method = "aggregated" if len(ordered) > 1 else ordered[0].parsing_method
    return merged


class CompanyLedger:
    """
    Dictionary-backed registry of parsed entries per company.

    Example
    -------
    >>> ledger = CompanyLedger()
    >>> ledger.add({"full_entry": "1 - ACME SL. Disolución. Voluntaria."})
    'acme-sl'
    >>> ledger.get("acme-sl").status.value
    'dissolved_voluntary'
    """

    def __init__(self, vocab: Optional[Vocabulary] = None) -> None:
        self._vocab = vocab
        self._records: Dict[str, List[CompanyRecord]] = {}

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _slug(record: CompanyRecord) -> str:
        return slugify(record.company_name or record.identifier or "unknown")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def add(self, entry: Any) -> str:
        """Parse *entry* (raw dict, text, Entry or CompanyRecord) and file it; return its slug."""
        record = entry if isinstance(entry, CompanyRecord) else parse_company(entry, self._vocab)
        slug = self._slug(record)
        self._records.setdefault(slug, []).append(record)
        logger.debug(f"Filed entry {record.identifier!r} under {slug}")
        return slug

    def extend(self, entries: Iterable[Any]) -> List[str]:
        return [self.add(e) for e in entries]

    def get(self, slug: str) -> CompanyRecord:
        """Aggregated record by slug (raise KeyError if not present)."""
        return merge_records(self._records[slug])

    def records(self, slug: str) -> List[CompanyRecord]:
        """Per-entry records filed under *slug*, in insertion order."""
        return list(self._records[slug])

    def officers(self, slug: str) -> OfficerResolution:
        """Current and past officers of a company over every entry filed so far."""
        events = [e for record in self._records[slug] for e in record.officers]
        return resolve_officers(events)

    def find_by_status(self, status: CompanyStatus) -> List[CompanyRecord]:
        """Return all companies currently at the given status."""
        return [r for r in self if r.status == status]

    def slugs(self) -> List[str]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()

    # ------------------------------------------------------------------
    # Dunder helpers for convenience
    # ------------------------------------------------------------------
    def __contains__(self, slug: object) -> bool:
        return slug in self._records

    def __iter__(self) -> Iterator[CompanyRecord]:
        return (merge_records(records) for records in self._records.values())

    def __len__(self) -> int:
        return len(self._records)

"""
borme.portfolio_db
==================

SQLite-backed implementation of the CompanyLedger public surface.

This adapter wraps the CRUD helpers in :pymod:`borme.db` so that any
code expecting the in-memory CompanyLedger can switch to a persistent store
without changing its API calls.
"""

from __future__ import annotations

from typing import Any, Iterator, List, Optional

from sqlmodel import Session

from borme.db import SessionLocal, all_slugs, clear_entries, entries_for, insert_entry
from borme.models import CompanyRecord, CompanyStatus, Entry, OfficerResolution
from borme.parser import parse_company
from borme.portfolio import merge_records, slugify
from borme.temporal import resolve_officers
from borme.vocabulary import Vocabulary


class DBCompanyLedger:
    """
    Drop-in replacement backed by SQLite.

    Methods mirror the in-memory CompanyLedger:
    * add(entry)
    * get(slug)
    * officers(slug)
    * find_by_status(status)
    * iteration / len()
    """

    def __init__(self, session: Session | None = None, vocab: Optional[Vocabulary] = None) -> None:
        self._session: Session = session or SessionLocal()
        self._vocab = vocab

    def _records(self, slug: str) -> List[CompanyRecord]:
        entries = entries_for(self._session, slug)
        if not entries:
            raise KeyError(slug)
        return [parse_company(e, self._vocab) for e in entries]

    # ------------------------------------------------------------------ CRUD
    def add(self, entry: Any) -> str:
        ent = Entry.from_raw(entry)
        record = parse_company(ent, self._vocab)
        slug = slugify(record.company_name or record.identifier or "unknown")
        insert_entry(self._session, ent, slug)
        return slug

    def extend(self, entries) -> List[str]:
        return [self.add(e) for e in entries]

    def get(self, slug: str) -> CompanyRecord:
        return merge_records(self._records(slug))

    def records(self, slug: str) -> List[CompanyRecord]:
        return self._records(slug)

    def officers(self, slug: str) -> OfficerResolution:
        return resolve_officers(e for record in self._records(slug) for e in record.officers)

    def find_by_status(self, status: CompanyStatus) -> List[CompanyRecord]:
        return [r for r in self if r.status == status]

    def slugs(self) -> List[str]:
        return all_slugs(self._session)

    def clear(self) -> None:
        clear_entries(self._session)

    # ------------------------------------------------------ dunder helpers
    def __contains__(self, slug: object) -> bool:
        return isinstance(slug, str) and bool(entries_for(self._session, slug))

    def __iter__(self) -> Iterator[CompanyRecord]:
        for slug in all_slugs(self._session):
            yield self.get(slug)

    def __len__(self) -> int:
        return len(all_slugs(self._session))

    # ----------------------------------------------------- context manager
    def __enter__(self) -> "DBCompanyLedger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._session.close()

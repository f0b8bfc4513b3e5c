"""
borme.db
========

SQLite persistence layer for raw bulletin entries.

This module exposes:

* ``engine`` – a global SQLModel engine built from ``settings.db_url``
* ``SessionLocal`` – a session factory used via ``with SessionLocal() as s:``
* ``create_all()`` – helper to create tables at first run

Entries are stored as received (text plus the upstream ``parsed_details``
in a JSON column) and re-parsed on read, so improvements to the extractor
apply to everything already stored.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Column
from sqlalchemy.engine import Engine
from sqlmodel import Field, Session, SQLModel, create_engine, select

from borme.models import Entry
from borme.settings import settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------
engine = create_engine(settings.db_url, echo=settings.db_echo)


# ---------------------------------------------------------------------------
# Session factory
# ---------------------------------------------------------------------------
def SessionLocal() -> Session:  # noqa: N802 (factory camel-case for consistency with FastAPI docs)
    """Return a new Session bound to the global engine."""
    return Session(engine)


# ---------------------------------------------------------------------------
# ORM model that mirrors borme.models.Entry
# ---------------------------------------------------------------------------
class EntryDB(SQLModel, table=True):
    """
    SQLite-backed representation of a :class:`borme.models.Entry`.

    *slug* is the slugified company name the entry was filed under, so all
    entries of one company come back with a single indexed look-up.
    """

    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(index=True)
    identifier: Optional[str] = Field(default=None, index=True)
    text: str = ""
    date: Optional[str] = None
    company_name: Optional[str] = None
    operations_start_date: Optional[str] = None
    content: Optional[str] = None
    parsed_details: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    # ---------------------------------------------------------------------
    # Converters
    # ---------------------------------------------------------------------
    @classmethod
    def from_entry(cls, entry: Entry, slug: str) -> "EntryDB":
        """Create a DB row from an in-memory entry."""
        return cls(
            slug=slug,
            identifier=entry.identifier,
            text=entry.text,
            date=entry.date,
            company_name=entry.company_name,
            operations_start_date=entry.operations_start_date,
            content=entry.content,
            parsed_details=dict(entry.parsed_details),
        )

    def to_entry(self) -> Entry:
        """Convert the DB row back into a plain Entry."""
        return Entry(
            text=self.text or "",
            identifier=self.identifier,
            date=self.date,
            parsed_details=dict(self.parsed_details or {}),
            company_name=self.company_name,
            operations_start_date=self.operations_start_date,
            content=self.content,
        )


# ---------------------------------------------------------------------------
# Convenience CRUD helpers
# ---------------------------------------------------------------------------
def insert_entry(s: Session, entry: Entry, slug: str) -> None:
    """
    Store an entry row under *slug*.

    An entry with an identifier already stored under the same slug replaces
    the earlier row.
    """
    if entry.identifier:
        stale = s.exec(
            select(EntryDB).where(EntryDB.slug == slug, EntryDB.identifier == entry.identifier)
        ).all()
        for row in stale:
            s.delete(row)
    s.add(EntryDB.from_entry(entry, slug))
    s.commit()


def entries_for(s: Session, slug: str) -> List[Entry]:
    """Every entry filed under *slug*, oldest row first."""
    rows = s.exec(select(EntryDB).where(EntryDB.slug == slug).order_by(EntryDB.id)).all()
    return [row.to_entry() for row in rows]


def all_slugs(s: Session) -> List[str]:
    """Distinct slugs in insertion order."""
    rows = s.exec(select(EntryDB.slug).order_by(EntryDB.id)).all()
    return list(dict.fromkeys(rows))


def clear_entries(s: Session) -> None:
    for row in s.exec(select(EntryDB)).all():
        s.delete(row)
    s.commit()


# ---------------------------------------------------------------------------
# Utility: create tables
# ---------------------------------------------------------------------------
def create_all(bind: Optional[Engine] = None) -> None:
    """Create all tables for imported SQLModel subclasses, including EntryDB."""
    SQLModel.metadata.create_all(bind or engine)


# ---------------------------------------------------------------------------
# Lightweight CLI
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    """
    Quick bootstrap helper.

    Examples
    --------
    $ python -m borme.db --create        # first-time table creation
    $ python -m borme.db --drop          # empty the entry store
    """
    import argparse
    import textwrap

    parser = argparse.ArgumentParser(
        prog="python -m borme.db",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            BORME entry store utilities
            ---------------------------
            --create   Create all SQLModel tables (safe if they already exist)
            --drop     Delete every stored entry
            """
        ),
    )
    parser.add_argument("--create", action="store_true", help="create tables")
    parser.add_argument("--drop", action="store_true", help="delete every stored entry")
    args = parser.parse_args()

    if args.create:
        create_all()
        print(f"✅ entry store initialised at {settings.db_url}")

    if args.drop:
        with SessionLocal() as session:
            clear_entries(session)
        print("✅ entry store emptied")

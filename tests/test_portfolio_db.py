"""
tests/test_portfolio_db.py
==========================

Integration-style tests for the SQLite-backed company ledger.

These tests mirror `test_portfolio.py` but use DBCompanyLedger on an
in-memory engine to ensure persistence and API parity with the in-memory
version.
"""

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from borme.db import create_all, entries_for
from borme.models import CompanyStatus
from borme.portfolio_db import DBCompanyLedger

ACME_CONSTITUTION = {
    "identifier": "A-1",
    "date": "2020-01-10",
    "full_entry": "1 - ACME SL. Constitución. Comienzo de operaciones: 1.06.97. "
                  "Nombramientos. Adm. Unico: ANA RUIZ PEREZ.",
    "parsed_details": {"cif": "B12345678"},
}
ACME_DISSOLUTION = {
    "identifier": "A-2",
    "date": "2022-05-01",
    "full_entry": "2 - ACME SL. Disolución. Voluntaria. Ceses/Dimisiones. Adm. Unico: ANA RUIZ PEREZ. "
                  "Nombramientos. Liquidador: CARLOS RUIZ SOTO.",
}


# ---------------------------------------------------------------------------
# Fixtures: a fresh in-memory schema per test
# ---------------------------------------------------------------------------
@pytest.fixture
def engine():
    eng = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    create_all(eng)
    return eng


@pytest.fixture
def ledger(engine):
    with DBCompanyLedger(Session(engine)) as led:
        yield led


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------
def test_add_and_find_by_status(ledger, explora_entry):
    ledger.add(ACME_CONSTITUTION)
    ledger.add(ACME_DISSOLUTION)
    ledger.add(explora_entry)

    dissolved = ledger.find_by_status(CompanyStatus.DISSOLVED_VOLUNTARY)
    assert [r.company_name for r in dissolved] == ["ACME SL"]
    assert len(ledger) == 2
    assert ledger.slugs() == ["acme-sl", "explora-consulting-sl"]


def test_persistence_across_sessions(engine):
    # write in first session
    with DBCompanyLedger(Session(engine)) as led:
        slug = led.add(ACME_CONSTITUTION)

    # read in a brand-new session
    with DBCompanyLedger(Session(engine)) as led2:
        fetched = led2.get(slug)
        assert "acme-sl" in led2

    assert fetched.company_name == "ACME SL"
    assert fetched.cif == "B12345678"
    assert fetched.status is CompanyStatus.ACTIVE


def test_officers_resolved_over_stored_entries(ledger):
    ledger.extend([ACME_DISSOLUTION, ACME_CONSTITUTION])
    resolution = ledger.officers("acme-sl")
    assert [o.canonical_name for o in resolution.current_officers] == ["CARLOS RUIZ SOTO"]
    assert [o.canonical_name for o in resolution.past_officers] == ["ANA RUIZ PEREZ"]


def test_same_identifier_replaces_row(engine, ledger):
    ledger.add(ACME_CONSTITUTION)
    ledger.add(ACME_CONSTITUTION)
    with Session(engine) as s:
        assert len(entries_for(s, "acme-sl")) == 1


def test_missing_slug_and_clear(ledger):
    with pytest.raises(KeyError):
        ledger.get("missing-sl")
    assert "missing-sl" not in ledger
    ledger.add(ACME_CONSTITUTION)
    ledger.clear()
    assert len(ledger) == 0

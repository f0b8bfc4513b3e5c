"""
tests/test_portfolio.py
=======================

Unit tests for borme.portfolio.CompanyLedger
"""

import pytest

from borme.models import CompanyStatus
from borme.parser import parse_company
from borme.portfolio import CompanyLedger, merge_records, slugify

ACME_CONSTITUTION = {
    "identifier": "A-1",
    "date": "2020-01-10",
    "full_entry": "1 - ACME SL. Constitución. Comienzo de operaciones: 1.06.97. "
                  "Nombramientos. Adm. Unico: ANA RUIZ PEREZ.",
}
ACME_DISSOLUTION = {
    "identifier": "A-2",
    "date": "2022-05-01",
    "full_entry": "2 - ACME SL. Disolución. Voluntaria. Ceses/Dimisiones. Adm. Unico: ANA RUIZ PEREZ. "
                  "Nombramientos. Liquidador: CARLOS RUIZ SOTO.",
}


def _demo_ledger(explora_entry):
    ledger = CompanyLedger()
    ledger.add(ACME_CONSTITUTION)
    ledger.add(ACME_DISSOLUTION)
    ledger.add(explora_entry)
    return ledger


def test_slugify():
    assert slugify("  Explora   Consulting SL ") == "explora-consulting-sl"
    assert slugify(None) == ""


def test_add_and_get_by_slug():
    ledger = CompanyLedger()
    assert ledger.add(ACME_CONSTITUTION) == "acme-sl"
    assert "acme-sl" in ledger
    record = ledger.get("acme-sl")
    assert record.company_name == "ACME SL"
    assert record.constitution_date == "1997-06-01"
    with pytest.raises(KeyError):
        ledger.get("missing-sl")


def test_entries_of_one_company_are_aggregated(explora_entry):
    ledger = _demo_ledger(explora_entry)
    record = ledger.get("acme-sl")
    assert record.status is CompanyStatus.DISSOLVED_VOLUNTARY
    assert record.parsing_method == "aggregated"
    assert record.identifier == "A-2"
    assert record.constitution_date == "1997-06-01"
    assert record.officers.total() == 3
    assert len(ledger.records("acme-sl")) == 2


def test_officers_across_entries(explora_entry):
    ledger = _demo_ledger(explora_entry)
    resolution = ledger.officers("acme-sl")
    assert [o.canonical_name for o in resolution.current_officers] == ["CARLOS RUIZ SOTO"]
    assert [o.canonical_name for o in resolution.past_officers] == ["ANA RUIZ PEREZ"]


def test_find_by_status(explora_entry):
    ledger = _demo_ledger(explora_entry)
    active = ledger.find_by_status(CompanyStatus.ACTIVE)
    assert [r.company_name for r in active] == ["EXPLORA CONSULTING SL"]
    assert ledger.find_by_status(CompanyStatus.BANKRUPT) == []


def test_len_iter_and_clear(explora_entry):
    ledger = _demo_ledger(explora_entry)
    assert len(ledger) == 2
    assert {r.company_name for r in ledger} == {"ACME SL", "EXPLORA CONSULTING SL"}
    assert ledger.slugs() == ["acme-sl", "explora-consulting-sl"]
    ledger.clear()
    assert len(ledger) == 0


def test_add_accepts_parsed_records_and_nameless_entries():
    ledger = CompanyLedger()
    assert ledger.add(parse_company(ACME_CONSTITUTION)) == "acme-sl"
    assert ledger.add("Nombramientos. Gerente: LUIS MARTIN SANZ.") == "unknown"


def test_merge_records_later_values_win():
    older = parse_company(ACME_CONSTITUTION)
    newer = parse_company(ACME_DISSOLUTION)
    merged = merge_records([newer, older])
    assert merged.identifier == "A-2"
    assert merge_records([]).company_name is None

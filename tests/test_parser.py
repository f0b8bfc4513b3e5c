"""
tests/test_parser.py
====================

Unit tests for the entry pipeline in borme.parser
"""

import pytest

from borme.models import CompanyStatus, Entry, OfficerCategory
from borme.parser import (
    clean_field_value,
    extract_company_name,
    normalize_officer_input,
    officer_summary,
    parse_companies,
    parse_company,
    parse_entry,
)


@pytest.mark.parametrize("raw", [None, "", {}, [], 42, {"full_entry": ""}])
def test_malformed_input_returns_empty_record(raw):
    record = parse_company(raw)
    assert record.officers.total() == 0
    assert record.corporate_events == []
    assert record.status is CompanyStatus.UNKNOWN
    assert record.parsing_method == "empty"


def test_parse_entry_degenerate():
    result = parse_entry(None)
    assert result.officers.total() == 0
    assert result.categories == []


def test_full_entry(explora_entry):
    record = parse_company({"full_entry": explora_entry, "identifier": "BORME-A-2025-165-28"})
    assert record.company_name == "EXPLORA CONSULTING SL"
    assert record.parsing_method == "enhanced"
    assert record.registry_data.startswith("T 1234 , F 56, S 8, H M 200035, I/A 3 (29.08.25)")
    assert record.categories == ["Ceses/Dimisiones", "Nombramientos", "Datos registrales"]

    [ceased] = record.officers.ceses_dimisiones
    assert (ceased.person_name, ceased.position) == ("JUAN PEREZ GARCIA", "Administrador Solidario")
    [appointed] = record.officers.nombramientos
    assert appointed.position == "Administrador Único"
    # stamped from the registry stamp, the header and the identifier
    assert appointed.date == "2025-08-29"
    assert appointed.company_name == "EXPLORA CONSULTING SL"
    assert appointed.source_entry_id == "BORME-A-2025-165-28"
    assert record.status is CompanyStatus.ACTIVE


def test_publication_date_wins_over_text_dates(explora_entry):
    record = parse_company({"full_entry": explora_entry, "indexed_date": "2025-09-01T08:00:00"})
    assert {e.date for e in record.officers} == {"2025-09-01"}
    assert {e.date for e in record.corporate_events} == {"2025-09-01"}


def test_parsing_is_idempotent(explora_entry, vocab):
    first = parse_company(explora_entry, vocab)
    second = parse_company(explora_entry, vocab)
    assert first == second
    assert parse_entry(explora_entry, vocab) == parse_entry(explora_entry, vocab)


def test_constitution_entry(constitution_entry):
    record = parse_company(constitution_entry)
    assert record.company_name == "NUEVA SL"
    assert record.constitution_date == "1997-06-01"
    assert record.address == "C/ Mayor 12, Madrid"
    assert record.capital == "3.000,00 Euros"
    assert record.activity == "Venta de libros"
    assert [e.person_name for e in record.officers] == ["ANA RUIZ PEREZ"]
    assert "Cambio de domicilio social" not in [e.type for e in record.corporate_events]


def test_dissolution_entry(dissolution_entry):
    record = parse_company(dissolution_entry)
    assert record.company_name == "ACME SL"
    assert record.status is CompanyStatus.DISSOLVED_VOLUNTARY
    assert record.to_dict()["status_label"] == "Disuelta (Voluntaria)"


def test_domicile_change_sets_address():
    text = "5 - BETA SA. Cambio de domicilio social. CALLE ALCALA 20 (MADRID). Datos registrales."
    record = parse_company(text)
    assert record.address == "CALLE ALCALA 20 (MADRID)"
    assert "Cambio de domicilio social" in [e.type for e in record.corporate_events]


def test_company_name_sources():
    header = Entry(text="127261 - EXPLORA CONSULTING SL(2007).\nNombramientos.")
    assert extract_company_name(header) == "EXPLORA CONSULTING SL"

    truncated = Entry(text="9 - SMITH & JONES SL. Nombramientos.", company_name="SMITH &")
    assert extract_company_name(truncated) == "SMITH & JONES SL"

    hinted = Entry(text="Nombramientos.", company_name="HINT SL")
    assert extract_company_name(hinted) == "HINT SL"

    details = Entry(text="Nombramientos.", parsed_details={"company_name": ": DETAIL SL"})
    assert extract_company_name(details) == "DETAIL SL"


def test_search_result_shape():
    raw = {
        "id": "X-1",
        "name": "Empresa Española",
        "highlights": {"company_name": "<em>GAMMA</em> SL"},
        "full_entry": "Nombramientos. Apoderado: LUIS MARTIN SANZ.",
        "indexed_date": "2024-01-02",
    }
    record = parse_company(raw)
    assert record.company_name == "GAMMA SL"
    assert record.identifier == "X-1"
    [event] = record.officers.nombramientos
    assert event.company_name == "GAMMA SL"
    assert event.date == "2024-01-02"


def test_parsed_details_fill_gaps_only():
    raw = {
        "full_entry": "3 - DELTA SL. Constitución. Domicilio: C/ Luna 1, Soria. Capital: 3.000,00 Euros.",
        "parsed_details": {
            "cif": ": B12345678",
            "domicilio": "C/ Otra 9, Burgos",
            "activity": "Consultoría",
            "nombramientos": [{"name": "ANA RUIZ PEREZ", "position": "Administrador Único"}],
        },
    }
    record = parse_company(raw)
    assert record.cif == "B12345678"
    assert record.address == "C/ Luna 1, Soria"
    assert record.activity == "Consultoría"
    assert record.parsing_method == "parsed_details"
    [event] = record.officers.nombramientos
    assert event.person_name == "ANA RUIZ PEREZ"
    assert event.company_name == "DELTA SL"


def test_administrators_strings_from_details():
    record = parse_company({"name": "OMEGA SL", "parsed_details": {"administrators": ["LUIS  MARTIN SANZ"]}})
    [event] = record.officers.nombramientos
    assert (event.person_name, event.position) == ("LUIS MARTIN SANZ", "Administrador")


def test_content_fallback():
    record = parse_company({"name": "SIGMA SL", "content": "Nombramientos. Gerente: LUIS MARTIN SANZ."})
    assert record.parsing_method == "fallback"
    assert [e.position for e in record.officers] == ["Gerente"]


def test_operations_start_date_fallback():
    record = parse_company({"full_entry": "2 - TAU SL. Nombramientos.", "operations_start_date": "1.6.97"})
    assert record.constitution_date == "1997-06-01"


def test_clean_field_value():
    assert clean_field_value(": 3.000,00 Euros.") == "3.000,00 Euros."
    assert clean_field_value(None) is None


def test_normalize_officer_input_and_summary():
    flat = [
        {"name": "ANA RUIZ PEREZ", "position": "Gerente", "date": "2020-01-01"},
        {"name": "LUIS MARTIN SANZ", "position": "Apoderado", "status": "ceased"},
    ]
    book = normalize_officer_input(flat)
    assert [e.person_name for e in book.nombramientos] == ["ANA RUIZ PEREZ"]
    assert [e.person_name for e in book.ceses_dimisiones] == ["LUIS MARTIN SANZ"]

    keyed = normalize_officer_input({"reelecciones": [{"name": "ANA RUIZ PEREZ", "position": "Gerente"}]})
    assert keyed.reelecciones[0].category is OfficerCategory.REELECTION

    summary = officer_summary(flat)
    assert summary["total"] == 2
    assert summary["has_changes"] is True
    assert summary["cessations_count"] == 1
    assert normalize_officer_input("junk").total() == 0


def test_parse_companies_batch(explora_entry, dissolution_entry):
    records = parse_companies([explora_entry, None, dissolution_entry])
    assert [r.company_name for r in records] == ["EXPLORA CONSULTING SL", None, "ACME SL"]

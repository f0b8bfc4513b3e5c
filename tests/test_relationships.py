"""
tests/test_relationships.py
===========================

Unit tests for borme.relationships.RelationshipGraph
"""

import pytest

from borme.parser import parse_company
from borme.relationships import RelationshipGraph

ACME = (
    "1 - ACME SL. Nombramientos. Adm. Unico: GOSLIN COX BRUCE RIDGWAY. "
    "Ceses/Dimisiones. Apoderado: ANA RUIZ PEREZ."
)
BETA = "2 - BETA SA. Nombramientos. Consejero: GOSLIN BRUCE RIDGWAY."


@pytest.fixture
def graph():
    rg = RelationshipGraph()
    rg.add_company(parse_company(ACME))
    rg.add_company(parse_company(BETA))
    return rg


def test_name_variants_share_one_node(graph):
    assert graph.companies_of("GOSLIN BRUCE RIDGWAY") == ["acme-sl", "beta-sa"]
    assert graph.companies_of("goslin cox bruce ridgway") == ["acme-sl", "beta-sa"]
    assert graph.companies_of("NOBODY") == []


def test_officers_of(graph):
    assert set(graph.officers_of("acme-sl")) == {"GOSLIN COX BRUCE RIDGWAY", "ANA RUIZ PEREZ"}
    assert graph.officers_of("acme-sl", active_only=True) == ["GOSLIN COX BRUCE RIDGWAY"]
    assert graph.officers_of("missing-sl") == []


def test_shared_officers(graph):
    [item] = graph.shared_officers("acme-sl", "beta-sa")
    assert item["type"] == "shared_officer"
    assert item["officer"] == "GOSLIN COX BRUCE RIDGWAY"
    assert item["positions"] == [
        {"company": "acme-sl", "positions": ["Administrador Único"], "status": "active"},
        {"company": "beta-sa", "positions": ["Consejero"], "status": "active"},
    ]
    assert graph.shared_officers("acme-sl", "missing-sl") == []
    assert len(graph.shared_officer_links()) == 1


def test_readding_a_company_replaces_its_edges(graph):
    graph.add_company(parse_company("1 - ACME SL. Disolución. Voluntaria."))
    assert graph.officers_of("acme-sl") == []
    assert graph.g.nodes["acme-sl"]["status"] == "dissolved_voluntary"
    assert graph.shared_officer_links() == []


def test_to_json(graph):
    data = graph.to_json()
    by_id = {n["id"]: n for n in data["nodes"]}
    assert by_id["acme-sl"]["type"] == "company"
    assert by_id["GOSLIN COX BRUCE RIDGWAY"]["type"] == "person"
    assert len(data["links"]) == 3
    graph.clear()
    assert graph.to_json() == {"nodes": [], "links": []}

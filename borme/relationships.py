"""
borme.relationships
===================

Person → company officer graph built on NetworkX.

Company nodes are keyed by slug, person nodes by normalized name.  A person
already in the graph is reused when a new name variant matches them
(``GOSLIN COX BRUCE RIDGWAY`` and ``GOSLIN BRUCE RIDGWAY`` are one node).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import networkx as nx

from .identity import names_similar, normalize_name
from .models import CompanyRecord, OfficerResolution
from .portfolio import slugify
from .temporal import resolve_officers

logger = logging.getLogger(__name__)

COMPANY = "company"
PERSON = "person"


class RelationshipGraph:
    """
    Lightweight wrapper around a DiGraph whose edges carry officer positions.

    Example
    -------
    >>> from borme.parser import parse_company
    >>> rg = RelationshipGraph()
    >>> rg.add_company(parse_company("1 - ACME SL. Nombramientos. Adm. Unico: JUAN PEREZ GARCIA."))
    'acme-sl'
    >>> rg.companies_of("JUAN PEREZ GARCIA")
    ['acme-sl']
    """

    def __init__(self) -> None:
        self.g = nx.DiGraph()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _people(self) -> List[str]:
        return [n for n, kind in self.g.nodes(data="kind") if kind == PERSON]

    def _person_node(self, name: str) -> Optional[str]:
        key = normalize_name(name)
        if key in self.g and self.g.nodes[key].get("kind") == PERSON:
            return key
        for node in self._people():
            if names_similar(key, node):
                return node
        return None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def add_company(self, record: CompanyRecord, resolution: Optional[OfficerResolution] = None) -> str:
        """
        Add a company and its officers; return the company slug.

        *resolution* defaults to resolving the record's own officer events.
        Adding the same company again replaces its officer edges.
        """
        slug = slugify(record.company_name or record.identifier or "unknown")
        resolution = resolution if resolution is not None else resolve_officers(record.officers)

        if slug in self.g:
            self.g.remove_edges_from(list(self.g.in_edges(slug)))
        self.g.add_node(
            slug,
            kind=COMPANY,
            name=record.company_name or slug,
            status=record.status.value,
            status_label=record.status.label,
        )

        for officer in resolution.all_officers:
            person = self._person_node(officer.canonical_name)
            if person is None:
                person = normalize_name(officer.canonical_name)
                self.g.add_node(person, kind=PERSON, name=officer.canonical_name)
            self.g.add_edge(
                person,
                slug,
                active=officer.is_active,
                positions=[p.position for p in officer.current_positions],
                history=sorted({e.position for e in officer.history}),
            )
        logger.debug(f"Graph: {slug} with {len(resolution.all_officers)} officers")
        return slug

    def companies_of(self, person: str) -> List[str]:
        """Slugs of every company *person* has been an officer of."""
        node = self._person_node(person)
        return list(self.g.successors(node)) if node else []

    def officers_of(self, slug: str, active_only: bool = False) -> List[str]:
        """Display names of the officers of company *slug*."""
        if slug not in self.g:
            return []
        return [
            self.g.nodes[p]["name"]
            for p, _, data in self.g.in_edges(slug, data=True)
            if data["active"] or not active_only
        ]

    def shared_officers(self, a: str, b: str) -> List[Dict[str, Any]]:
        """
        People linked to both companies *a* and *b*.

        Each item lists the officer, both companies and the positions held in
        each of them.
        """
        if a not in self.g or b not in self.g:
            return []
        common = set(self.g.predecessors(a)) & set(self.g.predecessors(b))
        return [self._shared_item(p, [a, b]) for p in sorted(common)]

    def shared_officer_links(self) -> List[Dict[str, Any]]:
        """Every person linked to more than one company."""
        return [
            self._shared_item(p, list(self.g.successors(p)))
            for p in self._people()
            if self.g.out_degree(p) > 1
        ]

    def _shared_item(self, person: str, companies: List[str]) -> Dict[str, Any]:
        return {
            "type": "shared_officer",
            "officer": self.g.nodes[person]["name"],
            "companies": companies,
            "positions": [
                {
                    "company": c,
                    "positions": self.g.edges[person, c]["history"],
                    "status": "active" if self.g.edges[person, c]["active"] else "inactive",
                }
                for c in companies
            ],
        }

    def clear(self) -> None:
        self.g.clear()

    def to_json(self) -> Dict[str, Any]:
        """
        Convert the graph to JSON format for visualization.
        Returns a dict with nodes and links arrays.
        """
        nodes = [
            {
                "id": node,
                "name": data.get("name", node),
                "type": data.get("kind", COMPANY),
                "status": data.get("status"),
            }
            for node, data in self.g.nodes(data=True)
        ]
        links = [
            {
                "source": source,
                "target": target,
                "active": data.get("active", False),
                "positions": data.get("positions", []),
            }
            for source, target, data in self.g.edges(data=True)
        ]
        return {"nodes": nodes, "links": links}

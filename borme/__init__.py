"""
BORME
=====

An extraction engine for the Spanish commercial-registry bulletin
(*Boletín Oficial del Registro Mercantil*).  It turns free-text bulletin
entries into structured company records and works out, from the order of
appointments and cessations across many entries, who currently holds each
office.

Import structure
----------------
`import borme` is intentionally cheap: only the stdlib-based extraction
sub‑modules are imported by default.  Heavy dependencies such as
*networkx* and *sqlmodel* are only imported when you explicitly access
:pymod:`borme.relationships` or :pymod:`borme.db`.

Sub‑modules
~~~~~~~~~~~
- :pymod:`borme.models`          – dataclasses + enums for entries, officer events and company records
- :pymod:`borme.vocabulary`      – immutable officer-position / category table
- :pymod:`borme.guard`           – period protection for abbreviations, dates, registry codes and decimals
- :pymod:`borme.segmenter`       – entry → ordered sections
- :pymod:`borme.classifier`      – exact / fuzzy category matching and category groups
- :pymod:`borme.positions`       – position-string resolution cascade
- :pymod:`borme.names`           – officer-name cleaning and validity filters
- :pymod:`borme.officers`        – officer extraction strategy chain
- :pymod:`borme.identity`        – name normalization and variant grouping
- :pymod:`borme.dates`           – bulletin date formats → ISO dates
- :pymod:`borme.settings`        – pydantic-settings configuration (``BORME_`` env prefix)
- :pymod:`borme.temporal`        – current / past officer resolution
- :pymod:`borme.events`          – corporate events and derived company status
- :pymod:`borme.parser`          – entry → ``CompanyRecord`` pipeline
- :pymod:`borme.query`           – search-string classifiers
- :pymod:`borme.portfolio`       – ``CompanyLedger`` in‑memory aggregation
- :pymod:`borme.relationships`   – company ↔ officer graph (NetworkX)
- :pymod:`borme.db`              – SQLModel entry store
- :pymod:`borme.portfolio_db`    – ``DBCompanyLedger`` with the same surface, backed by SQLite
- :pymod:`borme.cli`             – ``parse`` / ``resolve`` command-line entry point

Quick start
-----------
>>> from borme.parser import parse_company
>>> rec = parse_company({"full_entry": "1 - ACME SL. Nombramientos. Adm. Unico: JUAN PEREZ GARCIA."})
>>> rec.company_name
'ACME SL'
>>> [e.position for e in rec.officers.nombramientos]
['Administrador Único']

"""

__all__ = [
    "models",
    "vocabulary",
    "guard",
    "segmenter",
    "classifier",
    "positions",
    "names",
    "officers",
    "identity",
    "dates",
    "settings",
    "temporal",
    "events",
    "parser",
    "query",
    "portfolio",
    "relationships",
    "db",
    "portfolio_db",
    "cli",
]

__version__ = "0.1.0"

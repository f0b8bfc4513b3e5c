"""
api.deps
========

FastAPI dependency providers.

`get_ledger` returns a **DBCompanyLedger** so every request talks to the
persistent SQLite store; tests override it with the in-memory
CompanyLedger through ``app.dependency_overrides``.
"""

from functools import lru_cache

from borme.db import create_all
from borme.portfolio_db import DBCompanyLedger
from borme.relationships import RelationshipGraph
from borme.vocabulary import Vocabulary, default_vocabulary


@lru_cache
def get_ledger() -> DBCompanyLedger:
    """Singleton DB-backed company ledger (persists across requests)."""
    create_all()
    return DBCompanyLedger()


@lru_cache
def get_relationships() -> RelationshipGraph:
    """Singleton relationship graph (persists across requests)."""
    return RelationshipGraph()


def get_vocabulary() -> Vocabulary:
    """The shared, cached vocabulary."""
    return default_vocabulary()

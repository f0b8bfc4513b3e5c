import logging
from typing import Any, Dict, List, Optional, Union

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from borme.identity import names_similar, normalize_name
from borme.models import CompanyStatus
from borme.parser import normalize_officer_input, parse_company
from borme.portfolio import slugify
from borme.portfolio_db import DBCompanyLedger
from borme.query import (
    QueryType,
    company_in_officer_query,
    company_pair,
    interpret_query,
    is_simple_company_name,
)
from borme.relationships import RelationshipGraph
from borme.settings import API_DEBUG, settings
from borme.temporal import resolve_officers
from borme.vocabulary import Vocabulary

from .deps import get_ledger, get_relationships, get_vocabulary

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(
    title="BORME Extraction API",
    version="0.1.0",
    description="HTTP layer over the BORME entry parser, company ledger and officer resolver.",
    debug=API_DEBUG,
)

# --- CORS ----------------------------------------------------------
# Dev-only origins for the dashboard.
origins = [
    "http://localhost:5173",    # Vite dev server default port
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)


# ---------- request bodies ----------
class EntryIn(BaseModel):
    """A raw bulletin entry as the search service returns it."""
    full_entry: str = ""
    identifier: Optional[str] = None
    date: Optional[str] = None
    company_name: Optional[str] = None
    operations_start_date: Optional[str] = None
    content: Optional[str] = None
    parsed_details: Dict[str, Any] = Field(default_factory=dict)


class ResolveIn(BaseModel):
    """Flat officer records, or a mapping keyed by the four officer categories."""
    officers: Union[List[Dict[str, Any]], Dict[str, Any]] = Field(default_factory=list)
    by_company: bool = False


class CompanySummary(BaseModel):
    slug: str
    name: Optional[str]
    status: str
    status_label: str


# ---------- health-check ----------
@app.get("/")
def root():
    return {"status": "ok", "msg": "BORME API is alive"}


# ---------- POST /parse ----------
@app.post("/parse")
def parse(entry: EntryIn, vocab: Vocabulary = Depends(get_vocabulary)):
    """Parse one entry without storing it."""
    record = parse_company(entry.model_dump(), vocab)
    payload = record.to_dict()
    payload["officer_resolution"] = resolve_officers(record.officers).to_dict()
    return payload


# ---------- POST /entries ----------
@app.post("/entries", status_code=201)
def add_entry(
    entry: EntryIn,
    ledger: DBCompanyLedger = Depends(get_ledger),
    rg: RelationshipGraph = Depends(get_relationships),
):
    """File an entry under its company and refresh the company in the officer graph."""
    slug = ledger.add(entry.model_dump())
    rg.add_company(ledger.get(slug), ledger.officers(slug))
    return {"slug": slug}


# ---------- GET /companies ----------
@app.get("/companies", response_model=list[CompanySummary])
def list_companies(ledger: DBCompanyLedger = Depends(get_ledger)):
    summaries = []
    for slug in ledger.slugs():
        record = ledger.get(slug)
        summaries.append(
            CompanySummary(
                slug=slug,
                name=record.company_name,
                status=record.status.value,
                status_label=record.status.label,
            )
        )
    return summaries


# ---------- GET /companies/{slug} ----------
@app.get("/companies/{slug}")
def get_company(slug: str, ledger: DBCompanyLedger = Depends(get_ledger)):
    """
    Return the aggregated record of a company.

    The *slug* is the lower-cased name with spaces replaced by "-", exactly
    what POST /entries returns. 404 if no entry was filed under it.
    """
    try:
        return ledger.get(slug).to_dict()
    except KeyError:
        raise HTTPException(status_code=404, detail="Company not found")


# ---------- GET /companies/{slug}/officers ----------
@app.get("/companies/{slug}/officers")
def company_officers(slug: str, ledger: DBCompanyLedger = Depends(get_ledger)):
    try:
        return ledger.officers(slug).to_dict()
    except KeyError:
        raise HTTPException(status_code=404, detail="Company not found")


# ---------- GET /status ----------
@app.get("/status")
def status_snapshot(ledger: DBCompanyLedger = Depends(get_ledger)):
    counts: dict[str, int] = {}
    for record in ledger:
        counts[record.status.value] = counts.get(record.status.value, 0) + 1
    # ensure zeroes appear
    for s in CompanyStatus:
        counts.setdefault(s.value, 0)
    return counts


# ---------- POST /officers/resolve ----------
@app.post("/officers/resolve")
def resolve(body: ResolveIn):
    """Resolve current officers from officer records supplied by a search result."""
    events = normalize_officer_input(body.officers).events()
    return resolve_officers(events, by_company=body.by_company).to_dict()


# ---------- GET /names/similar ----------
@app.get("/names/similar")
def similar_names(
    a: str = Query(..., min_length=1, description="First name"),
    b: str = Query(..., min_length=1, description="Second name"),
):
    return {
        "a": normalize_name(a),
        "b": normalize_name(b),
        "similar": names_similar(a, b),
    }


# ---------- GET /query/interpret ----------
@app.get("/query/interpret")
def interpret(q: str = Query(..., min_length=1, description="Free-text search query")):
    kind, confidence = interpret_query(q)
    return {
        "query": q,
        "type": kind.value,
        "confidence": confidence,
        "simple_company_name": is_simple_company_name(q),
    }


# ---------- GET /search ----------
@app.get("/search")
def search(
    q: str = Query(..., min_length=1, description="Free-text search query"),
    ledger: DBCompanyLedger = Depends(get_ledger),
    rg: RelationshipGraph = Depends(get_relationships),
):
    """
    Route a free-text query by its interpreted type.

    Relationship queries list the officers shared by the two named companies,
    officer queries resolve the officers of the named company, person queries
    list the companies of that person and company queries return the record.
    Anything else is a substring match on company slugs.
    """
    kind, confidence = interpret_query(q)
    known = ledger.slugs()
    results: Any = []

    if kind is QueryType.RELATIONSHIP:
        pair = company_pair(q)
        if pair:
            results = rg.shared_officers(slugify(pair[0]), slugify(pair[1]))
    elif kind is QueryType.OFFICER:
        slug = slugify(company_in_officer_query(q))
        if slug in known:
            results = ledger.officers(slug).to_dict()
    elif kind is QueryType.PERSON:
        results = rg.companies_of(q)
    elif kind is QueryType.COMPANY and slugify(q) in known:
        results = ledger.get(slugify(q)).to_dict()
    else:
        needle = slugify(q)
        results = [slug for slug in known if needle in slug]

    logger.info(f"Search {q!r} routed as {kind.value}")
    return {"query": q, "type": kind.value, "confidence": confidence, "results": results}


# ---------- GET /graph ----------
@app.get("/graph")
def graph(rg: RelationshipGraph = Depends(get_relationships)):
    """Officer graph for visualization: company and person nodes, officer links."""
    return rg.to_json()


# ---------- GET /graph/shared ----------
@app.get("/graph/shared")
def shared(
    a: Optional[str] = Query(None, description="First company slug"),
    b: Optional[str] = Query(None, description="Second company slug"),
    rg: RelationshipGraph = Depends(get_relationships),
):
    """People linked to both companies, or to any two companies when no pair is given."""
    if a and b:
        return rg.shared_officers(a, b)
    return rg.shared_officer_links()

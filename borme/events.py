"""
borme.events
============

Corporate events (constitution, dissolution, capital changes, ...) found in an
entry, the company status they imply, and the attribute values that travel
with them: constitution details, new addresses and new names.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .classifier import mentions_category
from .dates import extract_entry_date, format_spanish_date
from .models import (
    CompanyStatus,
    ConstitutionDetails,
    CorporateEvent,
    DissolutionType,
    NameChange,
)
from .settings import settings
from .vocabulary import Vocabulary, group_of

logger = logging.getLogger(__name__)

AMOUNT = r"\d[\d.,]*(?:\s*(?:Euros?|€|EUR))?"
STREET_RE = re.compile(r"C/|CALLE|AVENIDA|PLAZA|PASEO|CARRETERA|AVDA|PZA", re.IGNORECASE)

# ---------------------------------------------------------------------------
# Constitution details
# ---------------------------------------------------------------------------
OPERATIONS_START_RE = re.compile(r"Comienzo de operaciones\s*:\s*(\d{1,2}\.\d{1,2}\.\d{2,4})")
DOMICILE_RE = re.compile(
    r"Domicilio:\s*(.*?)"
    r"(?=\s*\.?\s*(?:Capital:|Objeto social:|Comienzo de operaciones|Datos registrales)|$)",
    re.IGNORECASE | re.DOTALL,
)
CAPITAL_RES = (
    re.compile(
        r"Capital:\s*([\d.,]+\s*Euros?)(?=\s*\.?\s*(?:Nombramientos|Declaración|Resultante|\.|$))",
        re.IGNORECASE,
    ),
    re.compile(r"Capital:\s*([\d.,]+)\s*Euros?", re.IGNORECASE),
    re.compile(r"Capital:\s*(\d[\d.,]*)", re.IGNORECASE),
)
SUBSCRIBED_RE = re.compile(r"Resultante Suscrito:\s*([\d.,]+\s*Euros?)", re.IGNORECASE)
ACTIVITY_RE = re.compile(
    r"Objeto social:\s*(.*?)(?=\s*\.?\s*(?:Domicilio:|Capital:|Nombramientos|Declaración|\.|$))",
    re.IGNORECASE | re.DOTALL,
)
CNAE_RES = (
    re.compile(r"CNAE:\s*(\d+)", re.IGNORECASE),
    re.compile(r"CNAE ACTIVIDAD PRINCIPAL ES EL\s*(\d+)", re.IGNORECASE),
)


def _capital(text: str) -> Optional[str]:
    for pattern in CAPITAL_RES:
        match = pattern.search(text)
        if match:
            capital = match.group(1).strip()
            if "euro" not in capital.lower():
                capital += " Euros"
            return capital
    return None


def parse_constitution_details(text: Optional[str]) -> ConstitutionDetails:
    """
    Read the detail lines of a constitution block.

    >>> parse_constitution_details("Domicilio: C/ Mayor 12, Madrid. Capital: 3.000,00 Euros").address
    'C/ Mayor 12, Madrid'
    """
    if not text:
        return ConstitutionDetails()

    def _first(pattern: "re.Pattern[str]") -> Optional[str]:
        match = pattern.search(text)
        return match.group(1).strip().rstrip(".").strip() if match else None

    start = _first(OPERATIONS_START_RE)
    cnae = None
    for pattern in CNAE_RES:
        cnae = _first(pattern)
        if cnae:
            break

    return ConstitutionDetails(
        constitution_date=format_spanish_date(start) if start else None,
        address=_first(DOMICILE_RE) or None,
        capital=_capital(text),
        total_capital=_first(SUBSCRIBED_RE),
        activity=_first(ACTIVITY_RE) or None,
        cnae_code=cnae,
    )


# ---------------------------------------------------------------------------
# Addresses
# ---------------------------------------------------------------------------
DOMICILE_CHANGE_RE = re.compile(r"Cambio de domicilio social\.?\s*([^.]+(?:\([^)]+\))?)", re.I)
ERRATUM_ADDRESS_RE = re.compile(
    r"siendo lo correcto\s+([^.]+?)(?:\.\s*Datos registrales|,\.\s*Datos|\.$)", re.IGNORECASE
)


def looks_like_address(text: Optional[str]) -> bool:
    return bool(text) and STREET_RE.search(text) is not None


def address_from_domicile_change(text: Optional[str]) -> Optional[str]:
    """New address printed right after ``Cambio de domicilio social``."""
    if not text:
        return None
    match = DOMICILE_CHANGE_RE.search(text)
    if match:
        address = match.group(1).strip()
        if looks_like_address(address):
            return address.rstrip(".")
    return None


def address_from_erratum(text: Optional[str]) -> Optional[str]:
    """Corrected address of a ``Fe de erratas`` entry about the domicile."""
    if not text or "Fe de erratas" not in text or "domicilio" not in text:
        return None
    match = ERRATUM_ADDRESS_RE.search(text)
    if match:
        address = match.group(1).strip().rstrip(",")
        if looks_like_address(address):
            return address
    return None


# ---------------------------------------------------------------------------
# Corporate events
# ---------------------------------------------------------------------------
DISSOLUTION_RE = re.compile(r"Disoluci[oó]n[.:\s]*", re.IGNORECASE)
NEW_ADDRESS_RE = re.compile(
    r"Cambio de domicilio social[.:\s]*([^.]*?(?:C/|CALLE|AVENIDA|PLAZA|PASEO)[^.]+)", re.I
)
NEW_NAME_RE = re.compile(
    r"(?i:Cambio de denominación social)[.:\s]*([A-ZÁÉÍÓÚÑÜ\s&\-.,\d]+(?:S\.?L\.?|S\.?A\.?))"
)
_TRAILING_FORM_PERIOD_RE = re.compile(r"\b(SL|SA|SLL|SLP|SLU)\.$")


def clean_company_name(name: str) -> str:
    """Trim a matched company name: ``"NUEVA EXPLORA SL. "`` → ``"NUEVA EXPLORA SL"``."""
    return _TRAILING_FORM_PERIOD_RE.sub(r"\1", name.strip())


def dissolution_type(text: str, window: Optional[int] = None) -> DissolutionType:
    """
    Subtype of the first ``Disolución`` mention.

    Only the *window* characters following the mention are read, so
    unrelated wording later in a long entry does not leak in.
    """
    match = DISSOLUTION_RE.search(text or "")
    if not match:
        return DissolutionType.UNKNOWN
    size = settings.dissolution_window if window is None else window
    context = text[match.end():match.end() + size].lower()
    if "voluntaria" in context:
        return DissolutionType.VOLUNTARY
    if "judicial" in context:
        return DissolutionType.JUDICIAL
    if "concursal" in context or "concurso" in context:
        return DissolutionType.BANKRUPTCY
    return DissolutionType.UNKNOWN


def _event_details(category: str, text: str) -> Dict[str, Any]:
    details: Dict[str, Any] = {}
    if category in ("Ampliación de capital", "Reducción de capital"):
        match = re.search(
            rf"{re.escape(category)}[.:\s]*(?:Capital\s*:\s*)?({AMOUNT})", text, re.IGNORECASE
        )
        if match:
            details["amount"] = match.group(1).strip()
        subscribed = SUBSCRIBED_RE.search(text)
        if subscribed:
            details["resulting_capital"] = subscribed.group(1).strip()
    elif category == "Capital":
        match = re.search(rf"Capital[.:\s]*({AMOUNT})", text, re.IGNORECASE)
        if match:
            details["amount"] = match.group(1).strip()
    elif category == "Cambio de domicilio social":
        match = NEW_ADDRESS_RE.search(text)
        if match:
            details["new_address"] = match.group(1).strip()
    elif category == "Cambio de denominación social":
        match = NEW_NAME_RE.search(text)
        if match:
            details["new_name"] = clean_company_name(match.group(1))
    elif category == "Constitución":
        start = OPERATIONS_START_RE.search(text)
        if start:
            details["constitution_date"] = format_spanish_date(start.group(1))
        capital = re.search(rf"Capital:\s*({AMOUNT})", text, re.IGNORECASE)
        if capital:
            details["initial_capital"] = capital.group(1).strip()
    elif category == "Disolución":
        details["dissolution_type"] = dissolution_type(text).value
    return details


def extract_corporate_events(
    text: Optional[str], vocab: Vocabulary, entry_date: Optional[str] = None
) -> List[CorporateEvent]:
    """
    Every non-officer category mentioned in *text*, with its details.

    Events are dated with *entry_date*, except a constitution that states
    its own start of operations.
    """
    if not text or not isinstance(text, str):
        return []

    events: List[CorporateEvent] = []
    for category in vocab.event_categories():
        if not mentions_category(text, category):
            continue
        details = _event_details(category, text)
        when = details.get("constitution_date") if category == "Constitución" else None
        events.append(
            CorporateEvent(
                type=category,
                group=group_of(category),
                date=when or entry_date,
                details=details,
            )
        )
    logger.debug(f"Found {len(events)} corporate events")
    return events


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------
_DISSOLVED = {
    DissolutionType.VOLUNTARY.value: CompanyStatus.DISSOLVED_VOLUNTARY,
    DissolutionType.JUDICIAL.value: CompanyStatus.DISSOLVED_JUDICIAL,
    DissolutionType.BANKRUPTCY.value: CompanyStatus.DISSOLVED_BANKRUPTCY,
}


def derive_company_status(events: Iterable[CorporateEvent]) -> CompanyStatus:
    """
    Company status implied by *events*, most terminal first.

    Extinción > Disolución (by subtype) > Quiebra / Situación concursal >
    Suspensión de pagos > anything else (active).  No events: unknown.
    """
    events = [e for e in (events or ()) if isinstance(e, CorporateEvent)]
    if not events:
        return CompanyStatus.UNKNOWN

    types = {e.type for e in events}
    if "Extinción" in types:
        return CompanyStatus.EXTINCT

    dissolution = next((e for e in events if e.type == "Disolución"), None)
    if dissolution is not None:
        subtype = dissolution.details.get("dissolution_type")
        return _DISSOLVED.get(subtype, CompanyStatus.DISSOLVED)

    if types & {"Quiebra", "Situación concursal"}:
        return CompanyStatus.BANKRUPT
    if "Suspensión de pagos" in types:
        return CompanyStatus.SUSPENDED
    return CompanyStatus.ACTIVE


# ---------------------------------------------------------------------------
# Name changes
# ---------------------------------------------------------------------------
_COMPANY_NAME = r"([A-ZÁÉÍÓÚÑÜ\s&\-.,\d]+(?:S\.?L\.?|S\.?A\.?|S\.?L\.?L\.?|S\.?L\.?P\.?))"
NAME_CHANGE_RE = re.compile(r"(?i:Cambio de denominación social)[.\s]*" + _COMPANY_NAME)
PREVIOUS_NAME_RE = re.compile(
    r"(?i:anteriormente|antes|denominada|nombre anterior|razón social anterior)[\s:]*"
    + _COMPANY_NAME
)
NEW_NAME_MENTION_RE = re.compile(
    r"(?i:nueva denominación|nueva razón social|pasa a denominarse)[\s:]*" + _COMPANY_NAME
)


def extract_name_changes(text: Optional[str]) -> Tuple[List[NameChange], List[str]]:
    """
    Name changes announced in *text* and earlier names it refers to.

    Returns ``(name_changes, previous_names)``.
    """
    if not text:
        return [], []

    when = extract_entry_date(text)
    changes: List[NameChange] = []
    for match in NAME_CHANGE_RE.finditer(text):
        name = clean_company_name(match.group(1))
        if len(name) > 3:
            changes.append(NameChange(new_name=name, change_type="denominacion_social", date=when))

    for match in NEW_NAME_MENTION_RE.finditer(text):
        name = clean_company_name(match.group(1))
        if len(name) > 3 and all(c.new_name != name for c in changes):
            changes.append(NameChange(new_name=name, change_type="nueva_denominacion", date=when))

    previous: List[str] = []
    for match in PREVIOUS_NAME_RE.finditer(text):
        name = clean_company_name(match.group(1))
        if len(name) > 3 and name not in previous:
            previous.append(name)

    if changes or previous:
        logger.debug(f"Name changes: {[c.new_name for c in changes]}, previous: {previous}")
    return changes, previous

"""
borme.vocabulary
================

The immutable lookup table the extraction engine runs against: canonical
officer-position names and the closed set of top-level bulletin categories.

A :class:`Vocabulary` is loaded once (``default_vocabulary()`` is cached) and
passed explicitly into every extraction call.  It is never mutated.
"""

from __future__ import annotations

import json
import logging
import unicodedata
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from .models import Group, OfficerCategory

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Static tables
# ---------------------------------------------------------------------------
# Top-level category → group.  Lookups go through :func:`fold`.
EVENT_GROUPS: Dict[Group, Tuple[str, ...]] = {
    Group.LIFECYCLE: (
        "Constitución",
        "Disolución",
        "Extinción",
        "Reactivación de la sociedad (Art. 242 del Reglamento del Registro Mercantil)",
        "Quiebra",
        "Suspensión de pagos",
        "Situación concursal",
    ),
    Group.CAPITAL: (
        "Ampliación de capital",
        "Reducción de capital",
        "Acuerdo de ampliación de capital social sin ejecutar",
        "Desembolso de dividendos pasivos",
        "Capital",
    ),
    Group.STRUCTURAL: (
        "Fusión por absorción",
        "Fusión por unión",
        "Escisión parcial",
        "Escisión total",
        "Segregación",
        "Cesión global de activo y pasivo",
        "Transformación de sociedad",
    ),
    Group.IDENTITY: (
        "Cambio de denominación social",
        "Cambio de domicilio social",
        "Cambio de objeto social",
        "Ampliacion del objeto social",
        "Modificaciones estatutarias",
        "Página web de la sociedad",
    ),
    Group.GOVERNANCE: (
        "Cambio del Organo de Administración",
        "Cambio del órgano de administración",
        "Cambio del Órgano de Administración",
        "Modificación de poderes",
    ),
    Group.OWNERSHIP: (
        "Declaración de unipersonalidad",
        "Sociedad unipersonal",
        "Pérdida del carácter de unipersonalidad",
        "Pérdida del caracter de unipersonalidad",
    ),
    Group.OFFICERS: (
        "Nombramientos",
        "Reelecciones",
        "Ceses/Dimisiones",
        "Revocaciones",
        "Cancelaciones de oficio de nombramientos",
    ),
    Group.ADMINISTRATIVE: (
        "Datos registrales",
        "Primera inscripcion (O.M. 10/6/1.997)",
        "Reapertura hoja registral",
        "Cierre provisional de hoja registral Art.485 TRLC",
        "Cierre provisional de la hoja registral por revocación del NIF",
        "Cierre provisional hoja registral art. 137.2 Ley 43/1995 Impuesto de Sociedades",
        "Cierre provisional hoja registral por baja en el índice de Entidades Jurídicas",
        "Cierre provisional hoja registral por revocación del NIF de Entidades Jurídicas",
        "Fe de erratas:",
        "Articulo 378.5 del Reglamento del Registro Mercantil",
    ),
    Group.OTHER: (
        "Otros conceptos",
        "Emisión de obligaciones",
        "Crédito incobrable",
        "Anotación preventiva. Declaración de deudor fallido",
        "Anotación preventiva. Demanda de impugnación de acuerdos sociales",
        "Anotación preventiva. Solicitud de acta notarial de junta",
        "Anotación preventiva. Suspensión de acuerdos sociales impugnados",
        "Apertura de sucursal",
        "Cierre de Sucursal",
        "Sucursal",
        "Primera sucursal de sociedad extranjera",
        "Depósitos de proyectos de fusión por absorción",
        "Empresario Individual",
        "Adaptación Ley 2/95",
        "Adaptación Ley 44/2015",
        "Adaptación de sociedad",
        "Adaptada segun D.T. 2 apartado 2 Ley 2/95",
    ),
}

# Category headers that open an officer block, and the bucket they fill.
# Officers named in a constitution are initial appointments.
# An ex officio cancellation ends the appointments it lists.
OFFICER_HEADERS: Dict[str, OfficerCategory] = {
    "Ceses/Dimisiones": OfficerCategory.CESSATION,
    "Nombramientos": OfficerCategory.APPOINTMENT,
    "Reelecciones": OfficerCategory.REELECTION,
    "Revocaciones": OfficerCategory.REVOCATION,
    "Cancelaciones de oficio de nombramientos": OfficerCategory.CESSATION,
    "Constitución": OfficerCategory.APPOINTMENT,
}

# Officer categories never reported as corporate events.
OFFICER_EVENT_TYPES = frozenset(
    {
        "Nombramientos",
        "N o m b r a m i e n t o s",
        "Reelecciones",
        "R e e l e c c i o n e s",
        "Revocaciones",
        "R e v o c a c i o n e s",
        "Ceses/Dimisiones",
        "C e s e s / D i m i s i o n e s",
        "Cancelaciones de oficio de nombramientos",
    }
)


# ---------------------------------------------------------------------------
# Text folding
# ---------------------------------------------------------------------------
def strip_accents(text: str) -> str:
    """Remove combining diacritics (``Único`` → ``Unico``); ``ñ`` becomes ``n``."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def fold(text: Optional[str]) -> str:
    """Case- and accent-insensitive comparison key with collapsed whitespace."""
    if not text:
        return ""
    return " ".join(strip_accents(text).lower().split())


_GROUP_INDEX: Dict[str, Group] = {
    fold(category): group for group, categories in EVENT_GROUPS.items() for category in categories
}


def group_of(category: Optional[str]) -> Group:
    """Return the :class:`Group` for *category*; anything unknown is ``Group.OTHER``."""
    return _GROUP_INDEX.get(fold(category), Group.OTHER)


# ---------------------------------------------------------------------------
# Vocabulary value
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Vocabulary:
    """
    Officer positions and top-level categories.

    Example
    -------
    >>> vocab = Vocabulary.from_mapping({"officersPositions": ["Liquidador"],
    ...                                  "alwaysTopLevel": ["Nombramientos"]})
    >>> vocab.is_position("LIQUIDADOR")
    True
    """

    officer_positions: Tuple[str, ...] = ()
    top_level: Tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Vocabulary":
        """Accept either the camelCase JSON keys or snake_case ones."""
        def _strings(*keys: str) -> Tuple[str, ...]:
            for key in keys:
                value = data.get(key)
                if isinstance(value, (list, tuple)):
                    return tuple(v for v in value if isinstance(v, str) and v.strip())
            return ()

        return cls(
            officer_positions=_strings("officersPositions", "officer_positions"),
            top_level=_strings("alwaysTopLevel", "top_level"),
        )

    @property
    def is_empty(self) -> bool:
        return not self.officer_positions and not self.top_level

    def is_position(self, text: str) -> bool:
        key = fold(text)
        return any(fold(p) == key for p in self.officer_positions)

    def positions_longest_first(self) -> Tuple[str, ...]:
        return tuple(sorted(self.officer_positions, key=len, reverse=True))

    def event_categories(self) -> Iterable[str]:
        """Top-level categories reported as corporate events (officer ones excluded)."""
        return (c for c in self.top_level if c not in OFFICER_EVENT_TYPES)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "officersPositions": list(self.officer_positions),
            "alwaysTopLevel": list(self.top_level),
        }


EMPTY_VOCABULARY = Vocabulary()


def load_vocabulary(path: Union[str, Path]) -> Vocabulary:
    """
    Read a vocabulary JSON file.

    An unreadable or malformed file degrades to :data:`EMPTY_VOCABULARY`;
    position abbreviations and fallback patterns keep working without it.
    """
    try:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Could not load vocabulary from {path}: {e}")
        return EMPTY_VOCABULARY

    if not isinstance(data, Mapping):
        logger.warning(f"Vocabulary file {path} does not contain a JSON object")
        return EMPTY_VOCABULARY

    vocab = Vocabulary.from_mapping(data)
    logger.info(
        f"Loaded vocabulary: {len(vocab.officer_positions)} positions, "
        f"{len(vocab.top_level)} categories"
    )
    return vocab


@lru_cache(maxsize=1)
def default_vocabulary() -> Vocabulary:
    """The vocabulary named by ``settings.vocabulary_path``, loaded once."""
    from .settings import settings

    return load_vocabulary(settings.vocabulary_path)

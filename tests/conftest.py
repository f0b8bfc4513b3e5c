"""
Pytest configuration: make sure `import borme` works regardless of
where pytest is invoked.

It prepends the project root (one directory above *tests/*) to
``sys.path`` **before** any tests are collected, and provides the sample
bulletin entries shared by the test modules.
"""

import sys
from pathlib import Path

import pytest

# /path/to/project/tests -> project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from borme.vocabulary import default_vocabulary  # noqa: E402


# ---------------------------------------------------------------------------
# Sample entries
# ---------------------------------------------------------------------------
INLINE_OFFICERS = (
    "Ceses/Dimisiones. Adm. Solid.: JUAN PEREZ GARCIA;MARIA LOPEZ RUIZ. "
    "Nombramientos. Liquidador: CARLOS RUIZ SOTO."
)

EXPLORA_ENTRY = (
    "127261 - EXPLORA CONSULTING SL(2007).\n"
    "Ceses/Dimisiones. Adm. Solid.: JUAN PEREZ GARCIA. "
    "Nombramientos. Adm. Unico: MARIA LOPEZ RUIZ. "
    "Datos registrales. T 1234 , F 56, S 8, H M 200035, I/A 3 (29.08.25)."
)

CONSTITUTION_ENTRY = (
    "1 - NUEVA SL. Constitución. Comienzo de operaciones: 1.06.97. "
    "Objeto social: Venta de libros. Domicilio: C/ Mayor 12, Madrid. "
    "Capital: 3.000,00 Euros. Nombramientos. Adm. Unico: ANA RUIZ PEREZ. "
    "Datos registrales. S 8 , H M 200035, I/A 1 (29.08.25)."
)

DISSOLUTION_ENTRY = "7 - ACME SL. Disolución. Voluntaria. Nombramientos. Liquidador: CARLOS RUIZ SOTO."


@pytest.fixture(scope="session")
def vocab():
    """The bundled vocabulary."""
    return default_vocabulary()


@pytest.fixture
def inline_officers():
    return INLINE_OFFICERS


@pytest.fixture
def explora_entry():
    return EXPLORA_ENTRY


@pytest.fixture
def constitution_entry():
    return CONSTITUTION_ENTRY


@pytest.fixture
def dissolution_entry():
    return DISSOLUTION_ENTRY

"""
tests/test_segmenter.py
=======================

Unit tests for borme.guard and borme.segmenter

Run:  pytest -q
"""

import pytest

from borme.guard import guard_text, is_registry_data
from borme.segmenter import split_sections


def test_abbreviation_periods_are_not_boundaries():
    sections = split_sections("Ceses/Dimisiones. Adm. Solid.: JUAN PEREZ GARCIA;MARIA LOPEZ RUIZ.")
    assert sections == ["Ceses/Dimisiones", "Adm. Solid.: JUAN PEREZ GARCIA;MARIA LOPEZ RUIZ"]


def test_dates_and_amounts_survive_splitting():
    sections = split_sections("Comienzo de operaciones: 1.06.97. Capital: 3.000,00 Euros.")
    assert sections == ["Comienzo de operaciones: 1.06.97", "Capital: 3.000,00 Euros"]


def test_registry_reference_stays_whole():
    text = "Datos registrales. S 8 , H M 200035, I/A 1 (29.08.25)."
    sections = split_sections(text)
    assert sections[0] == "Datos registrales"
    assert sections[1].startswith("S 8 , H M 200035, I/A 1 (29.08.25)")
    assert is_registry_data(text)


def test_guard_restore_roundtrip():
    text = "Adm. Unico: ANA RUIZ PEREZ. Capital: 3.000,00 Euros. I/A 1 (29.08.25)."
    guarded = guard_text(text)
    assert "Adm." not in guarded.text
    assert "3.000,00" not in guarded.text
    assert guarded.restore(guarded.text) == text


def test_no_period_in_placeholders():
    guarded = guard_text("Adm. Solid.: ANA RUIZ PEREZ. 29.08.25")
    assert guarded.text.count(".") == 1


@pytest.mark.parametrize("text", [None, "", "   ", 42])
def test_degenerate_input(text):
    assert split_sections(text) == []


def test_sections_are_trimmed_and_non_empty():
    sections = split_sections("  Nombramientos. .  Liquidador: CARLOS RUIZ SOTO .  ")
    assert sections == ["Nombramientos", "Liquidador: CARLOS RUIZ SOTO"]

"""
tests/test_officers.py
======================

Unit tests for the officer strategy chain in borme.officers
"""

from borme.models import OfficerCategory
from borme.officers import (
    extract_by_categories,
    extract_by_proximity,
    extract_direct_patterns,
    extract_inline_categories,
    extract_officers,
)
from borme.names import is_valid_name
from borme.temporal import resolve_officers


def _pairs(events):
    return [(e.person_name, e.position) for e in events]


def test_inline_cessations_and_appointment(vocab, inline_officers):
    book = extract_officers(inline_officers, vocab)
    assert _pairs(book.ceses_dimisiones) == [
        ("JUAN PEREZ GARCIA", "Administrador Solidario"),
        ("MARIA LOPEZ RUIZ", "Administrador Solidario"),
    ]
    assert _pairs(book.nombramientos) == [("CARLOS RUIZ SOTO", "Liquidador")]
    assert book.reelecciones == [] and book.revocaciones == []
    assert all(e.category is OfficerCategory.CESSATION for e in book.ceses_dimisiones)


def test_both_tier_one_passes_agree(vocab, inline_officers):
    structured = extract_by_categories(inline_officers, vocab)
    inline = extract_inline_categories(inline_officers, vocab)
    assert set(_pairs(structured)) == set(_pairs(inline))


def test_merged_passes_are_deduplicated(vocab, inline_officers):
    book = extract_officers(inline_officers, vocab)
    for bucket in (book.nombramientos, book.ceses_dimisiones):
        pairs = _pairs(bucket)
        assert len(pairs) == len(set(pairs))
    assert book.total() == 3


def test_every_extracted_name_is_valid(vocab, explora_entry, constitution_entry):
    for text in (explora_entry, constitution_entry):
        for event in extract_officers(text, vocab):
            assert is_valid_name(event.person_name, vocab)


def test_normalized_name_is_set(vocab):
    book = extract_officers("Nombramientos. Adm. Unico: JOSÉ MUÑOZ GARCÍA.", vocab)
    [event] = book.nombramientos
    assert event.position == "Administrador Único"
    assert event.normalized_name == "JOSE MUNOZ GARCIA"


def test_ex_officio_cancellation_is_not_an_appointment(vocab):
    text = "Cancelaciones de oficio de nombramientos. Adm. Unico: SANZ GIL MARTA."
    book = extract_officers(text, vocab)
    assert book.nombramientos == []
    assert _pairs(book.ceses_dimisiones) == [("SANZ GIL MARTA", "Administrador Único")]
    # "nombramientos" inside the phrase does not open an appointment block
    assert all(e.category is OfficerCategory.CESSATION for e in extract_inline_categories(text, vocab))
    assert resolve_officers(book).current_officers == []


def test_constitution_details_are_not_officers(vocab, constitution_entry):
    book = extract_officers(constitution_entry, vocab)
    assert _pairs(book.events()) == [("ANA RUIZ PEREZ", "Administrador Único")]


def test_direct_pattern_tier(vocab):
    text = "Apoderado: LUIS MARTIN SANZ"
    assert extract_by_categories(text, vocab) == []
    assert extract_inline_categories(text, vocab) == []
    assert _pairs(extract_direct_patterns(text, vocab)) == [("LUIS MARTIN SANZ", "Apoderado")]
    assert _pairs(extract_officers(text, vocab).nombramientos) == [("LUIS MARTIN SANZ", "Apoderado")]


def test_proximity_tier(vocab):
    text = "Se designa como GERENTE LUIS MARTIN SANZ"
    assert extract_direct_patterns(text, vocab) == []
    assert _pairs(extract_by_proximity(text, vocab)) == [("LUIS MARTIN SANZ", "Gerente")]


def test_business_prose_yields_nothing(vocab):
    text = "Objeto social: la fabricación y venta de toda clase de productos."
    assert extract_officers(text, vocab).total() == 0


def test_degenerate_input(vocab):
    assert extract_officers(None, vocab).total() == 0
    assert extract_officers("", vocab).total() == 0
    assert extract_officers(12, vocab).total() == 0

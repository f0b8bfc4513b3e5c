"""
tests/test_classifier.py
========================

Unit tests for borme.classifier and borme.vocabulary
"""

import json

from borme.classifier import (
    category_blocks,
    find_category,
    find_category_exact,
    label_sections,
    mentions_category,
)
from borme.models import Group
from borme.segmenter import split_sections
from borme.vocabulary import EMPTY_VOCABULARY, Vocabulary, group_of, load_vocabulary


def test_exact_match_ignores_case_and_accents(vocab):
    assert find_category_exact("NOMBRAMIENTOS", vocab) == "Nombramientos"
    assert find_category_exact("constitucion", vocab) == "Constitución"
    assert find_category_exact("Nombramientos de cargos", vocab) is None


def test_constitution_detail_lines_fold_into_constitution(vocab):
    assert find_category("Domicilio: C/ Mayor 12, Madrid", vocab) == "Constitución"
    assert find_category("Comienzo de operaciones: 1.06.97", vocab) == "Constitución"


def test_synonym_rules(vocab):
    assert find_category("Modificación de estatutos", vocab) == "Modificaciones estatutarias"
    assert mentions_category("Se acuerda el cambio del objeto de la sociedad", "Cambio de objeto social")


def test_person_line_is_not_a_category(vocab):
    assert find_category("Adm. Solid.: JUAN PEREZ GARCIA", vocab) is None


def test_blocks_open_only_on_exact_headers(vocab):
    text = (
        "Constitución. Domicilio: C/ Mayor 12, Madrid. Capital: 3.000,00 Euros. "
        "Nombramientos. Adm. Unico: ANA RUIZ PEREZ."
    )
    blocks = category_blocks(split_sections(text), vocab)
    assert [b.category for b in blocks] == ["Constitución", "Nombramientos"]
    assert blocks[0].body == ("Domicilio: C/ Mayor 12, Madrid", "Capital: 3.000,00 Euros")
    assert blocks[1].body == ("Adm. Unico: ANA RUIZ PEREZ",)


def test_label_sections(vocab):
    labelled = label_sections(["Nombramientos", "Adm. Solid.: JUAN PEREZ GARCIA", "Capital: 3.000,00 Euros"], vocab)
    assert [s.category for s in labelled] == ["Nombramientos", None, "Constitución"]
    assert labelled[1].text == "Adm. Solid.: JUAN PEREZ GARCIA"


def test_group_lookup():
    assert group_of("Disolución") is Group.LIFECYCLE
    assert group_of("disolucion") is Group.LIFECYCLE
    assert group_of("Ceses/Dimisiones") is Group.OFFICERS
    assert group_of("Something else") is Group.OTHER
    assert group_of(None) is Group.OTHER


def test_vocabulary_from_mapping_accepts_both_key_styles():
    camel = Vocabulary.from_mapping({"officersPositions": ["Liquidador"], "alwaysTopLevel": ["Capital"]})
    snake = Vocabulary.from_mapping({"officer_positions": ["Liquidador"], "top_level": ["Capital"]})
    assert camel == snake
    assert camel.is_position("LIQUIDADOR")


def test_missing_vocabulary_file_degrades_to_empty(tmp_path, caplog):
    vocab = load_vocabulary(tmp_path / "missing.json")
    assert vocab is EMPTY_VOCABULARY
    assert vocab.is_empty
    assert "Could not load vocabulary" in caplog.text


def test_invalid_vocabulary_json(tmp_path):
    bad = tmp_path / "terms.json"
    bad.write_text("{not json", encoding="utf-8")
    assert load_vocabulary(bad).is_empty

    wrong_shape = tmp_path / "list.json"
    wrong_shape.write_text(json.dumps(["Nombramientos"]), encoding="utf-8")
    assert load_vocabulary(wrong_shape).is_empty


def test_bundled_vocabulary_is_loaded(vocab):
    assert "Administrador Solidario" in vocab.officer_positions
    assert "Nombramientos" in vocab.top_level
    assert "Nombramientos" not in list(vocab.event_categories())

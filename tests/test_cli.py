"""
tests/test_cli.py
=================

Tests for the ``borme`` command-line entry point.
"""

import io
import json

from borme.cli import main


def _run(capsys, argv):
    code = main(argv)
    return code, capsys.readouterr().out


def test_parse_file(tmp_path, capsys, explora_entry):
    path = tmp_path / "entry.txt"
    path.write_text(explora_entry, encoding="utf-8")

    code, out = _run(capsys, ["parse", str(path), "--date", "2024-03-01", "--id", "BORME-A-1"])
    assert code == 0
    data = json.loads(out)
    assert data["company_name"] == "EXPLORA CONSULTING SL"
    assert data["identifier"] == "BORME-A-1"
    timeline = data["officer_resolution"]["timeline"]
    assert {e["date"] for e in timeline} == {"2024-03-01"}


def test_parse_stdin_with_missing_vocabulary(tmp_path, capsys, monkeypatch, dissolution_entry):
    monkeypatch.setattr("sys.stdin", io.StringIO(dissolution_entry))
    code, out = _run(capsys, ["parse", "-", "--vocabulary", str(tmp_path / "missing.json")])
    assert code == 0
    data = json.loads(out)
    assert data["company_name"] == "ACME SL"
    # corporate events need the category table; officers fall back to the abbreviations
    assert data["status"] == "unknown"
    assert data["corporate_events"] == []
    [officer] = data["officer_resolution"]["current_officers"]
    assert officer["name"] == "CARLOS RUIZ SOTO"
    assert [p["position"] for p in officer["current_positions"]] == ["Liquidador"]


def test_resolve_flat_records(tmp_path, capsys):
    path = tmp_path / "officers.json"
    path.write_text(
        json.dumps(
            [
                {"name": "ANA RUIZ PEREZ", "position": "Gerente", "date": "2020-01-01"},
                {"name": "LUIS MARTIN SANZ", "position": "Apoderado", "date": "2020-01-01"},
                {"name": "LUIS MARTIN SANZ", "position": "Apoderado", "removal_date": "2022-01-01"},
            ]
        ),
        encoding="utf-8",
    )
    code, out = _run(capsys, ["resolve", str(path)])
    assert code == 0
    data = json.loads(out)
    assert [o["name"] for o in data["current_officers"]] == ["ANA RUIZ PEREZ"]
    assert data["total_events"] == 3


def test_resolve_entries_of_several_companies(tmp_path, capsys):
    entries = [
        {"full_entry": "1 - ACME SL. Nombramientos. Gerente: ANA RUIZ PEREZ.", "date": "2020-01-01"},
        {"full_entry": "2 - BETA SA. Ceses/Dimisiones. Gerente: ANA RUIZ PEREZ.", "date": "2021-01-01"},
    ]
    path = tmp_path / "entries.json"
    path.write_text(json.dumps(entries), encoding="utf-8")

    code, out = _run(capsys, ["resolve", str(path)])
    assert code == 0
    [officer] = json.loads(out)["current_officers"]
    assert [p["company_name"] for p in officer["current_positions"]] == ["ACME SL"]


def test_resolve_invalid_json(tmp_path, capsys):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    code, out = _run(capsys, ["resolve", str(path)])
    assert code == 1
    assert out == ""

import json

from clinote.scripts.clinote_cli import main


def test_cli_validate_prints_payload(tmp_path, capsys) -> None:
    note = tmp_path / "note.txt"
    note.write_text("CC: headache\nHPI: 3 days\nBP 130/85", encoding="utf-8")

    assert main(["validate", str(note), "--strict"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["ok"] is True


def test_cli_validate_exit_code_on_errors(tmp_path, capsys) -> None:
    note = tmp_path / "note.txt"
    note.write_text("Plan: rest", encoding="utf-8")

    assert main(["validate", str(note), "--strict"]) == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["notes"][0]["errors"][0] == "Missing required section: Subjective."


def test_cli_convert_writes_output_file(tmp_path) -> None:
    note = tmp_path / "note.txt"
    note.write_text("S: fever\nO: BP 120/80", encoding="utf-8")
    out = tmp_path / "out" / "note.json"

    assert main(["convert", str(note), "--output", "json", "--out", str(out)]) == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["notes"][0]["note_index"] == 1


def test_cli_unknown_template_exits_2(tmp_path, capsys) -> None:
    note = tmp_path / "note.txt"
    note.write_text("S: fever", encoding="utf-8")

    assert main(["preview", str(note), "--template", "progress"]) == 2
    assert "Unsupported template" in capsys.readouterr().err


def test_cli_normalize_stats(tmp_path, capsys) -> None:
    note = tmp_path / "note.txt"
    note.write_text("S: fever\nS: cough and congestion\nO: T 38.1", encoding="utf-8")

    assert main(["normalize", str(note), "--stats"]) == 0
    assert json.loads(capsys.readouterr().out)["merged_duplicates"] == 1

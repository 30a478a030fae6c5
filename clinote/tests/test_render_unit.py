import json

import pytest

from clinote.note.models import Section, StructuredNote
from clinote.note.render import render_csv, render_markdown, render_notes


def _notes() -> list[StructuredNote]:
    return [
        StructuredNote(
            note_index=1,
            sections=[Section(name="S", content="fever\n"), Section(name="O", content="", confidence=0.55)],
        ),
        StructuredNote(note_index=2, sections=[Section(name="S", content="cough"), Section(name="A", content="viral")]),
    ]


def test_render_markdown_marks_empty_sections() -> None:
    text = render_markdown(_notes()[:1])
    assert text == "# Note 1\n\n## S\n\nfever\n\n## O\n\n_(empty)_\n"


def test_render_json_carries_confidence() -> None:
    data = json.loads(render_notes(_notes(), "json"))
    assert [note["note_index"] for note in data["notes"]] == [1, 2]
    assert data["notes"][0]["sections"][1] == {"name": "O", "content": "", "confidence": 0.55}


def test_render_csv_long_layout() -> None:
    text = render_csv(_notes(), "long")
    assert text.splitlines() == [
        "note_index,section,content,confidence",
        "1,S,fever,1.00",
        "1,O,,0.55",
        "2,S,cough,1.00",
        "2,A,viral,1.00",
    ]


def test_render_csv_wide_layout_unions_columns() -> None:
    text = render_csv(_notes(), "wide")
    assert text.splitlines() == [
        "note_index,S,O,A",
        "1,fever,,",
        "2,cough,,viral",
    ]


def test_render_csv_quotes_multiline_content() -> None:
    note = StructuredNote(note_index=1, sections=[Section(name="Plan", content="rest\nfluids")])
    assert render_csv([note]) == 'note_index,section,content,confidence\n1,Plan,"rest\nfluids",1.00\n'


def test_render_notes_rejects_unknown_format() -> None:
    with pytest.raises(ValueError):
        render_notes(_notes(), "xml")

from clinote.internal_core.config import NoteConfig
from clinote.note.parser import ParseOptions, parse_notes
from clinote.note.validate import validate_note


def test_parse_notes_explicit_soap_headers() -> None:
    text = "S: headache x2 days\nO: BP 120/80\nA: tension headache\nP: ibuprofen"
    notes = parse_notes(text, "soap", NoteConfig())
    assert len(notes) == 1
    note = notes[0]
    assert note.note_index == 1
    assert [item.name for item in note.sections] == ["S", "O", "A", "P"]
    assert note.sections[0].content == "headache x2 days"
    assert note.sections[3].content == "ibuprofen"
    assert all(item.confidence == 1.0 for item in note.sections)


def test_parse_notes_multiline_content_runs_to_next_header() -> None:
    text = "Subjective:\nfeels tired\nsleeping poorly\nObjective:\nafebrile"
    note = parse_notes(text, "soap", NoteConfig())[0]
    assert [item.name for item in note.sections] == ["Subjective", "Objective"]
    assert note.sections[0].content == "feels tired\nsleeping poorly"


def test_parse_notes_keeps_preamble_as_narrative() -> None:
    note = parse_notes("Pt seen today.\nSubjective:\nfeels ok", "soap", NoteConfig())[0]
    assert note.sections[0].name == "Narrative"
    assert note.sections[0].content == "Pt seen today."
    assert note.sections[0].confidence < 0.5
    assert note.sections[1].name == "Subjective"
    assert note.sections[1].content == "feels ok"


def test_parse_notes_without_headers_keeps_everything_in_narrative() -> None:
    text = "CC: headache\nHPI: 3 days\nBP 130/85"
    note = parse_notes(text, "soap", NoteConfig(), options=ParseOptions(apply_heuristics=False))[0]
    assert [item.name for item in note.sections] == ["Narrative"]
    assert note.sections[0].content == text


def test_parse_notes_heuristic_fallback_synthesizes_sections() -> None:
    text = "CC: headache\nHPI: 3 days\nBP 130/85"
    note = parse_notes(text, "soap", NoteConfig(), options=ParseOptions(apply_heuristics=True))[0]
    assert [item.name for item in note.sections] == ["Subjective", "Objective"]
    assert note.sections[0].content == "CC: headache\nHPI: 3 days"
    assert note.sections[1].content == "BP 130/85"
    assert all(item.confidence == 0.55 for item in note.sections)


def test_parse_notes_heuristic_fallback_extracts_plan_and_keeps_rest() -> None:
    text = "Plan: start metformin\nPt reports fatigue"
    note = parse_notes(text, "soap", NoteConfig(), options=ParseOptions(apply_heuristics=True))[0]
    # "Plan" is an explicit SOAP header, so heuristics do not kick in.
    assert [item.name for item in note.sections] == ["Plan"]

    note = parse_notes(
        "tx: rest and fluids\nPt reports fatigue",
        "soap",
        NoteConfig(),
        options=ParseOptions(apply_heuristics=True),
    )[0]
    assert [item.name for item in note.sections] == ["Plan", "Narrative"]
    assert note.sections[0].content == "rest and fluids"
    assert note.sections[1].content == "Pt reports fatigue"


def test_parse_notes_hp_headers_and_synonyms() -> None:
    text = "Chief Complaint: chest pain\nHPI: 2 hours of pressure\nA/P: rule out ACS"
    note = parse_notes(text, "hp", NoteConfig())[0]
    assert [item.name for item in note.sections] == ["Chief Complaint", "HPI", "A/P"]


def test_parse_notes_assigns_sequential_indices_from_start_index() -> None:
    text = "S: one\n---\nS: two"
    notes = parse_notes(text, "soap", NoteConfig(), start_index=2)
    assert [note.note_index for note in notes] == [3, 4]


def test_parse_notes_honors_bundle_hint() -> None:
    notes = parse_notes("ignored", "soap", NoteConfig(), bundle_hint=["S: one", "S: two"])
    assert len(notes) == 2
    assert notes[1].sections[0].content == "two"


def test_parse_then_validate_never_raises_on_garbage() -> None:
    samples = ["", "   \n\n", "\x00\xff\ufffd::::\n#*:", ":::\n---\n---", "S:\nO:\nA:\nP:"]
    for sample in samples:
        for fmt in ("soap", "hp", "discharge"):
            for heuristics in (False, True):
                notes = parse_notes(sample, fmt, NoteConfig(), options=ParseOptions(apply_heuristics=heuristics))
                assert notes
                for note in notes:
                    validate_note(note, fmt, True)
                    validate_note(note, fmt, False)


def test_parse_notes_single_letter_lines_stay_content() -> None:
    note = parse_notes("Subjective:\na\nb\nc", "soap", NoteConfig())[0]
    assert [(item.name, item.content) for item in note.sections] == [("Subjective", "a\nb\nc")]


def test_parse_notes_keeps_form_feed_and_carriage_return() -> None:
    note = parse_notes("S: a\x0cb\r\nO: c", "soap", NoteConfig())[0]
    assert [(item.name, item.content) for item in note.sections] == [("S", "a\x0cb"), ("O", "c")]

import pytest

from clinote.internal_core.config import NoteConfig
from clinote.note.bundle import split_bundle


def test_split_bundle_on_delimiter_lines() -> None:
    spans, meta = split_bundle("S: a\nO: b\n---\nS: c\nO: d", None, NoteConfig())
    assert spans == ["S: a\nO: b", "S: c\nO: d"]
    assert meta.mode == "delimiter"
    assert meta.delimiter_hits == 1
    assert meta.boundaries == [0, 3]


def test_split_bundle_without_separator_returns_single_span() -> None:
    spans, meta = split_bundle("just some text", "auto", NoteConfig())
    assert spans == ["just some text"]
    assert meta.mode == "heuristic"


def test_split_bundle_heuristic_splits_on_repeated_opening_header() -> None:
    text = "Subjective: x\nObjective: y\nSubjective: z\nObjective: w"
    spans, meta = split_bundle(text, "heuristic", NoteConfig())
    assert spans == ["Subjective: x\nObjective: y", "Subjective: z\nObjective: w"]
    assert meta.boundaries == [0, 2]


def test_split_bundle_heuristic_keeps_back_to_back_duplicates_together() -> None:
    spans, _ = split_bundle("S: first thing\nS: second thing", "heuristic", NoteConfig())
    assert len(spans) == 1


def test_split_bundle_preserves_lines_verbatim() -> None:
    text = "  S:  indented  \n\tO: tab"
    spans, _ = split_bundle(text, "single", NoteConfig())
    assert spans == [text]


def test_split_bundle_drops_blank_spans_but_never_returns_empty() -> None:
    spans, meta = split_bundle("---\n---\nS: a", "delimiter", NoteConfig())
    assert spans == ["S: a"]
    assert meta.boundaries == [2]

    spans, _ = split_bundle("", None, NoteConfig())
    assert spans == [""]


def test_split_bundle_uses_configured_delimiter() -> None:
    config = NoteConfig(CLINOTE_BUNDLE_DELIMITER=r"^=== NOTE ===$")
    spans, _ = split_bundle("one\n=== NOTE ===\ntwo", "delimiter", config)
    assert spans == ["one", "two"]


def test_split_bundle_rejects_unknown_mode() -> None:
    with pytest.raises(ValueError, match="Unsupported bundle mode"):
        split_bundle("text", "paragraphs", NoteConfig())


def test_split_bundle_single_mode_returns_text_unchanged() -> None:
    text = "S: a\x0cb\r\nO: c"
    spans, meta = split_bundle(text, "single", NoteConfig())
    assert spans == [text]
    assert meta.boundaries == [0]


def test_split_bundle_splits_on_newlines_only() -> None:
    spans, meta = split_bundle("S: a\x0cb\r\n---\r\nS: c d", "delimiter", NoteConfig())
    assert spans == ["S: a\x0cb\r", "S: c d"]
    assert meta.delimiter_hits == 1

    spans, _ = split_bundle("S: a\x0cb\r\nO: c", "auto", NoteConfig())
    assert spans == ["S: a\x0cb\r\nO: c"]

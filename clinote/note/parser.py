from __future__ import annotations

"""
Parse raw clinical note text into ordered, confidence-scored sections.

Design intent:
- Prefer explicit headers; fall back to lexical classification only when asked.
- Never discard source text: unrecognized lines land in a Narrative section.
- Degrade to fewer/lower-confidence sections instead of raising.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from clinote.internal_core.config import NoteConfig
from clinote.note.bundle import split_bundle
from clinote.note.keys import recognize_heading, split_header_line
from clinote.note.markers import classify_line, strip_assessment_prefix, strip_plan_prefix
from clinote.note.models import (
    EXPLICIT_HEADER_CONFIDENCE,
    INFERRED_CONFIDENCE,
    NARRATIVE_CONFIDENCE,
    NoteFormat,
    Section,
    StructuredNote,
)

logger = logging.getLogger(__name__)

NARRATIVE_SECTION_NAME = "Narrative"

# Lexical class -> section name synthesized for each format when headers are absent.
_HEURISTIC_TARGETS: dict[str, dict[str, str]] = {
    "soap": {
        "subjective": "Subjective",
        "objective": "Objective",
        "assessment": "Assessment",
        "plan": "Plan",
    },
    "hp": {
        "subjective": "History of Present Illness",
        "objective": "Physical Exam",
        "assessment": "Assessment",
        "plan": "Plan",
    },
    "discharge": {
        "subjective": "Hospital Course",
        "objective": "Hospital Course",
        "assessment": "Discharge Diagnosis",
        "plan": "Follow-up",
    },
}

_HEURISTIC_ORDER = ("subjective", "objective", "assessment", "plan")


@dataclass(frozen=True)
class ParseOptions:
    apply_heuristics: bool = False


@dataclass
class _OpenSection:
    name: str
    confidence: float
    lines: list[str]


def _close(open_section: _OpenSection | None, sections: list[Section]) -> None:
    if open_section is None:
        return
    sections.append(
        Section(
            name=open_section.name,
            content="\n".join(open_section.lines),
            confidence=open_section.confidence,
        )
    )


def _match_header(line: str, note_format: NoteFormat) -> tuple[str, str] | None:
    split = split_header_line(line)
    if split is None:
        return None
    header, inline = split
    if recognize_heading(header, note_format) is None:
        return None
    return header, inline


def _parse_explicit(span: str, note_format: NoteFormat) -> tuple[list[Section], int]:
    sections: list[Section] = []
    current: _OpenSection | None = None
    preamble: list[str] = []
    header_count = 0

    for line in span.split("\n"):
        header = _match_header(line, note_format)
        if header is not None:
            _close(current, sections)
            name, inline = header
            header_count += 1
            current = _OpenSection(
                name=name,
                confidence=EXPLICIT_HEADER_CONFIDENCE,
                lines=[inline.strip()] if inline.strip() else [],
            )
            continue
        if current is None:
            preamble.append(line)
        else:
            current.lines.append(line)
    _close(current, sections)

    if "\n".join(preamble).strip():
        sections.insert(
            0,
            Section(
                name=NARRATIVE_SECTION_NAME,
                content="\n".join(preamble),
                confidence=NARRATIVE_CONFIDENCE,
            ),
        )
    return sections, header_count


def _parse_heuristic(span: str, note_format: NoteFormat) -> list[Section]:
    buckets: dict[str, list[str]] = {key: [] for key in _HEURISTIC_ORDER}
    narrative: list[str] = []

    for raw_line in span.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        assessment = strip_assessment_prefix(line)
        if assessment is not None:
            buckets["assessment"].append(assessment)
            continue
        plan = strip_plan_prefix(line)
        if plan is not None:
            buckets["plan"].append(plan)
            continue
        line_class = classify_line(line)
        if line_class is not None:
            buckets[line_class].append(line)
            continue
        narrative.append(line)

    targets = _HEURISTIC_TARGETS[note_format]
    merged: dict[str, list[str]] = {}
    for key in _HEURISTIC_ORDER:
        if buckets[key]:
            merged.setdefault(targets[key], []).extend(buckets[key])

    sections = [
        Section(name=name, content="\n".join(lines), confidence=INFERRED_CONFIDENCE)
        for name, lines in merged.items()
    ]
    if narrative:
        sections.append(
            Section(
                name=NARRATIVE_SECTION_NAME,
                content="\n".join(narrative),
                confidence=NARRATIVE_CONFIDENCE,
            )
        )
    return sections


def parse_note_span(
    span: str,
    note_format: NoteFormat,
    note_index: int,
    options: ParseOptions | None = None,
) -> StructuredNote:
    resolved = options or ParseOptions()
    sections, header_count = _parse_explicit(span or "", note_format)
    if header_count == 0 and resolved.apply_heuristics and (span or "").strip():
        sections = _parse_heuristic(span, note_format)
        logger.debug("parse note_index=%d heuristic_sections=%d", note_index, len(sections))
    else:
        logger.debug(
            "parse note_index=%d headers=%d sections=%d", note_index, header_count, len(sections)
        )
    return StructuredNote(note_index=note_index, sections=sections)


def parse_notes(
    raw_text: str,
    note_format: NoteFormat,
    config: NoteConfig,
    bundle_hint: Sequence[str] | None = None,
    start_index: int = 0,
    options: ParseOptions | None = None,
) -> list[StructuredNote]:
    if bundle_hint is not None:
        spans = list(bundle_hint) or [raw_text or ""]
    else:
        spans, _ = split_bundle(raw_text, config.CLINOTE_BUNDLE_MODE, config)
    return [
        parse_note_span(span, note_format, max(0, start_index) + position, options)
        for position, span in enumerate(spans, start=1)
    ]

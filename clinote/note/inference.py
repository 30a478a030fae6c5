from __future__ import annotations

"""
Recover Subjective/Objective sections for strict SOAP validation.

Design intent:
- Avoid false negatives on notes written without any explicit headers.
- Scan the raw per-note text, not the parsed sections.
- Return new notes; leave notes without a missing-section error untouched.
"""

import logging
from dataclasses import replace
from typing import Sequence

from clinote.internal_core.config import NoteConfig
from clinote.note.bundle import split_bundle
from clinote.note.markers import classify_line
from clinote.note.models import INFERRED_CONFIDENCE, Section, StructuredNote, Template
from clinote.note.validate import ValidationIssue, validate_note

logger = logging.getLogger(__name__)


def has_missing_required_section(issues: Sequence[ValidationIssue], section_name: str) -> bool:
    wanted = section_name.lower()
    return any(
        issue.severity == "error"
        and issue.code == "missing_required"
        and (issue.section or "").lower() == wanted
        for issue in issues
    )


def infer_soap_buckets(raw_note: str) -> tuple[list[str], list[str]]:
    subjective: list[str] = []
    objective: list[str] = []
    for line in (raw_note or "").splitlines():
        trimmed = line.strip()
        line_class = classify_line(trimmed)
        if line_class == "subjective":
            subjective.append(trimmed)
        elif line_class == "objective":
            objective.append(trimmed)
    return subjective, objective


def augment_note(note: StructuredNote, raw_note: str) -> StructuredNote | None:
    """Return a copy of `note` with inferred sections prepended, or None."""
    issues = validate_note(note, "soap", True)
    missing_subjective = has_missing_required_section(issues, "Subjective")
    missing_objective = has_missing_required_section(issues, "Objective")
    if not missing_subjective and not missing_objective:
        return None

    subjective_lines, objective_lines = infer_soap_buckets(raw_note)
    inferred: list[Section] = []
    if missing_subjective and subjective_lines:
        inferred.append(
            Section(name="Subjective", content="\n".join(subjective_lines), confidence=INFERRED_CONFIDENCE)
        )
    if missing_objective and objective_lines:
        inferred.append(
            Section(name="Objective", content="\n".join(objective_lines), confidence=INFERRED_CONFIDENCE)
        )
    if not inferred:
        return None
    return replace(note, sections=[*inferred, *note.sections])


def apply_soap_inference(
    raw_text: str,
    notes: Sequence[StructuredNote],
    template: Template,
    strict: bool,
    config: NoteConfig,
) -> tuple[list[StructuredNote], list[bool]]:
    out = list(notes)
    flags = [False] * len(out)
    if not (strict and template == "soap"):
        return out, flags

    spans, _ = split_bundle(raw_text, config.CLINOTE_BUNDLE_MODE, config)
    for idx, note in enumerate(out):
        raw_note = spans[idx] if idx < len(spans) else raw_text
        augmented = augment_note(note, raw_note)
        if augmented is None:
            continue
        out[idx] = augmented
        flags[idx] = True
        logger.debug(
            "soap inference note_index=%d added_sections=%d",
            note.note_index,
            len(augmented.sections) - len(note.sections),
        )
    return out, flags

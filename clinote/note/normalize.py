from __future__ import annotations

"""
Normalize structured notes into deduplicated, template-ordered sections.

Design intent:
- Never mutate the source note; build fresh buckets per pass.
- SOAP output always carries exactly five sections in canonical order.
- Stats counters are exact so callers can report what normalization did.
"""

from dataclasses import dataclass
from typing import Sequence

from clinote.note.keys import (
    SOAP_CANONICAL_KEYS,
    canonical_section_name,
    normalized_section_key,
    section_merge_key,
    soap_display_name,
)
from clinote.note.markers import (
    looks_objective,
    looks_subjective,
    strip_assessment_prefix,
    strip_plan_prefix,
)
from clinote.note.models import StructuredNote, Template

DUPLICATE_MIN_CONTENT_LEN = 5
SHORT_SECTION_LEN = 20
EMPTY_SECTION_PLACEHOLDER = "No content extracted from source note."
NOTE_SEPARATOR = "---"


@dataclass(frozen=True)
class NormalizedSection:
    key: str
    name: str
    content: str


@dataclass
class NormalizeStats:
    removed_empty_sections: int = 0
    merged_duplicates: int = 0
    extracted_subjective_lines: int = 0
    extracted_objective_lines: int = 0


def normalize_sections(
    note: StructuredNote,
    template: Template,
    stats: NormalizeStats | None = None,
) -> list[NormalizedSection]:
    counters = stats if stats is not None else NormalizeStats()
    if template == "soap":
        return _normalize_soap_sections(note, counters)
    return _merge_duplicate_sections(note, template, counters)


def _merge_duplicate_sections(
    note: StructuredNote,
    template: Template,
    stats: NormalizeStats,
) -> list[NormalizedSection]:
    keys: list[str] = []
    names: dict[str, str] = {}
    contents: dict[str, str] = {}

    for section in note.sections:
        key = section_merge_key(section.name, template)
        content = section.content.strip()
        if not content:
            stats.removed_empty_sections += 1
            continue
        if key in contents:
            if len(content) < DUPLICATE_MIN_CONTENT_LEN:
                stats.removed_empty_sections += 1
                continue
            stats.merged_duplicates += 1
            contents[key] = f"{contents[key]}\n{content}" if contents[key] else content
            continue
        keys.append(key)
        names[key] = canonical_section_name(section.name, template)
        contents[key] = content

    return [NormalizedSection(key=key, name=names[key], content=contents[key]) for key in keys]


def _append_bucket(buckets: dict[str, str], key: str, content: str, stats: NormalizeStats) -> None:
    trimmed = content.strip()
    if not trimmed:
        return
    existing = buckets[key]
    if existing.strip():
        stats.merged_duplicates += 1
        buckets[key] = f"{existing}\n{trimmed}"
    else:
        buckets[key] = existing + trimmed


def _move_matching(lines: list[str], predicate) -> tuple[list[str], list[str]]:
    moved = [line for line in lines if predicate(line)]
    kept = [line for line in lines if not predicate(line)]
    return moved, kept


def _normalize_soap_sections(note: StructuredNote, stats: NormalizeStats) -> list[NormalizedSection]:
    buckets: dict[str, str] = {key: "" for key in SOAP_CANONICAL_KEYS}

    for section in note.sections:
        key = normalized_section_key(section.name)
        content = section.content.strip()
        if not content:
            stats.removed_empty_sections += 1
            continue

        target = key if key in buckets else "narrative"
        existing = buckets[target]
        if existing.strip():
            stats.merged_duplicates += 1
            existing += "\n"
        if target == "narrative" and key != "narrative":
            existing += f"{section.name.strip()}: {content}"
        else:
            existing += content
        buckets[target] = existing

    narrative_lines: list[str] = []
    extracted_assessment: list[str] = []
    extracted_plan: list[str] = []
    for raw_line in buckets["narrative"].splitlines():
        line = raw_line.strip()
        if not line:
            continue
        assessment = strip_assessment_prefix(line)
        if assessment is not None:
            extracted_assessment.append(assessment)
            continue
        plan = strip_plan_prefix(line)
        if plan is not None:
            extracted_plan.append(plan)
            continue
        narrative_lines.append(line)

    if extracted_assessment:
        _append_bucket(buckets, "assessment", "\n".join(extracted_assessment), stats)
    if extracted_plan:
        _append_bucket(buckets, "plan", "\n".join(extracted_plan), stats)

    remaining = narrative_lines
    if len(buckets["subjective"].strip()) < SHORT_SECTION_LEN:
        moved, remaining = _move_matching(remaining, looks_subjective)
        if moved:
            stats.extracted_subjective_lines += len(moved)
            _append_bucket(buckets, "subjective", "\n".join(moved), stats)

    if len(buckets["objective"].strip()) < SHORT_SECTION_LEN:
        moved, remaining = _move_matching(remaining, looks_objective)
        if moved:
            stats.extracted_objective_lines += len(moved)
            _append_bucket(buckets, "objective", "\n".join(moved), stats)

    buckets["narrative"] = "\n".join(remaining)

    return [
        NormalizedSection(
            key=key,
            name=soap_display_name(key),
            content=buckets[key].strip() or EMPTY_SECTION_PLACEHOLDER,
        )
        for key in SOAP_CANONICAL_KEYS
    ]


def render_normalized_note(sections: Sequence[NormalizedSection]) -> str:
    out: list[str] = []
    for section in sections:
        out.append(f"{section.name}:")
        out.append(section.content)
        out.append("")
    return "\n".join(out).rstrip()


def normalize_notes(
    notes: Sequence[StructuredNote],
    template: Template,
) -> tuple[str, NormalizeStats]:
    stats = NormalizeStats()
    rendered: list[str] = []
    for idx, note in enumerate(notes):
        rendered.append(render_normalized_note(normalize_sections(note, template, stats)))
        if idx + 1 < len(notes):
            rendered.append(NOTE_SEPARATOR)
    return "\n\n".join(rendered), stats

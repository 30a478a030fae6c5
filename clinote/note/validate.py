from __future__ import annotations

"""
Validate structured notes against template section rules.

Design intent:
- Report content-quality problems as issues, never as exceptions.
- Keep issue order deterministic for identical input.
- Strict mode turns missing required sections into blocking errors.
"""

from dataclasses import dataclass
from typing import Literal

from clinote.note.keys import canonical_sections_for, normalized_section_key
from clinote.note.models import StructuredNote, Template

Severity = Literal["error", "warn", "info"]

LOW_CONFIDENCE_THRESHOLD = 0.6
SHORT_CONTENT_CHARS_STRICT = 10
SHORT_CONTENT_CHARS = 3
NARRATIVE_SECTION = "Narrative"


@dataclass(frozen=True)
class ValidationIssue:
    severity: Severity
    code: str
    message: str
    section: str | None = None


@dataclass(frozen=True)
class SectionSummary:
    name: str
    line_count: int
    char_count: int


@dataclass(frozen=True)
class TemplateRules:
    required: tuple[str, ...]
    recommended: tuple[str, ...]


TEMPLATE_RULES: dict[str, TemplateRules] = {
    "soap": TemplateRules(
        required=("Subjective", "Objective"),
        recommended=("Assessment", "Plan"),
    ),
    "hp": TemplateRules(
        required=(
            "Chief Complaint",
            "History of Present Illness",
            "Physical Exam",
            "Assessment",
            "Plan",
        ),
        recommended=("Medications", "Allergies"),
    ),
    "discharge": TemplateRules(
        required=(
            "Discharge Diagnosis",
            "Hospital Course",
            "Discharge Medications",
            "Follow-up",
        ),
        recommended=("Discharge Instructions", "Condition at Discharge"),
    ),
}


def _collect_canonical(note: StructuredNote, template: Template) -> tuple[list[str], dict[str, list[str]]]:
    order: list[str] = []
    contents: dict[str, list[str]] = {}
    for section in note.sections:
        for canonical in canonical_sections_for(section.name, template):
            if canonical not in contents:
                order.append(canonical)
                contents[canonical] = []
            contents[canonical].append(section.content.strip())
    return order, contents


def validate_note(note: StructuredNote, template: Template, strict: bool) -> list[ValidationIssue]:
    rules = TEMPLATE_RULES[template]
    issues: list[ValidationIssue] = []
    missing_severity: Severity = "error" if strict else "warn"
    recommended_severity: Severity = "warn" if strict else "info"
    short_threshold = SHORT_CONTENT_CHARS_STRICT if strict else SHORT_CONTENT_CHARS

    if not any(section.content.strip() for section in note.sections):
        issues.append(
            ValidationIssue(
                severity="error",
                code="empty_note",
                message="Note has no parseable content.",
            )
        )

    order, contents = _collect_canonical(note, template)

    for name in rules.required:
        found = contents.get(name)
        if found is None:
            issues.append(
                ValidationIssue(
                    severity=missing_severity,
                    code="missing_required",
                    section=name,
                    message=f"Missing required section: {name}.",
                )
            )
        elif not any(found):
            issues.append(
                ValidationIssue(
                    severity=missing_severity,
                    code="missing_required",
                    section=name,
                    message=f"Required section is empty: {name}.",
                )
            )

    for name in rules.recommended:
        if not any(contents.get(name, [])):
            issues.append(
                ValidationIssue(
                    severity=recommended_severity,
                    code="missing_recommended",
                    section=name,
                    message=f"Recommended section not found: {name}.",
                )
            )

    for name in order:
        if name == NARRATIVE_SECTION:
            continue
        found = contents[name]
        if len(found) > 1:
            issues.append(
                ValidationIssue(
                    severity="warn",
                    code="duplicate_section",
                    section=name,
                    message=f"Section appears {len(found)} times: {name}.",
                )
            )
        merged = "\n".join(item for item in found if item)
        if merged and len(merged) < short_threshold:
            issues.append(
                ValidationIssue(
                    severity="warn",
                    code="short_section",
                    section=name,
                    message=f"Section content is very short: {name}.",
                )
            )

    if strict:
        for section in note.sections:
            if normalized_section_key(section.name) == "narrative":
                continue
            mapped = canonical_sections_for(section.name, template)
            if not mapped:
                issues.append(
                    ValidationIssue(
                        severity="info",
                        code="unrecognized_section",
                        section=None,
                        message=f"Section not part of the {template} template: {section.name.strip()}.",
                    )
                )
            elif section.confidence < LOW_CONFIDENCE_THRESHOLD:
                issues.append(
                    ValidationIssue(
                        severity="info",
                        code="low_confidence",
                        section=mapped[0],
                        message=(
                            f"Section {section.name.strip()} was inferred "
                            f"(confidence {section.confidence:.2f})."
                        ),
                    )
                )

    return issues


def summarize_sections(note: StructuredNote) -> list[SectionSummary]:
    summaries: list[SectionSummary] = []
    for section in note.sections:
        content = section.content.strip()
        summaries.append(
            SectionSummary(
                name=section.name.strip(),
                line_count=len(content.splitlines()),
                char_count=len(content),
            )
        )
    return summaries

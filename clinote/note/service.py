from __future__ import annotations

"""
Request-level operations shared by the HTTP API and the CLI.

Design intent:
- Resolve template/output selectors once and fail fast on unknown input.
- Run strict SOAP inference before validating or normalizing.
- Keep every call a pure function of (text, template, strict, config).
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from clinote.internal_core.config import NoteConfig, load_config
from clinote.internal_core.contracts import NormalizeOutput, ValidationNotePayload, ValidationPayload
from clinote.note.inference import apply_soap_inference
from clinote.note.models import NoteFormat, StructuredNote, Template
from clinote.note.normalize import normalize_notes
from clinote.note.parser import ParseOptions, parse_notes
from clinote.note.render import OutputFormat, render_notes
from clinote.note.validate import summarize_sections, validate_note

logger = logging.getLogger(__name__)

UNSUPPORTED_TEMPLATE_MESSAGE = "Unsupported template. Use one of: soap, hp, discharge."
UNSUPPORTED_OUTPUT_MESSAGE = "Unsupported output format. Use one of: markdown, json, csv."
INFERRED_INFO_MESSAGE = "Inferred Subjective/Objective from unstructured text (web-only)."
NO_STRICT_DETAILS_MESSAGE = "No strict-validation error details were produced."


class UnsupportedTemplateError(ValueError):
    """Raised when a template selector matches no known template."""


class UnsupportedOutputFormatError(ValueError):
    """Raised when an output selector matches no known format."""


class StrictValidationError(ValueError):
    """Raised when strict conversion finds error-severity issues."""

    def __init__(self, lines: Sequence[str]):
        self.lines = list(lines)
        super().__init__("Strict validation failed:\n" + "\n".join(self.lines))


@dataclass(frozen=True)
class TemplateSpec:
    key: str
    note_format: NoteFormat
    validation_template: Template


_TEMPLATE_ALIASES: dict[str, TemplateSpec] = {
    "soap": TemplateSpec(key="soap", note_format="soap", validation_template="soap"),
    "hp": TemplateSpec(key="hp", note_format="hp", validation_template="hp"),
    "h&p": TemplateSpec(key="hp", note_format="hp", validation_template="hp"),
    "discharge": TemplateSpec(key="discharge", note_format="discharge", validation_template="discharge"),
    "discharge-summary": TemplateSpec(
        key="discharge", note_format="discharge", validation_template="discharge"
    ),
    "discharge summary": TemplateSpec(
        key="discharge", note_format="discharge", validation_template="discharge"
    ),
}

_OUTPUT_ALIASES: dict[str, OutputFormat] = {
    "markdown": "markdown",
    "md": "markdown",
    "json": "json",
    "csv": "csv",
}


def normalize_template_key(template: str) -> str:
    return (template or "").strip().lower()


def parse_template_spec(template: str) -> TemplateSpec | None:
    return _TEMPLATE_ALIASES.get(normalize_template_key(template))


def resolve_template(template: str) -> TemplateSpec:
    spec = parse_template_spec(template)
    if spec is None:
        raise UnsupportedTemplateError(UNSUPPORTED_TEMPLATE_MESSAGE)
    return spec


def resolve_output_format(output: str) -> OutputFormat:
    resolved = _OUTPUT_ALIASES.get((output or "").strip().lower())
    if resolved is None:
        raise UnsupportedOutputFormatError(UNSUPPORTED_OUTPUT_MESSAGE)
    return resolved


def ping() -> str:
    return "pong"


def default_format() -> str:
    return "soap"


def _parse(note_text: str, spec: TemplateSpec, config: NoteConfig) -> list[StructuredNote]:
    return parse_notes(
        note_text,
        spec.note_format,
        config,
        None,
        0,
        ParseOptions(apply_heuristics=config.CLINOTE_ENABLE_FALLBACK_HEURISTICS),
    )


def build_validation_payload(
    notes: Sequence[StructuredNote],
    spec: TemplateSpec,
    strict: bool,
    inferred_flags: Sequence[bool],
) -> ValidationPayload:
    note_payloads: list[ValidationNotePayload] = []
    ok = True
    for idx, note in enumerate(notes):
        errors: list[str] = []
        warnings: list[str] = []
        info: list[str] = []
        for issue in validate_note(note, spec.validation_template, strict):
            if issue.severity == "error":
                errors.append(issue.message)
            elif issue.severity == "warn":
                warnings.append(issue.message)
            else:
                info.append(issue.message)
        if idx < len(inferred_flags) and inferred_flags[idx]:
            info.append(INFERRED_INFO_MESSAGE)
        if errors:
            ok = False
        note_payloads.append(
            ValidationNotePayload(
                note_index=note.note_index,
                errors=errors,
                warnings=warnings,
                info=info,
            )
        )
    return ValidationPayload(ok=ok, template=spec.key, notes=note_payloads)


def strict_error_lines(payload: ValidationPayload) -> list[str]:
    lines = [
        f"Note {note.note_index}: {error}"
        for note in payload.notes
        for error in note.errors
    ]
    return lines or [NO_STRICT_DETAILS_MESSAGE]


def convert(
    note_text: str,
    template: str,
    output: str,
    strict: bool,
    config: NoteConfig | None = None,
) -> str:
    spec = resolve_template(template)
    output_format = resolve_output_format(output)
    resolved_config = config or load_config()
    notes = _parse(note_text, spec, resolved_config)
    notes, inferred_flags = apply_soap_inference(
        note_text, notes, spec.validation_template, strict, resolved_config
    )
    payload = build_validation_payload(notes, spec, strict, inferred_flags)
    if strict and not payload.ok:
        lines = strict_error_lines(payload)
        logger.warning("strict conversion refused template=%s error_lines=%d", spec.key, len(lines))
        raise StrictValidationError(lines)
    return render_notes(notes, output_format, resolved_config.CLINOTE_CSV_LAYOUT)


def validate(
    note_text: str,
    template: str,
    strict: bool,
    config: NoteConfig | None = None,
) -> ValidationPayload:
    spec = parse_template_spec(template)
    if spec is None:
        return ValidationPayload(
            ok=False,
            template=normalize_template_key(template),
            notes=[ValidationNotePayload(note_index=1, errors=[UNSUPPORTED_TEMPLATE_MESSAGE])],
        )
    resolved_config = config or load_config()
    notes = _parse(note_text, spec, resolved_config)
    notes, inferred_flags = apply_soap_inference(
        note_text, notes, spec.validation_template, strict, resolved_config
    )
    return build_validation_payload(notes, spec, strict, inferred_flags)


def normalize_with_stats(
    note_text: str,
    template: str,
    config: NoteConfig | None = None,
) -> NormalizeOutput:
    spec = resolve_template(template)
    resolved_config = config or load_config()
    notes = _parse(note_text, spec, resolved_config)
    if spec.validation_template == "soap":
        notes, _ = apply_soap_inference(note_text, notes, "soap", True, resolved_config)
    normalized, stats = normalize_notes(notes, spec.validation_template)
    return NormalizeOutput(
        normalized=normalized,
        removed_empty_sections=stats.removed_empty_sections,
        merged_duplicates=stats.merged_duplicates,
        extracted_subjective_lines=stats.extracted_subjective_lines,
        extracted_objective_lines=stats.extracted_objective_lines,
    )


def normalize(note_text: str, template: str, config: NoteConfig | None = None) -> str:
    return normalize_with_stats(note_text, template, config).normalized


def preview_sections(note_text: str, template: str, config: NoteConfig | None = None) -> str:
    spec = resolve_template(template)
    notes = _parse(note_text, spec, config or load_config())
    out: list[str] = []
    for idx, note in enumerate(notes):
        out.append(f"Note {idx + 1}:")
        for summary in summarize_sections(note):
            out.append(f"- {summary.name}: {summary.line_count} lines, {summary.char_count} chars")
        if idx + 1 < len(notes):
            out.append("")
    return "\n".join(out)

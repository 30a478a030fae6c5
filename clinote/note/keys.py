from __future__ import annotations

"""
Heading keys and per-format canonical section tables.

Design intent:
- Compare source headers independent of casing and punctuation.
- Keep header recognition table-driven so a new template is a localized change.
"""

import re

from clinote.note.models import NOTE_FORMATS, NoteFormat, Template

_HEADER_LINE_RE = re.compile(r"^[#*\s]*([A-Za-z][A-Za-z0-9 &/()\-]{0,48}?)\s*\**\s*:\s*\**\s*(.*)$")
_MAX_BARE_HEADER_LEN = 48
# Shorter headers (S, O, A, P, Dx, CC) need the `Header:` form.
_MIN_BARE_HEADER_KEY_LEN = 3

SOAP_CANONICAL_KEYS: tuple[str, ...] = ("subjective", "objective", "assessment", "plan", "narrative")

_SOAP_DISPLAY_NAMES = {
    "subjective": "Subjective",
    "objective": "Objective",
    "assessment": "Assessment",
    "plan": "Plan",
    "narrative": "Narrative",
}

_SECTION_KEY_ABBREVIATIONS = {
    "s": "subjective",
    "o": "objective",
    "a": "assessment",
    "dx": "assessment",
    "diagnosis": "assessment",
    "p": "plan",
}

# Canonical display name -> recognized header spellings, per format.
_HEADER_ALIASES: dict[str, dict[str, tuple[str, ...]]] = {
    "soap": {
        "Subjective": ("S", "Subjective"),
        "Objective": ("O", "Objective"),
        "Assessment": ("A", "Assessment", "Dx", "Diagnosis"),
        "Plan": ("P", "Plan"),
        "Narrative": ("Narrative",),
    },
    "hp": {
        "Chief Complaint": ("CC", "Chief Complaint", "Reason for Visit"),
        "History of Present Illness": (
            "HPI",
            "History of Present Illness",
            "History of Presenting Illness",
        ),
        "Past Medical History": ("PMH", "PMHx", "Past Medical History"),
        "Past Surgical History": ("PSH", "PSHx", "Past Surgical History"),
        "Medications": ("Meds", "Medications", "Home Medications", "Current Medications"),
        "Allergies": ("Allergies", "Allergy"),
        "Social History": ("SH", "Social History"),
        "Family History": ("FH", "Family History"),
        "Review of Systems": ("ROS", "Review of Systems"),
        "Vitals": ("Vitals", "Vital Signs", "VS"),
        "Physical Exam": ("PE", "Exam", "Physical Exam", "Physical Examination"),
        "Labs": ("Labs", "Laboratory", "Lab Results"),
        "Assessment": ("A", "Assessment", "Impression", "Dx", "Diagnosis"),
        "Plan": ("P", "Plan"),
        "Assessment and Plan": (
            "A/P",
            "A&P",
            "Assessment and Plan",
            "Assessment/Plan",
            "Impression and Plan",
        ),
        "Narrative": ("Narrative",),
    },
    "discharge": {
        "Admission Diagnosis": ("Admission Diagnosis", "Admitting Diagnosis", "Admission Dx"),
        "Discharge Diagnosis": (
            "Discharge Diagnosis",
            "Discharge Diagnoses",
            "Final Diagnosis",
            "Discharge Dx",
        ),
        "Hospital Course": ("Hospital Course", "Brief Hospital Course"),
        "Procedures": ("Procedures", "Procedures Performed"),
        "Consults": ("Consults", "Consultations"),
        "Discharge Medications": (
            "Discharge Medications",
            "Discharge Meds",
            "Medications at Discharge",
        ),
        "Condition at Discharge": ("Condition at Discharge", "Discharge Condition", "Condition"),
        "Discharge Instructions": (
            "Discharge Instructions",
            "Instructions",
            "Patient Instructions",
        ),
        "Follow-up": ("Follow-up", "Followup", "Follow-up Appointments"),
        "Disposition": ("Disposition",),
        "Narrative": ("Narrative",),
    },
}

# Combined headings satisfy more than one canonical section.
_COMBINED_SECTIONS: dict[str, tuple[str, ...]] = {
    "Assessment and Plan": ("Assessment", "Plan"),
}


def normalize_heading_key(raw: str) -> str:
    cleaned = (raw or "").strip()
    if cleaned.endswith(":"):
        cleaned = cleaned[:-1]
    out: list[str] = []
    last_space = False
    for ch in cleaned:
        if ch.isascii() and ch.isalnum():
            out.append(ch.upper())
            last_space = False
        elif not last_space:
            # Separators, including - / &, collapse into one space.
            out.append(" ")
            last_space = True
    return "".join(out).strip()


def _build_lookup() -> dict[str, dict[str, str]]:
    lookup: dict[str, dict[str, str]] = {}
    for fmt, table in _HEADER_ALIASES.items():
        per_format: dict[str, str] = {}
        for canonical, aliases in table.items():
            for alias in (canonical, *aliases):
                per_format.setdefault(normalize_heading_key(alias), canonical)
        lookup[fmt] = per_format
    return lookup


_HEADING_LOOKUP = _build_lookup()


def split_header_line(line: str) -> tuple[str, str] | None:
    """Split a candidate header line into (header text, inline content).

    Accepts `Header: content`, a bare `Header` line, and markdown decorations
    such as `## Header` or `**Header:**`. A bare line only counts when its
    heading key has at least three characters, so a content line such as `a`
    stays content. Recognition is left to the caller.
    """
    stripped = (line or "").strip()
    if not stripped:
        return None
    match = _HEADER_LINE_RE.match(stripped)
    if match:
        return match.group(1).strip(), match.group(2)
    bare = stripped.strip("#*").strip().rstrip(":").strip()
    if len(bare) > _MAX_BARE_HEADER_LEN:
        return None
    if len(normalize_heading_key(bare)) >= _MIN_BARE_HEADER_KEY_LEN:
        return bare, ""
    return None


def normalized_section_key(name: str) -> str:
    key = (name or "").strip().lower()
    return _SECTION_KEY_ABBREVIATIONS.get(key, key)


def recognize_heading(raw: str, note_format: NoteFormat) -> str | None:
    """Return the canonical display name for a source header, or None."""
    key = normalize_heading_key(raw)
    if not key:
        return None
    return _HEADING_LOOKUP[note_format].get(key)


def recognize_heading_any(raw: str) -> str | None:
    for fmt in NOTE_FORMATS:
        found = recognize_heading(raw, fmt)
        if found is not None:
            return found
    return None


def canonical_sections_for(raw: str, template: Template) -> tuple[str, ...]:
    canonical = recognize_heading(raw, template)
    if canonical is None:
        return ()
    return _COMBINED_SECTIONS.get(canonical, (canonical,))


def canonical_section_name(raw_name: str, template: Template) -> str:
    if template == "soap":
        key = normalized_section_key(raw_name)
        return _SOAP_DISPLAY_NAMES.get(key, raw_name.strip())
    canonical = recognize_heading(raw_name, template)
    return canonical if canonical is not None else raw_name.strip()


def section_merge_key(raw_name: str, template: Template) -> str:
    if template != "soap":
        canonical = recognize_heading(raw_name, template)
        if canonical is not None:
            return canonical.lower()
    return normalized_section_key(raw_name)


def soap_display_name(key: str) -> str:
    return _SOAP_DISPLAY_NAMES[key]

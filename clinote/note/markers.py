from __future__ import annotations

"""
Lexical markers used to recover SOAP content from unstructured lines.

Design intent:
- Keep marker tables small, explicit and independently testable.
- Preserve scan order: assessment before plan, subjective before objective.
"""

from typing import Literal

LineClass = Literal["subjective", "objective"]

SUBJECTIVE_MARKERS: tuple[str, ...] = (
    "cc",
    "chief complaint",
    "hpi",
    "pmh",
    "history",
    "meds",
    "medication",
    "allerg",
    "subjective",
)

OBJECTIVE_MARKERS: tuple[str, ...] = (
    "vitals",
    "bp",
    "hr",
    "temp",
    "spo2",
    "o2 sat",
    "exam",
    "physical",
    "objective",
    "neuro",
)

ASSESSMENT_PREFIXES: tuple[str, ...] = ("assessment:", "dx:", "a:", "a ")
PLAN_PREFIXES: tuple[str, ...] = ("plan:", "tx:", "p:", "plan ", "p ")


def _contains_any(line: str, markers: tuple[str, ...]) -> bool:
    return any(marker in line for marker in markers)


def looks_subjective(line: str) -> bool:
    return _contains_any(line.lower(), SUBJECTIVE_MARKERS)


def looks_objective(line: str) -> bool:
    return _contains_any(line.lower(), OBJECTIVE_MARKERS)


def classify_line(line: str) -> LineClass | None:
    """Classify one line as subjective/objective by substring markers.

    Subjective wins when a line carries markers of both kinds.
    """
    lowered = line.strip().lower()
    if not lowered:
        return None
    if _contains_any(lowered, SUBJECTIVE_MARKERS):
        return "subjective"
    if _contains_any(lowered, OBJECTIVE_MARKERS):
        return "objective"
    return None


def _strip_known_prefix(line: str, prefixes: tuple[str, ...]) -> str | None:
    lowered = line.lower()
    for prefix in prefixes:
        if lowered.startswith(prefix):
            stripped = line[len(prefix):].strip()
            return stripped or None
    return None


def strip_assessment_prefix(line: str) -> str | None:
    return _strip_known_prefix(line, ASSESSMENT_PREFIXES)


def strip_plan_prefix(line: str) -> str | None:
    return _strip_known_prefix(line, PLAN_PREFIXES)

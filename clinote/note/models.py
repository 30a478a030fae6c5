from __future__ import annotations

"""
Structured note types shared by parser, normalizer and validator.

Design intent:
- Keep note formats and templates as closed unions.
- Sections keep the raw header and raw body exactly as found in the source.
"""

from dataclasses import dataclass, field
from typing import Literal, get_args

NoteFormat = Literal["soap", "hp", "discharge"]
Template = Literal["soap", "hp", "discharge"]

NOTE_FORMATS: tuple[str, ...] = get_args(NoteFormat)

EXPLICIT_HEADER_CONFIDENCE = 1.0
INFERRED_CONFIDENCE = 0.55
NARRATIVE_CONFIDENCE = 0.35


@dataclass(frozen=True)
class Section:
    name: str
    content: str
    confidence: float = EXPLICIT_HEADER_CONFIDENCE

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError("Section.confidence must be within [0.0, 1.0]")


@dataclass(frozen=True)
class StructuredNote:
    note_index: int
    sections: list[Section] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.note_index < 1:
            raise ValueError("StructuredNote.note_index must be >= 1")

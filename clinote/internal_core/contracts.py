from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ValidationNotePayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    note_index: int = Field(ge=1)
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    info: List[str] = Field(default_factory=list)


class ValidationPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    ok: bool
    template: str
    notes: List[ValidationNotePayload] = Field(default_factory=list)


class NormalizeOutput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    normalized: str
    removed_empty_sections: int = Field(default=0, ge=0)
    merged_duplicates: int = Field(default=0, ge=0)
    extracted_subjective_lines: int = Field(default=0, ge=0)
    extracted_objective_lines: int = Field(default=0, ge=0)


class SectionPreview(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    line_count: int = Field(ge=0)
    char_count: int = Field(ge=0)

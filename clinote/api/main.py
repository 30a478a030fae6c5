from __future__ import annotations

"""
HTTP API surface for clinote.

Design intent:
- Keep API orchestration thin and typed.
- Delegate parsing, normalization and validation to clinote.note.service.
- Map selector errors to 400, strict failures to 422, marshalling failures to 500.
"""

import logging
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError

from clinote.internal_core.config import NoteConfig, load_config
from clinote.internal_core.contracts import NormalizeOutput, SectionPreview, ValidationPayload
from clinote.note import service
from clinote.note.parser import ParseOptions, parse_notes
from clinote.note.validate import summarize_sections


class NoteTextRequest(BaseModel):
    note_text: str = ""
    template: str = Field(default="soap", min_length=1, max_length=64)


class ConvertRequest(NoteTextRequest):
    output: str = Field(default="markdown", min_length=1, max_length=32)
    strict: bool = False


class ValidateRequest(NoteTextRequest):
    strict: bool = False


class ConvertResponse(BaseModel):
    output: str
    content: str
    debug: dict[str, Any] = Field(default_factory=dict)


class NormalizeResponse(BaseModel):
    normalized: str


class PreviewNote(BaseModel):
    note_index: int
    sections: list[SectionPreview] = Field(default_factory=list)


class PreviewResponse(BaseModel):
    text: str
    notes: list[PreviewNote] = Field(default_factory=list)


app = FastAPI(title="clinote note structuring service")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _get_note_config() -> NoteConfig:
    existing = getattr(app.state, "note_config", None)
    if isinstance(existing, NoteConfig):
        return existing
    return load_config()


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/ping")
async def ping() -> dict[str, str]:
    return {"reply": service.ping()}


@app.get("/formats/default")
async def default_format() -> dict[str, str]:
    return {"template": service.default_format()}


@app.post("/notes/convert", response_model=ConvertResponse)
async def notes_convert(payload: ConvertRequest) -> ConvertResponse:
    try:
        content = service.convert(
            payload.note_text,
            payload.template,
            payload.output,
            payload.strict,
            _get_note_config(),
        )
    except service.StrictValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=500, detail=f"Internal error: {exc}") from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ConvertResponse(
        output=service.resolve_output_format(payload.output),
        content=content,
        debug={"template": service.resolve_template(payload.template).key, "strict": payload.strict},
    )


@app.post("/notes/validate", response_model=ValidationPayload)
async def notes_validate(payload: ValidateRequest) -> ValidationPayload:
    try:
        return service.validate(payload.note_text, payload.template, payload.strict, _get_note_config())
    except ValidationError as exc:
        logger.warning("validation payload marshalling failed: %s", exc.error_count())
        raise HTTPException(status_code=500, detail=f"Internal error: {exc}") from exc


@app.post("/notes/normalize", response_model=NormalizeResponse)
async def notes_normalize(payload: NoteTextRequest) -> NormalizeResponse:
    try:
        normalized = service.normalize(payload.note_text, payload.template, _get_note_config())
    except ValidationError as exc:
        raise HTTPException(status_code=500, detail=f"Internal error: {exc}") from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return NormalizeResponse(normalized=normalized)


@app.post("/notes/normalize/stats", response_model=NormalizeOutput)
async def notes_normalize_with_stats(payload: NoteTextRequest) -> NormalizeOutput:
    try:
        return service.normalize_with_stats(payload.note_text, payload.template, _get_note_config())
    except ValidationError as exc:
        raise HTTPException(status_code=500, detail=f"Internal error: {exc}") from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.post("/notes/preview", response_model=PreviewResponse)
async def notes_preview(payload: NoteTextRequest) -> PreviewResponse:
    config = _get_note_config()
    try:
        text = service.preview_sections(payload.note_text, payload.template, config)
        spec = service.resolve_template(payload.template)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    notes = parse_notes(
        payload.note_text,
        spec.note_format,
        config,
        options=ParseOptions(apply_heuristics=config.CLINOTE_ENABLE_FALLBACK_HEURISTICS),
    )
    return PreviewResponse(
        text=text,
        notes=[
            PreviewNote(
                note_index=note.note_index,
                sections=[
                    SectionPreview(
                        name=item.name,
                        line_count=item.line_count,
                        char_count=item.char_count,
                    )
                    for item in summarize_sections(note)
                ],
            )
            for note in notes
        ],
    )

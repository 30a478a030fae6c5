from __future__ import annotations

"""
Split a document holding one or more clinical notes into per-note spans.

Design intent:
- Keep source lines verbatim inside each span.
- Always return at least one span, even for text without any separator.
- Span order follows document order; it drives note_index assignment.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Literal

from clinote.internal_core.config import BUNDLE_MODES, NoteConfig
from clinote.note.keys import recognize_heading_any, split_header_line

BundleMode = Literal["auto", "delimiter", "heuristic", "single"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BundleMetadata:
    mode: str
    delimiter_hits: int = 0
    boundaries: list[int] = field(default_factory=list)


def _resolve_mode(mode: str | None, config: NoteConfig) -> str:
    resolved = (mode or config.CLINOTE_BUNDLE_MODE or "auto").strip().lower()
    if resolved not in BUNDLE_MODES:
        raise ValueError(
            f"Unsupported bundle mode: {mode!r}. Use one of: {', '.join(BUNDLE_MODES)}."
        )
    return resolved


def _delimiter_re(config: NoteConfig) -> re.Pattern[str]:
    return re.compile(config.CLINOTE_BUNDLE_DELIMITER)


def _line_heading(line: str) -> str | None:
    split = split_header_line(line)
    if split is None:
        return None
    return recognize_heading_any(split[0])


def _split_on_delimiters(lines: list[str], pattern: re.Pattern[str]) -> tuple[list[list[str]], list[int], int]:
    spans: list[list[str]] = [[]]
    starts: list[int] = [0]
    hits = 0
    for idx, line in enumerate(lines):
        if pattern.match(line):
            hits += 1
            spans.append([])
            starts.append(idx + 1)
            continue
        spans[-1].append(line)
    return spans, starts, hits


def _split_on_repeated_opening(lines: list[str]) -> tuple[list[list[str]], list[int]]:
    spans: list[list[str]] = [[]]
    starts: list[int] = [0]
    opening: str | None = None
    seen_other = False
    for idx, line in enumerate(lines):
        heading = _line_heading(line)
        if heading is not None:
            if opening is None:
                opening = heading
            elif heading == opening and seen_other:
                spans.append([])
                starts.append(idx)
                seen_other = False
            elif heading != opening:
                seen_other = True
        spans[-1].append(line)
    return spans, starts


def split_bundle(
    raw_text: str,
    mode: str | None,
    config: NoteConfig,
) -> tuple[list[str], BundleMetadata]:
    resolved = _resolve_mode(mode, config)
    text = raw_text or ""
    if resolved == "single":
        logger.debug("split_bundle mode=single spans=1")
        return [text], BundleMetadata(mode=resolved, boundaries=[0])

    # Only "\n" separates lines; \r, form feeds and other breaks stay inside the span.
    lines = text.split("\n")
    delimiter_hits = 0
    pattern = _delimiter_re(config)
    if resolved in {"auto", "delimiter"}:
        spans, starts, delimiter_hits = _split_on_delimiters(lines, pattern)
        if resolved == "auto" and delimiter_hits == 0:
            resolved = "heuristic"
    if resolved == "heuristic":
        spans, starts = _split_on_repeated_opening(lines)
    elif resolved == "auto":
        resolved = "delimiter"

    out: list[str] = []
    boundaries: list[int] = []
    for span_lines, start in zip(spans, starts):
        joined = "\n".join(span_lines)
        if not joined.strip():
            continue
        out.append(joined)
        boundaries.append(start)

    if not out:
        out = [text]
        boundaries = [0]

    logger.debug("split_bundle mode=%s spans=%d delimiter_hits=%d", resolved, len(out), delimiter_hits)
    return out, BundleMetadata(mode=resolved, delimiter_hits=delimiter_hits, boundaries=boundaries)

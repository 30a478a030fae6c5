from __future__ import annotations

"""
Render structured notes as markdown, JSON or CSV text.
"""

import csv
import io
import json
from typing import Any, Literal, Sequence

from clinote.note.models import StructuredNote

OutputFormat = Literal["markdown", "json", "csv"]
CsvLayout = Literal["long", "wide"]


def _notes_to_dicts(notes: Sequence[StructuredNote]) -> list[dict[str, Any]]:
    return [
        {
            "note_index": note.note_index,
            "sections": [
                {
                    "name": section.name.strip(),
                    "content": section.content.strip(),
                    "confidence": round(section.confidence, 2),
                }
                for section in note.sections
            ],
        }
        for note in notes
    ]


def render_markdown(notes: Sequence[StructuredNote]) -> str:
    blocks: list[str] = []
    for note in notes:
        lines = [f"# Note {note.note_index}", ""]
        for section in note.sections:
            lines.append(f"## {section.name.strip()}")
            lines.append("")
            lines.append(section.content.strip() or "_(empty)_")
            lines.append("")
        blocks.append("\n".join(lines).rstrip())
    return "\n\n".join(blocks) + "\n"


def render_json(notes: Sequence[StructuredNote]) -> str:
    return json.dumps({"notes": _notes_to_dicts(notes)}, ensure_ascii=False, indent=2)


def render_csv(notes: Sequence[StructuredNote], layout: CsvLayout = "long") -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    if layout == "wide":
        columns: list[str] = []
        rows: list[dict[str, str]] = []
        for note in notes:
            row: dict[str, str] = {}
            for section in note.sections:
                name = section.name.strip()
                if name not in columns:
                    columns.append(name)
                content = section.content.strip()
                row[name] = f"{row[name]}\n{content}" if name in row else content
            rows.append(row)
        writer.writerow(["note_index", *columns])
        for note, row in zip(notes, rows):
            writer.writerow([note.note_index, *[row.get(name, "") for name in columns]])
        return buffer.getvalue()

    writer.writerow(["note_index", "section", "content", "confidence"])
    for note in notes:
        for section in note.sections:
            writer.writerow(
                [
                    note.note_index,
                    section.name.strip(),
                    section.content.strip(),
                    f"{section.confidence:.2f}",
                ]
            )
    return buffer.getvalue()


def render_notes(
    notes: Sequence[StructuredNote],
    output_format: OutputFormat,
    csv_layout: str = "long",
) -> str:
    if output_format == "markdown":
        return render_markdown(notes)
    if output_format == "json":
        return render_json(notes)
    if output_format == "csv":
        return render_csv(notes, "wide" if csv_layout == "wide" else "long")
    raise ValueError(f"Unsupported output format: {output_format!r}")

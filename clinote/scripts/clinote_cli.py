from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from clinote.internal_core.config import load_config
from clinote.note import service


def _read_input(path_arg: str) -> str:
    if path_arg == "-":
        return sys.stdin.read()
    path = Path(path_arg).expanduser()
    if not path.exists():
        raise SystemExit(f"input file not found: {path}")
    return path.read_text(encoding="utf-8", errors="replace")


def _write_output(content: str, out_arg: str | None) -> None:
    if not out_arg:
        sys.stdout.write(content if content.endswith("\n") else content + "\n")
        return
    path = Path(out_arg).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Structure, normalize and validate free-form clinical notes."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    def add_common(cmd: argparse.ArgumentParser) -> None:
        cmd.add_argument("input", help="Path to note text (use - for stdin)")
        cmd.add_argument(
            "--template",
            default=None,
            help="soap, hp/h&p, discharge (default: CLINOTE_DEFAULT_TEMPLATE or soap)",
        )

    convert = sub.add_parser("convert", help="Render structured notes as markdown/json/csv.")
    add_common(convert)
    convert.add_argument("--output", default="markdown", help="markdown/md, json, csv")
    convert.add_argument("--strict", action="store_true", help="Refuse output on validation errors.")
    convert.add_argument("--out", default=None, help="Write to this file instead of stdout.")

    validate = sub.add_parser("validate", help="Print the validation payload as JSON.")
    add_common(validate)
    validate.add_argument("--strict", action="store_true")

    normalize = sub.add_parser("normalize", help="Print normalized note text.")
    add_common(normalize)
    normalize.add_argument("--stats", action="store_true", help="Print counters as JSON instead.")

    preview = sub.add_parser("preview", help="List parsed sections per note.")
    add_common(preview)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config()
    logging.basicConfig(level=getattr(logging, config.CLINOTE_LOG_LEVEL, logging.INFO))
    template = args.template or config.CLINOTE_DEFAULT_TEMPLATE
    text = _read_input(args.input)

    try:
        if args.command == "convert":
            _write_output(service.convert(text, template, args.output, args.strict, config), args.out)
            return 0
        if args.command == "validate":
            payload = service.validate(text, template, args.strict, config)
            print(json.dumps(payload.model_dump(), indent=2))
            return 0 if payload.ok else 1
        if args.command == "normalize":
            if args.stats:
                print(json.dumps(service.normalize_with_stats(text, template, config).model_dump(), indent=2))
            else:
                print(service.normalize(text, template, config))
            return 0
        print(service.preview_sections(text, template, config))
        return 0
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())

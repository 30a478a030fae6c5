from __future__ import annotations

import os
import re
from dataclasses import dataclass

BUNDLE_MODES = ("auto", "delimiter", "heuristic", "single")
CSV_LAYOUTS = ("long", "wide")
TEMPLATE_KEYS = ("soap", "hp", "discharge")

DEFAULT_BUNDLE_DELIMITER = r"^\s*(?:-{3,}|={3,}|\*{3,})\s*$"


def _getenv_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return default if value is None else value


def _getenv_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _getenv_choice(name: str, default: str, choices: tuple[str, ...]) -> str:
    value = _getenv_str(name, default).strip().lower()
    if value not in choices:
        return default
    return value


def _getenv_pattern(name: str, default: str) -> str:
    value = _getenv_str(name, default) or default
    try:
        re.compile(value)
    except re.error:
        return default
    return value


@dataclass(frozen=True)
class NoteConfig:
    CLINOTE_BUNDLE_MODE: str = "auto"
    CLINOTE_BUNDLE_DELIMITER: str = DEFAULT_BUNDLE_DELIMITER
    CLINOTE_ENABLE_FALLBACK_HEURISTICS: bool = False
    CLINOTE_CSV_LAYOUT: str = "long"
    CLINOTE_DEFAULT_TEMPLATE: str = "soap"
    CLINOTE_LOG_LEVEL: str = "INFO"


def load_config() -> NoteConfig:
    return NoteConfig(
        CLINOTE_BUNDLE_MODE=_getenv_choice("CLINOTE_BUNDLE_MODE", "auto", BUNDLE_MODES),
        CLINOTE_BUNDLE_DELIMITER=_getenv_pattern("CLINOTE_BUNDLE_DELIMITER", DEFAULT_BUNDLE_DELIMITER),
        CLINOTE_ENABLE_FALLBACK_HEURISTICS=_getenv_bool("CLINOTE_ENABLE_FALLBACK_HEURISTICS", False),
        CLINOTE_CSV_LAYOUT=_getenv_choice("CLINOTE_CSV_LAYOUT", "long", CSV_LAYOUTS),
        CLINOTE_DEFAULT_TEMPLATE=_getenv_choice("CLINOTE_DEFAULT_TEMPLATE", "soap", TEMPLATE_KEYS),
        CLINOTE_LOG_LEVEL=_getenv_str("CLINOTE_LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )

from clinote.note.markers import (
    classify_line,
    looks_objective,
    looks_subjective,
    strip_assessment_prefix,
    strip_plan_prefix,
)


def test_classify_line_prefers_subjective() -> None:
    assert classify_line("BP 120/80, HR 72") == "objective"
    assert classify_line("Pt on meds, BP stable") == "subjective"
    assert classify_line("feels fine") is None
    assert classify_line("   ") is None


def test_marker_checks_ignore_case() -> None:
    assert looks_subjective("ALLERGIES: none known")
    assert looks_objective("SpO2 97% on room air")
    assert not looks_objective("feels fine")


def test_strip_assessment_prefix() -> None:
    assert strip_assessment_prefix("Dx: viral URI") == "viral URI"
    assert strip_assessment_prefix("Assessment: stable") == "stable"
    assert strip_assessment_prefix("A:   ") is None
    assert strip_assessment_prefix("anxious mood") is None


def test_strip_plan_prefix() -> None:
    assert strip_plan_prefix("Tx: fluids") == "fluids"
    assert strip_plan_prefix("plan follow up in 2 weeks") == "follow up in 2 weeks"
    assert strip_plan_prefix("planning ahead") is None

from trustgate.services.safety.rephrase import Decision, RephraseEngine, decide, rephrase
from trustgate.services.safety.types import (
    BLOCKED_FALLBACK_MESSAGE,
    DOSE_REDIRECT,
    SAFE_CLOSING_LINE,
    UNKNOWN_MEDICATION_PLACEHOLDER,
    DoseMismatch,
    SafetyCategory,
    SafetyViolation,
    UnknownMedication,
    ValueMismatch,
)


def _violation(category, matched_text="you should take", offset=0):
    return SafetyViolation(
        category=category,
        matched_text=matched_text,
        pattern_description="test rule",
        offset=offset,
    )


def test_decide_blocks_any_alarm():
    assert decide([_violation(SafetyCategory.ALARM, "dangerous")], []) is Decision.NOT_REPHRASABLE


def test_decide_allows_few_minor_issues():
    violations = [_violation(SafetyCategory.PRESCRIPTIVE), _violation(SafetyCategory.DIAGNOSTIC)]
    issues = [DoseMismatch(claimed="500mg", cached="250mg"), UnknownMedication(claimed="Warfarin")]

    assert decide(violations, issues) is Decision.REPHRASABLE
    assert decide([], []) is Decision.REPHRASABLE


def test_decide_blocks_too_many_violations():
    violations = [_violation(SafetyCategory.PRESCRIPTIVE)] * 3

    assert decide(violations, []) is Decision.NOT_REPHRASABLE


def test_decide_blocks_too_many_grounding_issues():
    issues = [ValueMismatch(claimed="HbA1c: 7", cached="HbA1c: 6.5 %")] * 3

    assert decide([], issues) is Decision.NOT_REPHRASABLE


def test_rephrase_removes_prescriptive_sentence():
    text = "Your records show Metformin 500mg daily. You should take it with food."

    result = rephrase(text, [_violation(SafetyCategory.PRESCRIPTIVE, "You should take", 41)], [])

    assert result.startswith("Your records show Metformin 500mg daily.")
    assert "You should take" not in result
    assert result.endswith(SAFE_CLOSING_LINE)


def test_rephrase_masks_wrong_dose():
    text = "Your records show Metformin 500mg twice daily with meals."

    result = rephrase(text, [], [DoseMismatch(claimed="500mg", cached="250mg")])

    assert "500mg" not in result
    assert f"Metformin {DOSE_REDIRECT}" in result


def test_rephrase_masks_unknown_medication():
    text = "Your saved list shows Warfarin 5mg each evening."

    result = rephrase(text, [], [UnknownMedication(claimed="Warfarin")])

    assert "Warfarin" not in result
    assert UNKNOWN_MEDICATION_PLACEHOLDER in result


def test_rephrase_keeps_existing_care_team_closing():
    text = (
        "Your records show Lisinopril 10 mg once daily. You should take it in the morning. "
        "Consider discussing this with your care team."
    )

    result = rephrase(text, [_violation(SafetyCategory.PRESCRIPTIVE, "You should take")], [])

    assert result == (
        "Your records show Lisinopril 10 mg once daily. "
        "Consider discussing this with your care team."
    )


def test_rephrase_falls_back_when_too_little_remains():
    result = rephrase(
        "You should take more.",
        [_violation(SafetyCategory.PRESCRIPTIVE, "You should take")],
        [],
    )

    assert result == BLOCKED_FALLBACK_MESSAGE


def test_rephrase_leaves_value_mismatch_text_alone():
    text = "Your HbA1c was 7.2 at the last visit."

    result = RephraseEngine().rephrase(
        text, [], [ValueMismatch(claimed="HbA1c: 7.2", cached="HbA1c: 6.5 %")]
    )

    assert result.startswith(text)


def test_decimal_point_does_not_split_a_removed_sentence():
    engine = RephraseEngine()
    text = "Your records show Metformin 500mg daily. You should take 2.5 tablets at dinner."

    result = engine.rephrase(
        text, [_violation(SafetyCategory.PRESCRIPTIVE, "You should take", offset=41)], []
    )

    assert result.startswith("Your records show Metformin 500mg daily.")
    assert "5 tablets" not in result
    assert "daily.5" not in result

import pytest

from trustgate.services.routing.blocklist import QueryBlocklist, check_query
from trustgate.services.routing.types import QueryCategory


@pytest.mark.parametrize(
    "question, category",
    [
        ("I have chest pain", QueryCategory.EMERGENCY),
        ("I think I took an overdose", QueryCategory.EMERGENCY),
        ("It's hard to breathe", QueryCategory.EMERGENCY),
        ("I'm short of breath", QueryCategory.EMERGENCY),
        ("I have shortness of breath", QueryCategory.EMERGENCY),
        ("Trouble breathing at night", QueryCategory.EMERGENCY),
        ("Struggling to breathe after climbing stairs", QueryCategory.EMERGENCY),
        ("Can Metformin interact with alcohol?", QueryCategory.DRUG_INTERACTIONS),
        ("Is it ok to combine ibuprofen and Lisinopril?", QueryCategory.DRUG_INTERACTIONS),
        ("Should I stop taking my blood thinner before surgery?", QueryCategory.DOSAGE_CHANGE),
        ("I missed a dose this morning", QueryCategory.DOSAGE_CHANGE),
        ("Is this normal for my age?", QueryCategory.SYMPTOM_ASSESSMENT),
        ("What's wrong with me?", QueryCategory.SYMPTOM_ASSESSMENT),
        ("Does Metformin have side effects?", QueryCategory.SIDE_EFFECTS),
        ("What treatment options exist for diabetes?", QueryCategory.TREATMENT_ADVICE),
        ("How to treat high cholesterol?", QueryCategory.TREATMENT_ADVICE),
    ],
)
def test_blocked_categories(question, category):
    result = check_query(question)

    assert result.blocked is True
    assert result.category is category
    assert result.reason
    assert result.user_message


@pytest.mark.parametrize(
    "question",
    [
        "What are my current medications?",
        "When is my next appointment?",
        "What was my last HbA1c result?",
        "",
    ],
)
def test_routine_questions_pass(question):
    result = check_query(question)

    assert result.blocked is False
    assert result.category is None
    assert result.authoritative_engine_allowed is False


def test_dosage_change_never_allows_authoritative_engine():
    result = check_query("Should I stop taking my blood thinner before surgery?")

    assert result.category is QueryCategory.DOSAGE_CHANGE
    assert result.authoritative_engine_allowed is False


def test_interactions_and_side_effects_allow_authoritative_engine():
    assert check_query("Is aspirin contraindicated with warfarin?").authoritative_engine_allowed is True
    assert check_query("Any adverse reaction reported?").authoritative_engine_allowed is True


def test_emergency_wins_over_other_categories():
    result = check_query("Should I stop my meds? I have chest pain and can't breathe")

    assert result.category is QueryCategory.EMERGENCY
    assert result.authoritative_engine_allowed is False


def test_check_is_case_insensitive():
    assert QueryBlocklist().check_query("CHEST PAIN since this morning").blocked is True


def test_policies_are_in_priority_order():
    categories = [policy.category for policy in QueryBlocklist.POLICIES]

    assert categories == [
        QueryCategory.EMERGENCY,
        QueryCategory.DRUG_INTERACTIONS,
        QueryCategory.DOSAGE_CHANGE,
        QueryCategory.SYMPTOM_ASSESSMENT,
        QueryCategory.SIDE_EFFECTS,
        QueryCategory.TREATMENT_ADVICE,
    ]

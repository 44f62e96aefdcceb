"""Fixed quick questions offered by the UI, with known routing inputs."""

from trustgate.services.routing.types import CacheMatch, CacheScope, QuickQuestion

QUICK_QUESTIONS: tuple[QuickQuestion, ...] = (
    QuickQuestion(
        id="my_medications",
        label="My medications",
        query="What are my current medications?",
        pre_classified=CacheMatch(scope=CacheScope(medications=True), confidence=1.0),
        local_model_capable=True,
    ),
    QuickQuestion(
        id="next_appointment",
        label="Next appointment",
        query="When is my next doctor appointment?",
        pre_classified=CacheMatch(scope=CacheScope(appointment=True), confidence=1.0),
        local_model_capable=True,
    ),
    QuickQuestion(
        id="recent_labs",
        label="Recent lab results",
        query="What are my most recent lab results?",
        pre_classified=CacheMatch(scope=CacheScope(labs=True), confidence=1.0),
        local_model_capable=True,
    ),
    QuickQuestion(
        id="doctor_questions",
        label="What to ask my doctor",
        query="What questions should I prepare for my next doctor appointment?",
        pre_classified=None,
        local_model_capable=False,
    ),
    QuickQuestion(
        id="active_alerts",
        label="Active alerts",
        query="Are there any active health alerts?",
        pre_classified=CacheMatch(scope=CacheScope(alerts=True), confidence=1.0),
        local_model_capable=True,
    ),
)


def get_quick_questions() -> list[QuickQuestion]:
    return list(QUICK_QUESTIONS)


def get_quick_question(question_id: str) -> QuickQuestion | None:
    for question in QUICK_QUESTIONS:
        if question.id == question_id:
            return question
    return None

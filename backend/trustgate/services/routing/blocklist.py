"""Question-side safety blocklist.

Runs on the raw question before any generation. Categories are checked in
a fixed priority order and the first match wins, so emergency phrasing is
never filed under a routine category.
"""

import logging
import re
from dataclasses import dataclass

from trustgate.services.routing.types import QueryCategory, SafetyCheckResult

logger = logging.getLogger("trustgate")


@dataclass(frozen=True)
class BlockedCategoryPolicy:
    """What happens to a question in a blocked category."""

    category: QueryCategory
    patterns: tuple[re.Pattern, ...]
    authoritative_engine_allowed: bool
    reason: str
    user_message: str


def _compile(*patterns: str) -> tuple[re.Pattern, ...]:
    return tuple(re.compile(pattern, re.IGNORECASE) for pattern in patterns)


class QueryBlocklist:
    """Classifies questions that must never be answered by a local model."""

    EMERGENCY_PATTERNS = _compile(
        r"\b(?:emergency|911|ambulance|er\b|a&e)\b",
        r"\bcan(?:'t|not)\s+breathe?\b",
        r"\b(?:trouble|difficulty|hard\s+to|struggling\s+to)\s+breath(?:e|ing)\b",
        r"\bshort(?:ness)?\s+of\s+breath\b",
        r"\bchest\s+pain\b",
        r"\bsuicid(?:e|al)\b",
        r"\boverdos(?:e|ed|ing)\b",
        r"\bsevere\s+(?:pain|bleeding|reaction)\b",
    )

    INTERACTION_PATTERNS = _compile(
        r"\b(?:drug|medication|med)\s+interaction",
        r"\binteract(?:s|ion)?\s+with\b",
        r"\btaken?\s+(?:with|together|alongside)\b",
        r"\b(?:combine|combining|combination)\b",
        r"\bcontraindicated?\b",
        r"\bmix(?:ing)?\s+(?:with|medications?|drugs?|meds?)\b",
    )

    DOSAGE_CHANGE_PATTERNS = _compile(
        r"\b(?:change|increase|decrease|reduce|adjust|modify|double|half)\s+(?:my\s+)?(?:dose|dosage|medication|med)\b",
        r"\bshould\s+i\s+(?:take|stop|start|change|increase|decrease|skip)\b",
        r"\b(?:stop|quit|discontinue)\s+(?:taking|my|the)\b",
        r"\btoo\s+(?:much|little|high|low)\s+(?:dose|dosage|medication)?\b",
        r"\bmissed?\s+(?:a\s+)?dose\b",
    )

    SYMPTOM_PATTERNS = _compile(
        r"\bwhat\s+(?:does|could|might)\s+(?:this|my)\s+(?:symptom|pain|feeling)\b",
        r"\bis\s+(?:this|it)\s+(?:normal|serious|dangerous|concerning)\b",
        r"\bshould\s+i\s+(?:be\s+)?(?:worried|concerned)\b",
        r"\bwhat(?:'s|\s+is)\s+wrong\s+with\s+me\b",
        r"\bdiagnos(?:e|is)\b",
    )

    SIDE_EFFECT_PATTERNS = _compile(
        r"\bside\s+effect",
        r"\badverse\s+(?:effect|reaction|event)\b",
        r"\b(?:caused?|causing)\s+by\s+(?:my\s+)?(?:medication|med|drug|pill)\b",
        r"\breaction\s+to\s+(?:my\s+)?(?:medication|med|drug|pill)\b",
    )

    TREATMENT_PATTERNS = _compile(
        r"\bwhat\s+(?:treatment|therapy|remedy|cure)\b",
        r"\bhow\s+(?:to\s+)?(?:treat|cure|fix|heal)\b",
        r"\bwhat\s+should\s+(?:i|we)\s+do\s+about\b",
        r"\balternative\s+(?:treatment|medication|therapy)\b",
    )

    POLICIES: tuple[BlockedCategoryPolicy, ...] = (
        BlockedCategoryPolicy(
            category=QueryCategory.EMERGENCY,
            patterns=EMERGENCY_PATTERNS,
            authoritative_engine_allowed=False,
            reason="Potential medical emergency",
            user_message=(
                "If you're experiencing a medical emergency, please call "
                "emergency services."
            ),
        ),
        BlockedCategoryPolicy(
            category=QueryCategory.DRUG_INTERACTIONS,
            patterns=INTERACTION_PATTERNS,
            authoritative_engine_allowed=True,
            reason="Requires full medication database and interaction checking",
            user_message=(
                "Drug interaction questions need your complete records. "
                "Connect to your main records for this answer."
            ),
        ),
        BlockedCategoryPolicy(
            category=QueryCategory.DOSAGE_CHANGE,
            patterns=DOSAGE_CHANGE_PATTERNS,
            authoritative_engine_allowed=False,
            reason="Clinical decision requiring a healthcare professional",
            user_message=(
                "Dosage decisions should be made with your healthcare team. "
                "The Medications section shows what is currently prescribed."
            ),
        ),
        BlockedCategoryPolicy(
            category=QueryCategory.SYMPTOM_ASSESSMENT,
            patterns=SYMPTOM_PATTERNS,
            authoritative_engine_allowed=False,
            reason="Clinical assessment beyond automated scope",
            user_message=(
                "For symptom assessment, please consult your healthcare team. "
                "Your saved records can help you prepare for that conversation."
            ),
        ),
        BlockedCategoryPolicy(
            category=QueryCategory.SIDE_EFFECTS,
            patterns=SIDE_EFFECT_PATTERNS,
            authoritative_engine_allowed=True,
            reason="Requires full medication knowledge",
            user_message=(
                "Side effect questions need your complete records. "
                "Connect to your main records for this answer."
            ),
        ),
        BlockedCategoryPolicy(
            category=QueryCategory.TREATMENT_ADVICE,
            patterns=TREATMENT_PATTERNS,
            authoritative_engine_allowed=False,
            reason="No clinical advice",
            user_message="Treatment decisions should be discussed with your healthcare team.",
        ),
    )

    def check_query(self, question: str) -> SafetyCheckResult:
        """Classify ``question`` against the blocked categories."""
        lower = (question or "").lower()
        for policy in self.POLICIES:
            if any(pattern.search(lower) for pattern in policy.patterns):
                logger.debug("Question matched blocked category=%s", policy.category.value)
                return SafetyCheckResult(
                    blocked=True,
                    authoritative_engine_allowed=policy.authoritative_engine_allowed,
                    category=policy.category,
                    reason=policy.reason,
                    user_message=policy.user_message,
                )
        return SafetyCheckResult(blocked=False)


_default_blocklist = QueryBlocklist()


def check_query(question: str) -> SafetyCheckResult:
    """Classify ``question`` with the standard blocklist."""
    return _default_blocklist.check_query(question)

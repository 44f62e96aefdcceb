"""Response safety filter: pattern scan, grounding check, rephrase or block."""

from trustgate.services.safety.filter import ResponseFilter, filter_response
from trustgate.services.safety.grounding import GroundingValidator
from trustgate.services.safety.patterns import SafetyPatternMatcher
from trustgate.services.safety.rephrase import Decision, RephraseEngine, decide
from trustgate.services.safety.types import (
    BLOCKED_FALLBACK_MESSAGE,
    Blocked,
    DoseMismatch,
    FilterOutcome,
    GroundingIssue,
    Passed,
    Rephrased,
    SafetyCategory,
    SafetyViolation,
    UnknownMedication,
    ValueMismatch,
)

__all__ = [
    "BLOCKED_FALLBACK_MESSAGE",
    "Blocked",
    "Decision",
    "DoseMismatch",
    "FilterOutcome",
    "GroundingIssue",
    "GroundingValidator",
    "Passed",
    "Rephrased",
    "RephraseEngine",
    "ResponseFilter",
    "SafetyCategory",
    "SafetyPatternMatcher",
    "SafetyViolation",
    "UnknownMedication",
    "ValueMismatch",
    "decide",
    "filter_response",
]

"""Single entry point for checking generated text before display."""

from __future__ import annotations

import logging

from trustgate.services.safety.grounding import GroundingValidator
from trustgate.services.safety.output_sanitize import sanitize_model_output
from trustgate.services.safety.patterns import SafetyPatternMatcher
from trustgate.services.safety.rephrase import Decision, RephraseEngine, decide
from trustgate.services.safety.types import (
    BLOCKED_FALLBACK_MESSAGE,
    Blocked,
    FilterOutcome,
    Passed,
    Rephrased,
)
from trustgate.services.snapshot import EMPTY_SNAPSHOT, AuthoritativeSnapshot

logger = logging.getLogger("trustgate")


class ResponseFilter:
    """Runs the pattern scan and grounding check, then passes, rephrases or blocks."""

    def __init__(
        self,
        matcher: SafetyPatternMatcher | None = None,
        validator: GroundingValidator | None = None,
        engine: RephraseEngine | None = None,
    ):
        self.matcher = matcher or SafetyPatternMatcher()
        self.validator = validator or GroundingValidator()
        self.engine = engine or RephraseEngine()

    def filter(
        self, text: str, snapshot: AuthoritativeSnapshot | None = None
    ) -> FilterOutcome:
        snapshot = snapshot or EMPTY_SNAPSHOT
        cleaned = sanitize_model_output(text)

        violations = tuple(self.matcher.scan(cleaned))
        grounding_issues = tuple(self.validator.check(cleaned, snapshot))

        if not violations and not grounding_issues:
            return Passed(text=cleaned)

        if decide(violations, grounding_issues) is Decision.REPHRASABLE:
            return Rephrased(
                text=self.engine.rephrase(cleaned, violations, grounding_issues),
                violations=violations,
                grounding_issues=grounding_issues,
            )

        logger.warning(
            "Response blocked violations=%d grounding_issues=%d",
            len(violations),
            len(grounding_issues),
        )
        return Blocked(
            text=BLOCKED_FALLBACK_MESSAGE,
            violations=violations,
            grounding_issues=grounding_issues,
        )


_default_filter = ResponseFilter()


def filter_response(
    text: str, snapshot: AuthoritativeSnapshot | None = None
) -> FilterOutcome:
    """Check generated ``text`` against the safety rules and ``snapshot``.

    Returns exactly one of ``Passed``, ``Rephrased`` or ``Blocked``; the
    outcome's ``text`` is always what should be displayed.
    """
    return _default_filter.filter(text, snapshot)

"""Rephrase/block policy and the rephrase engine.

A response with a few minor problems is salvaged by masking or removing only
the unsafe parts. Alarm language, or too many problems at once, means the
whole generation is discarded.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from enum import Enum

from trustgate.config import settings
from trustgate.services.safety.types import (
    BLOCKED_FALLBACK_MESSAGE,
    DOSE_REDIRECT,
    SAFE_CLOSING_LINE,
    UNKNOWN_MEDICATION_PLACEHOLDER,
    DoseMismatch,
    GroundingIssue,
    SafetyCategory,
    SafetyViolation,
    UnknownMedication,
)

logger = logging.getLogger("trustgate")


class Decision(str, Enum):
    REPHRASABLE = "rephrasable"
    NOT_REPHRASABLE = "not_rephrasable"


def decide(
    violations: Sequence[SafetyViolation],
    grounding_issues: Sequence[GroundingIssue],
) -> Decision:
    """Decide whether a flagged response may be rephrased or must be blocked."""
    if any(v.category is SafetyCategory.ALARM for v in violations):
        return Decision.NOT_REPHRASABLE
    if len(violations) > settings.rephrase_max_violations:
        return Decision.NOT_REPHRASABLE
    if len(grounding_issues) > settings.rephrase_max_grounding_issues:
        return Decision.NOT_REPHRASABLE
    return Decision.REPHRASABLE


class RephraseEngine:
    """Salvages a response by masking bad values and dropping unsafe sentences."""

    SAFE_CLOSING_MARKERS = ("care team", "healthcare team")
    REMOVABLE_CATEGORIES = frozenset({SafetyCategory.DIAGNOSTIC, SafetyCategory.PRESCRIPTIVE})

    def rephrase(
        self,
        original: str,
        violations: Sequence[SafetyViolation],
        grounding_issues: Sequence[GroundingIssue],
    ) -> str:
        text = original

        for issue in grounding_issues:
            if isinstance(issue, DoseMismatch):
                text = re.sub(re.escape(issue.claimed), DOSE_REDIRECT, text, flags=re.IGNORECASE)
            elif isinstance(issue, UnknownMedication):
                text = re.sub(
                    rf"\b{re.escape(issue.claimed)}\b",
                    UNKNOWN_MEDICATION_PLACEHOLDER,
                    text,
                    flags=re.IGNORECASE,
                )

        for violation in violations:
            if violation.category in self.REMOVABLE_CATEGORIES:
                text = self._remove_sentences_containing(text, violation.matched_text)

        text = self._tidy(text)

        if len(text) < settings.rephrase_min_length:
            logger.info("Rephrase left %d characters, using fallback message", len(text))
            return BLOCKED_FALLBACK_MESSAGE

        if not self._has_safe_closing(text):
            text = f"{text}\n\n{SAFE_CLOSING_LINE}"

        return text

    @staticmethod
    def _remove_sentences_containing(text: str, fragment: str) -> str:
        """Drop every sentence that contains ``fragment``."""
        # A terminator only ends a sentence when followed by whitespace or the end,
        # so decimals like "2.5" stay inside their sentence.
        body = r"(?:[^.!?]|[.!?](?!\s|$))*"
        sentence = re.compile(
            rf"{body}{re.escape(fragment)}{body}[.!?]?",
            re.IGNORECASE,
        )
        return sentence.sub("", text)

    @staticmethod
    def _tidy(text: str) -> str:
        text = re.sub(r"[ \t]{2,}", " ", text)
        text = re.sub(r"[ \t]+\n", "\n", text)
        text = re.sub(r"\n{3,}", "\n\n", text)
        return text.strip()

    def _has_safe_closing(self, text: str) -> bool:
        lower = text.lower()
        return any(marker in lower for marker in self.SAFE_CLOSING_MARKERS)


_default_engine = RephraseEngine()


def rephrase(
    original: str,
    violations: Sequence[SafetyViolation],
    grounding_issues: Sequence[GroundingIssue],
) -> str:
    """Rephrase with the standard engine."""
    return _default_engine.rephrase(original, violations, grounding_issues)

"""Pattern scan for unsafe phrasing in generated answers.

The rule table is plain data: auditing or adding a rule never touches the
scanning code.
"""

import logging
import re
from dataclasses import dataclass, field

from trustgate.services.safety.types import SafetyCategory, SafetyViolation

logger = logging.getLogger("trustgate")


@dataclass(frozen=True)
class SafetyRule:
    """A single regular-expression rule in the safety table."""

    pattern: str
    category: SafetyCategory
    description: str
    regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "regex", re.compile(self.pattern, re.IGNORECASE))


DIAGNOSTIC_RULES: tuple[SafetyRule, ...] = (
    SafetyRule(
        r"\byou\s+have\s+(?:a\s+)?(?:been\s+)?(?:diagnosed\s+with\s+)?[a-z]",
        SafetyCategory.DIAGNOSTIC,
        "Direct diagnosis: 'you have [condition]'",
    ),
    SafetyRule(
        r"\byou\s+are\s+suffering\s+from\b",
        SafetyCategory.DIAGNOSTIC,
        "Direct diagnosis: 'you are suffering from'",
    ),
    SafetyRule(
        r"\byou\s+(?:likely|probably|possibly)\s+have\b",
        SafetyCategory.DIAGNOSTIC,
        "Speculative diagnosis: 'you likely/probably have'",
    ),
    SafetyRule(
        r"\bthis\s+(?:means|indicates|suggests|confirms)\s+(?:you|that\s+you)\s+have\b",
        SafetyCategory.DIAGNOSTIC,
        "Indirect diagnosis: 'this means you have'",
    ),
    SafetyRule(
        r"\byou\s+(?:are|have\s+been)\s+diagnosed\b",
        SafetyCategory.DIAGNOSTIC,
        "Diagnosis claim without document attribution",
    ),
    SafetyRule(
        r"\byou(?:'re|\s+are)\s+(?:a\s+)?diabetic\b",
        SafetyCategory.DIAGNOSTIC,
        "Direct label: 'you are diabetic'",
    ),
    SafetyRule(
        r"\byour\s+condition\s+is\b",
        SafetyCategory.DIAGNOSTIC,
        "Condition assertion: 'your condition is'",
    ),
    SafetyRule(
        r"\byou\s+(?:appear|seem)\s+to\s+have\b",
        SafetyCategory.DIAGNOSTIC,
        "Implied diagnosis: 'you appear to have'",
    ),
)

PRESCRIPTIVE_RULES: tuple[SafetyRule, ...] = (
    SafetyRule(
        r"\byou\s+should\s+(?:take|stop|start|increase|decrease|change|switch|discontinue|avoid|reduce)\b",
        SafetyCategory.PRESCRIPTIVE,
        "Direct prescription: 'you should [take/stop/...]'",
    ),
    SafetyRule(
        r"\bI\s+recommend\b",
        SafetyCategory.PRESCRIPTIVE,
        "Direct recommendation: 'I recommend'",
    ),
    SafetyRule(
        r"\bI\s+(?:would\s+)?(?:suggest|advise)\b",
        SafetyCategory.PRESCRIPTIVE,
        "Advisory language: 'I suggest/advise'",
    ),
    SafetyRule(
        r"\byou\s+(?:need|must|have)\s+to\s+(?:take|stop|start|see|visit|go|call|increase|decrease)\b",
        SafetyCategory.PRESCRIPTIVE,
        "Imperative prescription: 'you need to [action]'",
    ),
    SafetyRule(
        r"\bdo\s+not\s+(?:take|stop|eat|drink|use|skip)\b",
        SafetyCategory.PRESCRIPTIVE,
        "Prohibition: 'do not [action]'",
    ),
    SafetyRule(
        r"\btry\s+(?:taking|using|adding|reducing)\b",
        SafetyCategory.PRESCRIPTIVE,
        "Soft prescription: 'try taking/using'",
    ),
    SafetyRule(
        r"\bthe\s+(?:best|recommended)\s+(?:treatment|course\s+of\s+action|approach)\s+(?:is|would\s+be)\b",
        SafetyCategory.PRESCRIPTIVE,
        "Treatment recommendation: 'the best treatment is'",
    ),
    SafetyRule(
        r"\bconsider\s+(?:taking|stopping|increasing|decreasing|switching)\b",
        SafetyCategory.PRESCRIPTIVE,
        "Soft prescription: 'consider taking/stopping'",
    ),
)

ALARM_RULES: tuple[SafetyRule, ...] = (
    SafetyRule(
        r"\b(?:dangerous|life[- ]threatening|fatal|deadly|lethal)\b",
        SafetyCategory.ALARM,
        "Alarm word: dangerous/life-threatening/fatal",
    ),
    SafetyRule(
        r"\b(?:emergency|urgent(?:ly)?|immediately|right\s+away|right\s+now)\b",
        SafetyCategory.ALARM,
        "Urgency word: emergency/immediately/urgently",
    ),
    SafetyRule(
        r"\b(?:immediately|urgently)\s+(?:go|call|visit|see|seek|get)\b",
        SafetyCategory.ALARM,
        "Urgent directive: 'immediately go/call'",
    ),
    SafetyRule(
        r"\bcall\s+(?:911|emergency|an\s+ambulance|your\s+doctor\s+(?:immediately|right\s+away|now))\b",
        SafetyCategory.ALARM,
        "Emergency call directive: 'call 911/emergency'",
    ),
    SafetyRule(
        r"\bgo\s+to\s+(?:the\s+)?(?:emergency|ER|hospital|A&E)\b",
        SafetyCategory.ALARM,
        "ER directive: 'go to the emergency/hospital'",
    ),
    SafetyRule(
        r"\bseek\s+(?:immediate|emergency|urgent)\s+(?:medical\s+)?(?:help|attention|care)\b",
        SafetyCategory.ALARM,
        "Seek care directive: 'seek immediate medical help'",
    ),
    SafetyRule(
        r"\bthis\s+(?:is|could\s+be)\s+(?:a\s+|an\s+)?(?:medical\s+)?emergency\b",
        SafetyCategory.ALARM,
        "Emergency declaration: 'this is an emergency'",
    ),
    SafetyRule(
        r"\bdo\s+not\s+(?:wait|delay|ignore)\b",
        SafetyCategory.ALARM,
        "Urgency pressure: 'do not wait/delay'",
    ),
)

ALL_RULES: tuple[SafetyRule, ...] = DIAGNOSTIC_RULES + PRESCRIPTIVE_RULES + ALARM_RULES


class SafetyPatternMatcher:
    """Finds clinically unsafe phrasing in arbitrary text.

    Stateless: the output depends only on the text and the rule table.
    """

    def __init__(self, rules: tuple[SafetyRule, ...] = ALL_RULES):
        self.rules = rules

    def scan(self, text: str) -> list[SafetyViolation]:
        """Return one violation per offending span, ordered by offset."""
        if not text:
            return []

        matches: list[SafetyViolation] = []
        for rule in self.rules:
            for match in rule.regex.finditer(text):
                matches.append(
                    SafetyViolation(
                        category=rule.category,
                        matched_text=match.group(0),
                        pattern_description=rule.description,
                        offset=match.start(),
                    )
                )

        violations = self._deduplicate(matches)
        if violations:
            logger.debug(
                "Safety scan found %d violation(s) from %d raw match(es)",
                len(violations),
                len(matches),
            )
        return violations

    @staticmethod
    def _deduplicate(matches: list[SafetyViolation]) -> list[SafetyViolation]:
        """Collapse overlapping matches, keeping the longest at each offset."""
        ordered = sorted(matches, key=lambda v: (v.offset, -len(v.matched_text)))
        kept: list[SafetyViolation] = []
        for violation in ordered:
            if kept and violation.offset < kept[-1].end:
                continue
            kept.append(violation)
        return kept


_default_matcher = SafetyPatternMatcher()


def scan(text: str) -> list[SafetyViolation]:
    """Scan ``text`` with the standard rule table."""
    return _default_matcher.scan(text)

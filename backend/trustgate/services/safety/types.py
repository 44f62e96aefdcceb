"""Types shared by the response safety filter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class SafetyCategory(str, Enum):
    """Kinds of unsafe phrasing. Adding one is a policy decision."""

    DIAGNOSTIC = "diagnostic"
    PRESCRIPTIVE = "prescriptive"
    ALARM = "alarm"


@dataclass(frozen=True)
class SafetyViolation:
    """One located match of a safety rule."""

    category: SafetyCategory
    matched_text: str
    pattern_description: str
    offset: int

    @property
    def end(self) -> int:
        return self.offset + len(self.matched_text)


# ============================================
# Grounding issues
# ============================================


@dataclass(frozen=True)
class DoseMismatch:
    """A medication dose that disagrees with the saved dose."""

    claimed: str
    cached: str
    medication: str = ""

    kind = "dose_mismatch"

    @property
    def description(self) -> str:
        subject = f"{self.medication} dose" if self.medication else "Dose"
        return f'{subject} stated as "{self.claimed}" but saved records show "{self.cached}"'


@dataclass(frozen=True)
class UnknownMedication:
    """A medication that is not in the saved medication list."""

    claimed: str

    kind = "unknown_medication"

    @property
    def cached(self) -> None:
        return None

    @property
    def description(self) -> str:
        return f'"{self.claimed}" is not in the saved medication list'


@dataclass(frozen=True)
class ValueMismatch:
    """A lab value that disagrees with the saved result."""

    claimed: str
    cached: str

    kind = "value_mismatch"

    @property
    def description(self) -> str:
        return f'Lab value stated as "{self.claimed}" but saved records show "{self.cached}"'


GroundingIssue = Union[DoseMismatch, UnknownMedication, ValueMismatch]


# ============================================
# Filter outcomes
# ============================================


@dataclass(frozen=True)
class Passed:
    text: str

    outcome = "passed"


@dataclass(frozen=True)
class Rephrased:
    text: str
    violations: tuple[SafetyViolation, ...]
    grounding_issues: tuple[GroundingIssue, ...]

    outcome = "rephrased"


@dataclass(frozen=True)
class Blocked:
    text: str
    violations: tuple[SafetyViolation, ...]
    grounding_issues: tuple[GroundingIssue, ...]

    outcome = "blocked"


FilterOutcome = Union[Passed, Rephrased, Blocked]


# Shown whenever a response cannot be salvaged. Must never be empty.
BLOCKED_FALLBACK_MESSAGE = (
    "I'd rather give you a thorough answer on this one. "
    "Please ask again once your full records are available, "
    "or bring the question to your care team."
)

SAFE_CLOSING_LINE = "Consider discussing your health data with your care team."

DOSE_REDIRECT = "[check the Medications section for the exact dose]"
UNKNOWN_MEDICATION_PLACEHOLDER = "[medication not found in your saved data]"

"""Cross-reference medication and lab claims against saved records.

Only claims that can be checked against the snapshot are reported. An empty
section in the snapshot means "nothing synced yet", never "mismatch".
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from trustgate.services.safety.types import (
    DoseMismatch,
    GroundingIssue,
    UnknownMedication,
    ValueMismatch,
)
from trustgate.services.snapshot import EMPTY_SNAPSHOT, AuthoritativeSnapshot

logger = logging.getLogger("trustgate")


@dataclass(frozen=True)
class MedicationMention:
    name: str
    dose: str


@dataclass(frozen=True)
class LabMention:
    test_name: str
    value: str


class GroundingValidator:
    """Finds claims in generated text that disagree with the snapshot."""

    DOSE_UNITS = r"(?:mg|mcg|units?|ml|g)"

    MEDICATION_MENTION_PATTERN = re.compile(
        r"\b([A-Z][a-z]{2,}(?:\s+[A-Z][a-z]+)*)\s+(\d+(?:\.\d+)?\s*" + DOSE_UNITS + r")\b"
    )

    DOSE_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(" + DOSE_UNITS + r")\b", re.IGNORECASE)

    # Capitalized words that often precede a number but are not drug names.
    NON_MEDICATION_WORDS = frozenset(
        {
            "based",
            "your",
            "the",
            "this",
            "that",
            "from",
            "with",
            "about",
            "records",
            "record",
            "data",
            "saved",
            "medications",
            "medication",
            "results",
            "currently",
            "taking",
            "take",
            "prescribed",
            "daily",
            "twice",
            "once",
            "doctor",
            "visit",
            "appointment",
            "consider",
            "discussing",
            "shows",
            "show",
            "include",
            "includes",
            "according",
            "section",
            "check",
            "for",
            "exact",
            "dose",
            "information",
            "health",
            "and",
            "also",
            "plus",
            "then",
        }
    )

    KNOWN_LAB_TESTS = (
        "HbA1c",
        "Potassium",
        "Sodium",
        "Glucose",
        "Cholesterol",
        "Hemoglobin",
        "Creatinine",
        "TSH",
        "T4",
        "HDL",
        "LDL",
        "Triglycerides",
    )

    LAB_MENTION_PATTERNS = (
        re.compile(
            r"\b(" + "|".join(KNOWN_LAB_TESTS) + r")[\s:]+(\d+(?:\.\d+)?)",
            re.IGNORECASE,
        ),
        re.compile(
            r"\b(" + "|".join(KNOWN_LAB_TESTS) + r")\s+(?:of|is|was|at)\s+(\d+(?:\.\d+)?)",
            re.IGNORECASE,
        ),
    )

    def __init__(self) -> None:
        # "Glucose 110 mg/dL" reads like a dose but is a lab value.
        self._lab_test_names = frozenset(test.lower() for test in self.KNOWN_LAB_TESTS)

    def check(
        self, text: str, snapshot: AuthoritativeSnapshot | None = None
    ) -> list[GroundingIssue]:
        """Return every medication and lab claim the snapshot contradicts."""
        snapshot = snapshot or EMPTY_SNAPSHOT
        if not text or not text.strip():
            return []

        issues: list[GroundingIssue] = []
        issues.extend(self.check_medications(text, snapshot))
        issues.extend(self.check_labs(text, snapshot))
        if issues:
            logger.debug("Grounding check found %d issue(s)", len(issues))
        return issues

    def check_medications(
        self, text: str, snapshot: AuthoritativeSnapshot
    ) -> list[GroundingIssue]:
        if not snapshot.has_medications:
            return []

        issues: list[GroundingIssue] = []
        for mention in self.extract_medication_mentions(text):
            cached = snapshot.find_medication(mention.name)
            if cached is None:
                issues.append(UnknownMedication(claimed=mention.name))
                continue

            claimed_dose = self.normalize_dose(mention.dose)
            cached_dose = self.normalize_dose(cached.dose_text)
            if claimed_dose and cached_dose and claimed_dose != cached_dose:
                issues.append(
                    DoseMismatch(
                        claimed=mention.dose,
                        cached=cached.dose_text,
                        medication=cached.name,
                    )
                )
        return issues

    def check_labs(self, text: str, snapshot: AuthoritativeSnapshot) -> list[GroundingIssue]:
        if not snapshot.has_labs:
            return []

        issues: list[GroundingIssue] = []
        for mention in self.extract_lab_mentions(text):
            cached = snapshot.find_lab(mention.test_name)
            if cached is None:
                continue
            cached_value = cached.numeric_value
            if cached_value is None:
                continue
            try:
                claimed_value = float(mention.value)
            except ValueError:
                continue
            if claimed_value != cached_value:
                cached_text = f"{cached.test_name}: {cached.value}"
                if cached.unit:
                    cached_text = f"{cached_text} {cached.unit}"
                issues.append(
                    ValueMismatch(
                        claimed=f"{mention.test_name}: {mention.value}",
                        cached=cached_text,
                    )
                )
        return issues

    def extract_medication_mentions(self, text: str) -> list[MedicationMention]:
        """Find capitalized names immediately followed by a dose."""
        mentions: list[MedicationMention] = []
        for match in self.MEDICATION_MENTION_PATTERN.finditer(text):
            name = self._strip_non_medication_words(match.group(1))
            if not name or name.split()[-1].lower() in self._lab_test_names:
                continue
            mentions.append(MedicationMention(name=name, dose=match.group(2).strip()))
        return mentions

    def extract_lab_mentions(self, text: str) -> list[LabMention]:
        """Find known lab test names followed by a numeric value."""
        mentions: list[LabMention] = []
        seen: set[tuple[str, str]] = set()
        for pattern in self.LAB_MENTION_PATTERNS:
            for match in pattern.finditer(text):
                key = (match.group(1).lower(), match.group(2))
                if key in seen:
                    continue
                seen.add(key)
                mentions.append(LabMention(test_name=match.group(1), value=match.group(2)))
        return mentions

    def normalize_dose(self, dose: str) -> str | None:
        """Normalize "500mg" and "500 MG" alike to "500 mg"."""
        match = self.DOSE_PATTERN.search(dose or "")
        if not match:
            return None
        number = match.group(1)
        if "." in number:
            number = number.rstrip("0").rstrip(".")
        unit = match.group(2).lower()
        if unit == "unit":
            unit = "units"
        return f"{number} {unit}"

    def _strip_non_medication_words(self, name: str) -> str:
        words = name.split()
        while words and words[0].lower() in self.NON_MEDICATION_WORDS:
            words.pop(0)
        return " ".join(words)


_default_validator = GroundingValidator()


def check_grounding(
    text: str, snapshot: AuthoritativeSnapshot | None = None
) -> list[GroundingIssue]:
    """Check ``text`` against ``snapshot`` with the standard validator."""
    return _default_validator.check(text, snapshot)

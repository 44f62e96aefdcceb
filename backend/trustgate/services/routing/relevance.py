"""Cache relevance scoring: which snapshot sections a question needs."""

from __future__ import annotations

import logging

from trustgate.config import settings
from trustgate.services.routing.types import CacheMatch, CacheScope
from trustgate.services.snapshot import EMPTY_SNAPSHOT, AuthoritativeSnapshot

logger = logging.getLogger("trustgate")


MEDICATION_KEYWORDS = (
    "medication",
    "medicine",
    "med",
    "pill",
    "drug",
    "prescription",
    "taking",
    "prescribed",
    "dose",
    "dosage",
    "pharmacy",
    "metformin",
    "lisinopril",
    "insulin",
)

LAB_KEYWORDS = (
    "lab",
    "test",
    "result",
    "blood",
    "urine",
    "value",
    "hba1c",
    "glucose",
    "cholesterol",
    "potassium",
    "sodium",
    "hemoglobin",
    "creatinine",
    "thyroid",
)

TIMELINE_KEYWORDS = (
    "when",
    "last",
    "history",
    "timeline",
    "date",
    "started",
    "changed",
    "previous",
    "recent",
    "ago",
)

APPOINTMENT_KEYWORDS = (
    "appointment",
    "doctor",
    "visit",
    "checkup",
    "scheduled",
    "next",
    "upcoming",
    "specialist",
)

ALERT_KEYWORDS = (
    "alert",
    "warning",
    "notice",
    "flag",
    "attention",
    "abnormal",
    "concern",
)

SECTION_KEYWORDS: dict[str, tuple[str, ...]] = {
    "medications": MEDICATION_KEYWORDS,
    "labs": LAB_KEYWORDS,
    "timeline": TIMELINE_KEYWORDS,
    "appointment": APPOINTMENT_KEYWORDS,
    "alerts": ALERT_KEYWORDS,
}


def matched_sections(question: str) -> list[str]:
    """Return the sections whose keywords appear in ``question``."""
    lower = (question or "").lower()
    return [
        section
        for section, keywords in SECTION_KEYWORDS.items()
        if any(keyword in lower for keyword in keywords)
    ]


class CacheRelevanceScorer:
    """Maps a question to the snapshot sections relevant to it.

    The confidence later gates whether a local model may answer at all.
    """

    def match(
        self, question: str, snapshot: AuthoritativeSnapshot | None = None
    ) -> CacheMatch:
        snapshot = snapshot or EMPTY_SNAPSHOT
        sections = matched_sections(question)

        if not sections:
            if snapshot.has_data:
                return CacheMatch(
                    scope=CacheScope.full(),
                    confidence=settings.relevance_generic_confidence,
                )
            return CacheMatch(scope=CacheScope(), confidence=0.0)

        scope = CacheScope(**{section: True for section in sections}).with_profile()
        refined = self.refine_scope(scope, snapshot)
        if refined is None:
            return CacheMatch(scope=scope, confidence=settings.relevance_no_data_confidence)

        confidence = self._confidence_for(len(sections))
        logger.debug(
            "Cache relevance sections=%s confidence=%.2f", ",".join(sections), confidence
        )
        return CacheMatch(scope=refined, confidence=confidence)

    @staticmethod
    def refine_scope(
        scope: CacheScope, snapshot: AuthoritativeSnapshot
    ) -> CacheScope | None:
        """Narrow ``scope`` to sections that hold data; None if none do."""
        refined = CacheScope(
            medications=scope.medications and snapshot.has_medications,
            labs=scope.labs and snapshot.has_labs,
            timeline=scope.timeline and snapshot.has_timeline,
            alerts=scope.alerts and snapshot.has_alerts,
            appointment=scope.appointment and snapshot.has_appointment,
            profile=scope.profile,
        )
        return refined if refined.has_data_sections else None

    @staticmethod
    def _confidence_for(section_count: int) -> float:
        if section_count >= 3:
            return settings.relevance_three_section_confidence
        if section_count == 2:
            return settings.relevance_two_section_confidence
        return settings.relevance_one_section_confidence


_default_scorer = CacheRelevanceScorer()


def match_query_to_cache(
    question: str, snapshot: AuthoritativeSnapshot | None = None
) -> CacheMatch:
    """Score ``question`` against ``snapshot`` with the standard scorer."""
    return _default_scorer.match(question, snapshot)

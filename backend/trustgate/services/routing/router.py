"""Query routing: decides which answer source may respond to a question.

Evaluated fresh for every question, before anything is generated:

1. Blocklist (always first).
2. Authoritative engine whenever it is reachable.
3. Local model, gated by cache relevance confidence.
4. The UI section that shows the requested data directly.
5. Deferred until a source becomes available.
"""

from __future__ import annotations

import logging

from trustgate.config import settings
from trustgate.logging import text_fingerprint
from trustgate.services.routing.blocklist import QueryBlocklist
from trustgate.services.routing.relevance import (
    APPOINTMENT_KEYWORDS,
    LAB_KEYWORDS,
    MEDICATION_KEYWORDS,
    CacheRelevanceScorer,
)
from trustgate.services.routing.types import (
    Authoritative,
    CacheMatch,
    ConfidenceTier,
    Deferred,
    FallbackSection,
    LocalModel,
    QueryRoute,
    QuickQuestion,
    SafetyBlocked,
)
from trustgate.services.snapshot import (
    EMPTY_SNAPSHOT,
    AuthoritativeSnapshot,
    ConnectivityState,
)

logger = logging.getLogger("trustgate")


class QueryRouter:
    """Routes user questions to the safest capable answer source."""

    # Checked in order; the first section with a keyword hit wins.
    FALLBACK_SECTIONS: tuple[tuple[str, tuple[str, ...]], ...] = (
        ("medications", MEDICATION_KEYWORDS),
        ("labs", LAB_KEYWORDS),
        ("appointments", APPOINTMENT_KEYWORDS),
    )

    def __init__(
        self,
        blocklist: QueryBlocklist | None = None,
        scorer: CacheRelevanceScorer | None = None,
    ):
        self.blocklist = blocklist or QueryBlocklist()
        self.scorer = scorer or CacheRelevanceScorer()

    def route(
        self,
        question: str,
        snapshot: AuthoritativeSnapshot | None = None,
        connectivity: ConnectivityState | None = None,
    ) -> QueryRoute:
        """Route a free-text question.

        Args:
            question: The user's question, as typed
            snapshot: Latest authoritative snapshot (None means nothing synced)
            connectivity: Current reachability of the answer sources

        Returns:
            Exactly one QueryRoute variant
        """
        snapshot = snapshot or EMPTY_SNAPSHOT
        connectivity = connectivity or ConnectivityState()

        safety = self.blocklist.check_query(question)
        if safety.blocked:
            if connectivity.authoritative_reachable and safety.authoritative_engine_allowed:
                return self._log(question, Authoritative())
            return self._log(
                question,
                SafetyBlocked(reason=safety.reason or "", message=safety.user_message or ""),
            )

        if connectivity.authoritative_reachable:
            return self._log(question, Authoritative())

        if connectivity.local_model_ready:
            route = self._local_model_route(self.scorer.match(question, snapshot))
            if route is not None:
                return self._log(question, route)

        return self._log(question, self._fallback_or_defer(question))

    def route_quick_question(
        self,
        quick_question: QuickQuestion,
        connectivity: ConnectivityState | None = None,
    ) -> QueryRoute:
        """Route a pre-classified quick question without re-deriving its scope."""
        connectivity = connectivity or ConnectivityState()

        if not quick_question.local_model_capable:
            if connectivity.authoritative_reachable:
                return Authoritative()
            return Deferred(original_query=quick_question.query)

        if connectivity.authoritative_reachable:
            return Authoritative()

        if quick_question.pre_classified is not None and connectivity.local_model_ready:
            match = quick_question.pre_classified
            return LocalModel(scope=match.scope, confidence_tier=self._tier_for(match.confidence))

        return self._fallback_or_defer(quick_question.query)

    def find_fallback_section(self, question: str) -> str | None:
        """Return the UI section that directly shows what ``question`` asks for."""
        lower = (question or "").lower()
        for section_id, keywords in self.FALLBACK_SECTIONS:
            if any(keyword in lower for keyword in keywords):
                return section_id
        return None

    def _local_model_route(self, match: CacheMatch) -> LocalModel | None:
        if match.confidence < settings.local_model_low_confidence:
            return None
        return LocalModel(scope=match.scope, confidence_tier=self._tier_for(match.confidence))

    @staticmethod
    def _tier_for(confidence: float) -> ConfidenceTier:
        if confidence >= settings.local_model_high_confidence:
            return ConfidenceTier.HIGH
        return ConfidenceTier.LOW

    def _fallback_or_defer(self, question: str) -> QueryRoute:
        section_id = self.find_fallback_section(question)
        if section_id is not None:
            return FallbackSection(section_id=section_id)
        return Deferred(original_query=question)

    @staticmethod
    def _log(question: str, route: QueryRoute) -> QueryRoute:
        logger.info(
            "Routed question_hash=%s target=%s", text_fingerprint(question), route.target
        )
        return route


_default_router = QueryRouter()


def route_query(
    question: str,
    snapshot: AuthoritativeSnapshot | None = None,
    connectivity: ConnectivityState | None = None,
) -> QueryRoute:
    """Route ``question`` with the standard router."""
    return _default_router.route(question, snapshot, connectivity)


def route_quick_question(
    quick_question: QuickQuestion,
    connectivity: ConnectivityState | None = None,
) -> QueryRoute:
    """Route a quick question with the standard router."""
    return _default_router.route_quick_question(quick_question, connectivity)

"""Question routing: blocklist, cache relevance and source selection."""

from trustgate.services.routing.blocklist import QueryBlocklist, check_query
from trustgate.services.routing.quick_questions import get_quick_question, get_quick_questions
from trustgate.services.routing.relevance import CacheRelevanceScorer, match_query_to_cache
from trustgate.services.routing.router import QueryRouter, route_query, route_quick_question
from trustgate.services.routing.types import (
    Authoritative,
    CacheMatch,
    CacheScope,
    ConfidenceTier,
    Deferred,
    FallbackSection,
    LocalModel,
    QueryCategory,
    QueryRoute,
    QuickQuestion,
    SafetyBlocked,
    SafetyCheckResult,
)

__all__ = [
    "Authoritative",
    "CacheMatch",
    "CacheRelevanceScorer",
    "CacheScope",
    "ConfidenceTier",
    "Deferred",
    "FallbackSection",
    "LocalModel",
    "QueryBlocklist",
    "QueryCategory",
    "QueryRoute",
    "QueryRouter",
    "QuickQuestion",
    "SafetyBlocked",
    "SafetyCheckResult",
    "check_query",
    "get_quick_question",
    "get_quick_questions",
    "match_query_to_cache",
    "route_query",
    "route_quick_question",
]

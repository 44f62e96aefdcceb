"""Domain services for Trustgate.

This package intentionally avoids eager imports so that importing one
service never drags in the others.
"""

from importlib import import_module

__all__ = [
    # Snapshot
    "AuthoritativeSnapshot",
    "ConnectivityState",
    "InMemorySnapshotStore",
    "ModelState",
    # Response safety
    "ResponseFilter",
    "SafetyPatternMatcher",
    "GroundingValidator",
    "RephraseEngine",
    "SafetyAuditor",
    "filter_response",
    # Routing
    "QueryBlocklist",
    "CacheRelevanceScorer",
    "QueryRouter",
    "route_query",
    "route_quick_question",
    # Local model context
    "assemble_prompt",
    "sanitize_query",
]

_LAZY_IMPORTS = {
    "AuthoritativeSnapshot": ("trustgate.services.snapshot", "AuthoritativeSnapshot"),
    "ConnectivityState": ("trustgate.services.snapshot", "ConnectivityState"),
    "InMemorySnapshotStore": ("trustgate.services.snapshot", "InMemorySnapshotStore"),
    "ModelState": ("trustgate.services.snapshot", "ModelState"),
    "ResponseFilter": ("trustgate.services.safety.filter", "ResponseFilter"),
    "SafetyPatternMatcher": ("trustgate.services.safety.patterns", "SafetyPatternMatcher"),
    "GroundingValidator": ("trustgate.services.safety.grounding", "GroundingValidator"),
    "RephraseEngine": ("trustgate.services.safety.rephrase", "RephraseEngine"),
    "SafetyAuditor": ("trustgate.services.safety.audit", "SafetyAuditor"),
    "filter_response": ("trustgate.services.safety.filter", "filter_response"),
    "QueryBlocklist": ("trustgate.services.routing.blocklist", "QueryBlocklist"),
    "CacheRelevanceScorer": ("trustgate.services.routing.relevance", "CacheRelevanceScorer"),
    "QueryRouter": ("trustgate.services.routing.router", "QueryRouter"),
    "route_query": ("trustgate.services.routing.router", "route_query"),
    "route_quick_question": ("trustgate.services.routing.router", "route_quick_question"),
    "assemble_prompt": ("trustgate.services.context.assembler", "assemble_prompt"),
    "sanitize_query": ("trustgate.services.context.sanitize", "sanitize_query"),
}


def __getattr__(name: str):
    target = _LAZY_IMPORTS.get(name)
    if target is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr_name = target
    return getattr(import_module(module_name), attr_name)

"""API Routes for Trustgate."""

from trustgate.api import context, health, routing, safety, snapshot

__all__ = [
    "context",
    "health",
    "routing",
    "safety",
    "snapshot",
]

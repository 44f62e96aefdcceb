"""Pydantic schemas for the Trustgate API."""

from trustgate.schemas.context import PromptRequest, PromptResponse
from trustgate.schemas.routing import (
    CacheScopeSchema,
    QuickQuestionSchema,
    RouteRequest,
    RouteResponse,
    SafetyCheckResponse,
    route_to_schema,
)
from trustgate.schemas.safety import (
    FilterRequest,
    FilterResponse,
    GroundingIssueSchema,
    ViolationSchema,
    filter_outcome_to_schema,
)
from trustgate.schemas.snapshot import (
    ConnectivitySchema,
    SnapshotPayload,
    SnapshotSummary,
)

__all__ = [
    # Safety
    "FilterRequest",
    "FilterResponse",
    "GroundingIssueSchema",
    "ViolationSchema",
    "filter_outcome_to_schema",
    # Routing
    "CacheScopeSchema",
    "QuickQuestionSchema",
    "RouteRequest",
    "RouteResponse",
    "SafetyCheckResponse",
    "route_to_schema",
    # Context
    "PromptRequest",
    "PromptResponse",
    # Snapshot
    "ConnectivitySchema",
    "SnapshotPayload",
    "SnapshotSummary",
]

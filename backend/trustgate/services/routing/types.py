"""Types for query routing: blocklist results, cache scopes and routes."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Union


class QueryCategory(str, Enum):
    """Question topics that no local model may answer."""

    EMERGENCY = "emergency"
    DRUG_INTERACTIONS = "drug_interactions"
    DOSAGE_CHANGE = "dosage_change"
    SYMPTOM_ASSESSMENT = "symptom_assessment"
    SIDE_EFFECTS = "side_effects"
    TREATMENT_ADVICE = "treatment_advice"


@dataclass(frozen=True)
class SafetyCheckResult:
    """Blocklist verdict for a question, made before any answer exists."""

    blocked: bool
    authoritative_engine_allowed: bool = False
    category: QueryCategory | None = None
    reason: str | None = None
    user_message: str | None = None


@dataclass(frozen=True)
class CacheScope:
    """Snapshot sections to include in a local model's context."""

    medications: bool = False
    labs: bool = False
    timeline: bool = False
    alerts: bool = False
    appointment: bool = False
    profile: bool = True

    @classmethod
    def full(cls) -> "CacheScope":
        return cls(
            medications=True,
            labs=True,
            timeline=True,
            alerts=True,
            appointment=True,
            profile=True,
        )

    @property
    def has_data_sections(self) -> bool:
        return self.medications or self.labs or self.timeline or self.alerts or self.appointment

    def with_profile(self) -> "CacheScope":
        return replace(self, profile=True)

    def sections(self) -> list[str]:
        return [
            name
            for name in ("medications", "labs", "timeline", "alerts", "appointment", "profile")
            if getattr(self, name)
        ]


@dataclass(frozen=True)
class CacheMatch:
    scope: CacheScope
    confidence: float


class ConfidenceTier(str, Enum):
    HIGH = "high"
    LOW = "low"


# ============================================
# Routes
# ============================================


@dataclass(frozen=True)
class Authoritative:
    """Send the question to the authoritative engine."""

    target = "authoritative"


@dataclass(frozen=True)
class SafetyBlocked:
    """No automated source may answer; show ``message`` instead."""

    reason: str
    message: str

    target = "safety_blocked"


@dataclass(frozen=True)
class LocalModel:
    """Let the local model answer from the ``scope`` sections of the snapshot."""

    scope: CacheScope
    confidence_tier: ConfidenceTier

    target = "local_model"


@dataclass(frozen=True)
class FallbackSection:
    """Open the UI section that shows the requested data directly."""

    section_id: str

    target = "fallback_section"


@dataclass(frozen=True)
class Deferred:
    """Keep the question until a source becomes available."""

    original_query: str

    target = "deferred"


QueryRoute = Union[Authoritative, SafetyBlocked, LocalModel, FallbackSection, Deferred]


@dataclass(frozen=True)
class QuickQuestion:
    """A UI-offered question whose routing inputs are known in advance."""

    id: str
    label: str
    query: str
    pre_classified: CacheMatch | None
    local_model_capable: bool

"""Pydantic schemas for the query routing API."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from trustgate.services.routing.types import (
    Authoritative,
    CacheScope,
    Deferred,
    FallbackSection,
    LocalModel,
    QueryRoute,
    QuickQuestion,
    SafetyBlocked,
    SafetyCheckResult,
)


class RouteRequest(BaseModel):
    question: str = Field(..., min_length=1, max_length=2000)


class CacheScopeSchema(BaseModel):
    medications: bool = False
    labs: bool = False
    timeline: bool = False
    alerts: bool = False
    appointment: bool = False
    profile: bool = True

    def to_scope(self) -> CacheScope:
        return CacheScope(**self.model_dump())

    @classmethod
    def from_scope(cls, scope: CacheScope) -> "CacheScopeSchema":
        return cls(
            medications=scope.medications,
            labs=scope.labs,
            timeline=scope.timeline,
            alerts=scope.alerts,
            appointment=scope.appointment,
            profile=scope.profile,
        )


# ============================================
# Route variants (discriminated on "target")
# ============================================


class AuthoritativeRoute(BaseModel):
    target: Literal["authoritative"] = "authoritative"


class SafetyBlockedRoute(BaseModel):
    target: Literal["safety_blocked"] = "safety_blocked"
    reason: str
    message: str


class LocalModelRoute(BaseModel):
    target: Literal["local_model"] = "local_model"
    scope: CacheScopeSchema
    confidence_tier: Literal["high", "low"]


class FallbackSectionRoute(BaseModel):
    target: Literal["fallback_section"] = "fallback_section"
    section_id: str


class DeferredRoute(BaseModel):
    target: Literal["deferred"] = "deferred"
    original_query: str


RouteResponse = Annotated[
    Union[
        AuthoritativeRoute,
        SafetyBlockedRoute,
        LocalModelRoute,
        FallbackSectionRoute,
        DeferredRoute,
    ],
    Field(discriminator="target"),
]


def route_to_schema(
    route: QueryRoute,
) -> AuthoritativeRoute | SafetyBlockedRoute | LocalModelRoute | FallbackSectionRoute | DeferredRoute:
    if isinstance(route, Authoritative):
        return AuthoritativeRoute()
    if isinstance(route, SafetyBlocked):
        return SafetyBlockedRoute(reason=route.reason, message=route.message)
    if isinstance(route, LocalModel):
        return LocalModelRoute(
            scope=CacheScopeSchema.from_scope(route.scope),
            confidence_tier=route.confidence_tier.value,
        )
    if isinstance(route, FallbackSection):
        return FallbackSectionRoute(section_id=route.section_id)
    if isinstance(route, Deferred):
        return DeferredRoute(original_query=route.original_query)
    raise TypeError(f"Unknown query route: {type(route).__name__}")


class SafetyCheckResponse(BaseModel):
    blocked: bool
    authoritative_engine_allowed: bool = False
    category: str | None = None
    reason: str | None = None
    user_message: str | None = None

    @classmethod
    def from_result(cls, result: SafetyCheckResult) -> "SafetyCheckResponse":
        return cls(
            blocked=result.blocked,
            authoritative_engine_allowed=result.authoritative_engine_allowed,
            category=result.category.value if result.category else None,
            reason=result.reason,
            user_message=result.user_message,
        )


class QuickQuestionSchema(BaseModel):
    id: str
    label: str
    query: str
    local_model_capable: bool
    pre_classified_scope: CacheScopeSchema | None = None
    pre_classified_confidence: float | None = None

    @classmethod
    def from_quick_question(cls, question: QuickQuestion) -> "QuickQuestionSchema":
        match = question.pre_classified
        return cls(
            id=question.id,
            label=question.label,
            query=question.query,
            local_model_capable=question.local_model_capable,
            pre_classified_scope=CacheScopeSchema.from_scope(match.scope) if match else None,
            pre_classified_confidence=match.confidence if match else None,
        )

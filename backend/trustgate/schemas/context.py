"""Pydantic schemas for local model prompt assembly."""

from pydantic import BaseModel, Field

from trustgate.schemas.routing import CacheScopeSchema


class PromptRequest(BaseModel):
    """Question to build a local model prompt for.

    When ``scope`` is omitted it is derived from the question the same way
    the router does.
    """

    question: str = Field(..., min_length=1)
    scope: CacheScopeSchema | None = None


class PromptResponse(BaseModel):
    prompt: str
    estimated_tokens: int
    scope: CacheScopeSchema
    confidence: float | None = None
    query_modified: bool = False
    modifications: list[str] = Field(default_factory=list)

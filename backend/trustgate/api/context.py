from fastapi import APIRouter, Depends

from trustgate.api.deps import get_snapshot
from trustgate.schemas.context import PromptRequest, PromptResponse
from trustgate.schemas.routing import CacheScopeSchema
from trustgate.services.context.assembler import assemble_prompt, estimate_token_count
from trustgate.services.context.sanitize import sanitize_query
from trustgate.services.routing.relevance import match_query_to_cache
from trustgate.services.snapshot import AuthoritativeSnapshot

router = APIRouter(prefix="/context", tags=["Local Model Context"])


@router.post("/prompt", response_model=PromptResponse)
async def build_prompt(
    request: PromptRequest,
    snapshot: AuthoritativeSnapshot = Depends(get_snapshot),
):
    """Assemble the prompt a local model should answer ``question`` from."""
    confidence = None
    if request.scope is not None:
        scope = request.scope.to_scope().with_profile()
    else:
        match = match_query_to_cache(request.question, snapshot)
        scope, confidence = match.scope, match.confidence

    prompt = assemble_prompt(request.question, snapshot, scope)
    sanitized = sanitize_query(request.question)

    return PromptResponse(
        prompt=prompt,
        estimated_tokens=estimate_token_count(prompt),
        scope=CacheScopeSchema.from_scope(scope),
        confidence=confidence,
        query_modified=sanitized.was_modified,
        modifications=[m.kind.value for m in sanitized.modifications],
    )

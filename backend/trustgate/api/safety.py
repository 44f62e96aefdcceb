from fastapi import APIRouter, Depends

from trustgate.api.deps import get_auditor, get_snapshot
from trustgate.schemas.safety import FilterRequest, FilterResponse, filter_outcome_to_schema
from trustgate.services.safety.audit import SafetyAuditor
from trustgate.services.safety.filter import filter_response
from trustgate.services.safety.output_sanitize import (
    TRUNCATION_DISCLAIMER,
    is_likely_truncated,
)
from trustgate.services.safety.types import Passed, Rephrased
from trustgate.services.snapshot import AuthoritativeSnapshot

router = APIRouter(prefix="/safety", tags=["Response Safety"])


@router.post("/filter", response_model=FilterResponse)
async def filter_generated_text(
    request: FilterRequest,
    snapshot: AuthoritativeSnapshot = Depends(get_snapshot),
    auditor: SafetyAuditor = Depends(get_auditor),
):
    """Check generated text before display.

    The returned ``text`` is always what the caller should show: the
    original, a rephrased version, or the fallback message.
    """
    outcome = filter_response(request.text, snapshot)
    auditor.record(outcome, request.text)

    truncated = isinstance(outcome, (Passed, Rephrased)) and is_likely_truncated(outcome.text)
    return filter_outcome_to_schema(
        outcome,
        possibly_truncated=truncated,
        truncation_notice=TRUNCATION_DISCLAIMER if truncated else None,
    )

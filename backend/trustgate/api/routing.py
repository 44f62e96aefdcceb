from fastapi import APIRouter, Depends, HTTPException

from trustgate.api.deps import get_auditor, get_connectivity, get_snapshot
from trustgate.schemas.routing import (
    QuickQuestionSchema,
    RouteRequest,
    RouteResponse,
    SafetyCheckResponse,
    route_to_schema,
)
from trustgate.services.routing.blocklist import check_query
from trustgate.services.routing.quick_questions import get_quick_question, get_quick_questions
from trustgate.services.routing.router import route_query, route_quick_question
from trustgate.services.safety.audit import SafetyAuditor
from trustgate.services.snapshot import AuthoritativeSnapshot, ConnectivityState

router = APIRouter(prefix="/routing", tags=["Query Routing"])


@router.post("/route", response_model=RouteResponse)
async def route_question(
    request: RouteRequest,
    snapshot: AuthoritativeSnapshot = Depends(get_snapshot),
    connectivity: ConnectivityState = Depends(get_connectivity),
    auditor: SafetyAuditor = Depends(get_auditor),
):
    """Decide which answer source may respond, before anything is generated."""
    route = route_query(request.question, snapshot, connectivity)
    auditor.count(f"route_{route.target}")
    return route_to_schema(route)


@router.post("/safety-check", response_model=SafetyCheckResponse)
async def safety_check(request: RouteRequest):
    """Run only the question blocklist."""
    return SafetyCheckResponse.from_result(check_query(request.question))


@router.get("/quick-questions", response_model=list[QuickQuestionSchema])
async def list_quick_questions():
    """List the quick questions the UI may offer."""
    return [QuickQuestionSchema.from_quick_question(q) for q in get_quick_questions()]


@router.post("/quick-questions/{question_id}", response_model=RouteResponse)
async def route_quick(
    question_id: str,
    connectivity: ConnectivityState = Depends(get_connectivity),
    auditor: SafetyAuditor = Depends(get_auditor),
):
    """Route a quick question using its pre-classified scope."""
    quick_question = get_quick_question(question_id)
    if quick_question is None:
        raise HTTPException(status_code=404, detail="Quick question not found")
    route = route_quick_question(quick_question, connectivity)
    auditor.count(f"route_{route.target}")
    return route_to_schema(route)

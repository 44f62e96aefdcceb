from fastapi import APIRouter, Response

from trustgate.services.safety.audit import SafetyAuditor

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    return {"status": "healthy", "service": "trustgate-api"}


@router.get("/")
async def root():
    """Root endpoint with API information."""
    return {"message": "Welcome to Trustgate API", "docs": "/docs", "health": "/health"}


@router.get("/metrics")
async def metrics():
    """Prometheus-style metrics endpoint."""
    counters = SafetyAuditor.get_global_counters()
    lines = [
        "# HELP trustgate_safety_events_total Count of filter and routing events.",
        "# TYPE trustgate_safety_events_total counter",
    ]
    if counters:
        for event in sorted(counters):
            lines.append(f'trustgate_safety_events_total{{event="{event}"}} {counters[event]}')
    else:
        lines.append('trustgate_safety_events_total{event="none"} 0')
    body = "\n".join(lines) + "\n"
    return Response(body, media_type="text/plain; version=0.0.4")

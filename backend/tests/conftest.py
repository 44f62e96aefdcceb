import os
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("DEBUG", "true")

from trustgate.services.safety.audit import SafetyAuditor  # noqa: E402
from trustgate.services.snapshot import (  # noqa: E402
    AuthoritativeSnapshot,
    CachedAlert,
    CachedAppointment,
    CachedLabResult,
    CachedMedication,
    CachedProfile,
    CachedTimelineEvent,
    ConnectivityState,
    InMemorySnapshotStore,
    ModelState,
)


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _reset_safety_counters():
    SafetyAuditor.reset_counters()
    yield
    SafetyAuditor.reset_counters()


@pytest.fixture()
def full_snapshot():
    return AuthoritativeSnapshot(
        medications=(
            CachedMedication(name="Metformin", dose="500mg", frequency="twice daily"),
            CachedMedication(name="Lisinopril", dose="10", unit="mg", frequency="once daily"),
            CachedMedication(name="Atorvastatin", dose="20mg", is_active=False),
        ),
        labs=(
            CachedLabResult(
                test_name="HbA1c",
                value=6.5,
                unit="%",
                reference_min=4.0,
                reference_max=5.6,
                is_abnormal=True,
                tested_at="2026-09-01",
            ),
            CachedLabResult(test_name="Potassium", value=4.1, unit="mmol/L"),
            CachedLabResult(test_name="Urinalysis", value="Negative"),
        ),
        timeline=(
            CachedTimelineEvent(
                timestamp="2026-09-01", event_type="lab", title="Quarterly bloodwork"
            ),
            CachedTimelineEvent(
                timestamp="2026-08-15", event_type="medication", title="Started Lisinopril"
            ),
        ),
        alerts=(
            CachedAlert(title="HbA1c above range", severity="warning"),
            CachedAlert(title="Old reminder", dismissed=True),
        ),
        appointment=CachedAppointment(
            date="2026-11-02", doctor_name="Dr. Rivera", purpose="Diabetes follow-up"
        ),
        profile=CachedProfile(name="Sam Lee", blood_type="O+", allergies=("Penicillin",)),
        synced_at=datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc),
    )


@pytest.fixture()
def empty_snapshot():
    return AuthoritativeSnapshot()


@pytest.fixture()
def offline():
    return ConnectivityState(authoritative_reachable=False, local_model=ModelState.UNLOADED)


@pytest.fixture()
def connected():
    return ConnectivityState(authoritative_reachable=True, local_model=ModelState.UNLOADED)


@pytest.fixture()
def local_ready():
    return ConnectivityState(authoritative_reachable=False, local_model=ModelState.READY)


@pytest.fixture()
def snapshot_store():
    return InMemorySnapshotStore()


@asynccontextmanager
async def _no_lifespan(app):
    yield


@pytest.fixture()
def client(snapshot_store):
    from trustgate.api import context, health, routing, safety, snapshot
    from trustgate.api.deps import get_snapshot_store

    app = FastAPI(lifespan=_no_lifespan)
    app.include_router(health.router)
    app.include_router(safety.router, prefix="/api/v1")
    app.include_router(routing.router, prefix="/api/v1")
    app.include_router(context.router, prefix="/api/v1")
    app.include_router(snapshot.router, prefix="/api/v1")

    app.dependency_overrides[get_snapshot_store] = lambda: snapshot_store

    return TestClient(app, raise_server_exceptions=False)

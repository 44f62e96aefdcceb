"""Shared FastAPI dependencies."""

from functools import lru_cache

from fastapi import Depends

from trustgate.services.safety.audit import SafetyAuditor
from trustgate.services.snapshot import (
    AuthoritativeSnapshot,
    ConnectivityState,
    InMemorySnapshotStore,
    SnapshotStore,
    initial_connectivity,
)


@lru_cache()
def _process_snapshot_store() -> InMemorySnapshotStore:
    store = InMemorySnapshotStore()
    store.set_connectivity(initial_connectivity())
    return store


def get_snapshot_store() -> SnapshotStore:
    """Process-wide snapshot store; overridden in tests."""
    return _process_snapshot_store()


def get_snapshot(store: SnapshotStore = Depends(get_snapshot_store)) -> AuthoritativeSnapshot:
    """Latest complete snapshot, read once per request."""
    return store.get_snapshot()


def get_connectivity(store: SnapshotStore = Depends(get_snapshot_store)) -> ConnectivityState:
    return store.get_connectivity()


def get_auditor() -> SafetyAuditor:
    return SafetyAuditor()

from fastapi import APIRouter, Depends

from trustgate.api.deps import get_snapshot_store
from trustgate.schemas.snapshot import ConnectivitySchema, SnapshotPayload, SnapshotSummary
from trustgate.services.snapshot import SnapshotStore

router = APIRouter(tags=["Collaborator Sync"])


@router.put("/snapshot", response_model=SnapshotSummary)
async def replace_snapshot(
    payload: SnapshotPayload,
    store: SnapshotStore = Depends(get_snapshot_store),
):
    """Replace the authoritative snapshot after a sync."""
    snapshot = payload.to_snapshot()
    store.replace_snapshot(snapshot)
    return SnapshotSummary.from_snapshot(snapshot)


@router.get("/snapshot", response_model=SnapshotSummary)
async def get_snapshot_summary(store: SnapshotStore = Depends(get_snapshot_store)):
    """Section counts of the snapshot in use. Record values are not returned."""
    return SnapshotSummary.from_snapshot(store.get_snapshot())


@router.put("/connectivity", response_model=ConnectivitySchema)
async def update_connectivity(
    payload: ConnectivitySchema,
    store: SnapshotStore = Depends(get_snapshot_store),
):
    """Report authoritative engine reachability and local model state."""
    store.set_connectivity(payload.to_state())
    return ConnectivitySchema.from_state(store.get_connectivity())


@router.get("/connectivity", response_model=ConnectivitySchema)
async def get_connectivity_status(store: SnapshotStore = Depends(get_snapshot_store)):
    return ConnectivitySchema.from_state(store.get_connectivity())

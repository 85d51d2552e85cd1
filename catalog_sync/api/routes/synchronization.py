"""Synchronization Route: operator trigger for one catalog sync run.

Invariants:
    - Partial failure returns 200 with the failures listed
    - Reconciliation failure surfaces as ReconciliationError (500)
"""

from fastapi import APIRouter, Depends

from catalog_sync.api.dependencies import get_sync_orchestrator
from catalog_sync.schemas.synchronization import SynchronizationResponse
from catalog_sync.services.sync_orchestrator import SyncOrchestrator

router = APIRouter(prefix="/api/v1/synchronization", tags=["synchronization"])


@router.post("", response_model=SynchronizationResponse)
async def run_synchronization(
    orchestrator: SyncOrchestrator = Depends(get_sync_orchestrator),
):
    report = await orchestrator.synchronize()
    return SynchronizationResponse(**report.summary())

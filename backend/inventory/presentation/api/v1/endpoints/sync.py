"""Sync endpoints — batch reconciliation and the read-only server asset list."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from inventory.application.schemas.sync import (
    ServerAssetResponse,
    SyncRequest,
    SyncResponse,
)
from inventory.application.services import ReconciliationService
from inventory.domain.exceptions import PersistenceError
from inventory.infrastructure.dependencies import get_reconciliation_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Sync"])


@router.post("/sync", response_model=SyncResponse)
async def sync_assets(
    request: SyncRequest,
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> SyncResponse:
    """Apply a device's dirty batch and return the guids that were accepted."""
    records = [payload.to_entity() for payload in request.assets]
    try:
        outcome = await service.apply_batch(records)
    except PersistenceError as e:
        logger.error("Sync batch of %d assets failed: %s", len(records), e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )
    return SyncResponse.from_outcome(outcome)


@router.get("/server-assets", response_model=list[ServerAssetResponse])
async def list_server_assets(
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> list[ServerAssetResponse]:
    """Every asset held by the server, tombstones included, for display."""
    records = await service.list_assets()
    return [ServerAssetResponse.from_entity(r) for r in records]

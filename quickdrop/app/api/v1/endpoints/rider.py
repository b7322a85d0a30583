"""
Rider Workspace API Endpoints.

Deliveries in hand, completed deliveries, delivery status updates,
earnings and cash-out. All endpoints require the rider role.
"""

from typing import List
from fastapi import APIRouter, Depends, Path, Query, status
from quickdrop.app.api.v1.providers import get_earnings_ledger, get_lifecycle_manager
from quickdrop.app.core.dependencies import VerifiedIdentity
from quickdrop.app.core.guards import require_rider, require_rider_self
from quickdrop.app.domain.earnings.ledger import EarningsLedger
from quickdrop.app.domain.parcels.lifecycle import ParcelLifecycleManager
from quickdrop.app.schemas.earning import CashOutRequest, EarningResponse
from quickdrop.app.schemas.parcel import DeliveryStatusUpdate, ParcelResponse

router = APIRouter(prefix="/rider", tags=["Rider"])


@router.get("/pending-deliveries", response_model=List[ParcelResponse])
async def list_pending_deliveries(
    email: str = Query(..., description="Rider email (must match the token)"),
    identity: VerifiedIdentity = Depends(require_rider_self),
    manager: ParcelLifecycleManager = Depends(get_lifecycle_manager),
):
    """Parcels assigned to the rider that are not delivered yet."""
    parcels = await manager.list_active_deliveries(email)
    return [ParcelResponse.model_validate(p) for p in parcels]


@router.get("/completed", response_model=List[ParcelResponse])
async def list_completed_deliveries(
    email: str = Query(..., description="Rider email (must match the token)"),
    identity: VerifiedIdentity = Depends(require_rider_self),
    manager: ParcelLifecycleManager = Depends(get_lifecycle_manager),
):
    parcels = await manager.list_completed_deliveries(email)
    return [ParcelResponse.model_validate(p) for p in parcels]


@router.patch("/deliveries/{parcel_id}", response_model=ParcelResponse)
async def update_delivery_status(
    update: DeliveryStatusUpdate,
    parcel_id: str = Path(..., description="Parcel ID"),
    identity: VerifiedIdentity = Depends(require_rider),
    manager: ParcelLifecycleManager = Depends(get_lifecycle_manager),
):
    """
    Move an assigned parcel forward (rider only).
    
    Validates:
    - Parcel is assigned to the caller
    - rider_assigned → in_transit | delivered, in_transit → delivered
    """
    parcel = await manager.update_delivery_status(identity, parcel_id, update.status)
    return ParcelResponse.model_validate(parcel)


@router.get("/earnings", response_model=List[EarningResponse])
async def list_earnings(
    email: str = Query(..., description="Rider email (must match the token)"),
    identity: VerifiedIdentity = Depends(require_rider_self),
    ledger: EarningsLedger = Depends(get_earnings_ledger),
):
    earnings = await ledger.list_earnings(email)
    return [EarningResponse.model_validate(e) for e in earnings]


@router.post("/cash-out", response_model=EarningResponse, status_code=status.HTTP_201_CREATED)
async def cash_out(
    request: CashOutRequest,
    identity: VerifiedIdentity = Depends(require_rider),
    ledger: EarningsLedger = Depends(get_earnings_ledger),
):
    """
    Cash out a delivered parcel (rider only).
    
    409 if the parcel was already cashed out.
    """
    earning = await ledger.cash_out(identity, request)
    return EarningResponse.model_validate(earning)

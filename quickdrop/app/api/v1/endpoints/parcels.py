"""
Parcel API Endpoints.

Booking, sender listings, public parcel lookup and admin deletion.
"""

from typing import List
from fastapi import APIRouter, Depends, Path, Query, status
from quickdrop.app.api.v1.providers import get_dispatch_assigner, get_lifecycle_manager
from quickdrop.app.core.dependencies import VerifiedIdentity, get_verified_identity
from quickdrop.app.core.guards import require_admin, require_self
from quickdrop.app.domain.dispatch.assigner import DispatchAssigner
from quickdrop.app.domain.parcels.lifecycle import ParcelLifecycleManager
from quickdrop.app.schemas.parcel import DeleteResponse, ParcelCreate, ParcelResponse

router = APIRouter(prefix="/parcels", tags=["Parcels"])


@router.get("", response_model=List[ParcelResponse])
async def list_my_parcels(
    email: str = Query(..., description="Sender email (must match the token)"),
    identity: VerifiedIdentity = Depends(require_self),
    manager: ParcelLifecycleManager = Depends(get_lifecycle_manager),
):
    """List parcels booked by the caller, newest first."""
    parcels = await manager.list_by_sender(email)
    return [ParcelResponse.model_validate(p) for p in parcels]


@router.get("/unassigned", response_model=List[ParcelResponse])
async def list_unassigned_parcels(
    assigner: DispatchAssigner = Depends(get_dispatch_assigner),
):
    """Paid parcels still waiting for a rider."""
    parcels = await assigner.list_unassigned()
    return [ParcelResponse.model_validate(p) for p in parcels]


@router.get("/{parcel_id}", response_model=ParcelResponse)
async def get_parcel(
    parcel_id: str = Path(..., description="Parcel ID"),
    manager: ParcelLifecycleManager = Depends(get_lifecycle_manager),
):
    """
    Get details of a single parcel.
    
    400 for a malformed id, 404 if it does not exist.
    """
    parcel = await manager.get_parcel(parcel_id)
    return ParcelResponse.model_validate(parcel)


@router.post("", response_model=ParcelResponse, status_code=status.HTTP_201_CREATED)
async def create_parcel(
    parcel_data: ParcelCreate,
    identity: VerifiedIdentity = Depends(get_verified_identity),
    manager: ParcelLifecycleManager = Depends(get_lifecycle_manager),
):
    """Book a parcel. The caller becomes the sender."""
    parcel = await manager.create_parcel(identity, parcel_data)
    return ParcelResponse.model_validate(parcel)


@router.delete("/{parcel_id}", response_model=DeleteResponse)
async def delete_parcel(
    parcel_id: str = Path(..., description="Parcel ID"),
    admin: VerifiedIdentity = Depends(require_admin),
    manager: ParcelLifecycleManager = Depends(get_lifecycle_manager),
):
    """Hard delete a parcel (admin only)."""
    deleted = await manager.delete_parcel(parcel_id, actor_email=admin.email)
    return DeleteResponse(id=parcel_id, deleted_count=deleted)

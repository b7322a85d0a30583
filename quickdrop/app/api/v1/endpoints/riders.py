"""
Rider Management API Endpoints.

Applications, admin review, approval, removal and the public
available-riders query used by dispatch.
"""

from typing import List
from fastapi import APIRouter, Depends, Path, Query, status
from quickdrop.app.api.v1.providers import get_dispatch_assigner, get_rider_registry
from quickdrop.app.core.dependencies import VerifiedIdentity
from quickdrop.app.core.guards import require_admin
from quickdrop.app.domain.accounts.riders import RiderRegistry
from quickdrop.app.domain.dispatch.assigner import DispatchAssigner
from quickdrop.app.models.rider_enums import RiderStatus
from quickdrop.app.schemas.parcel import DeleteResponse
from quickdrop.app.schemas.rider import RiderApplication, RiderApprovalResponse, RiderResponse
from quickdrop.app.schemas.user import UserResponse

router = APIRouter(prefix="/riders", tags=["Riders"])


@router.post("", response_model=RiderResponse, status_code=status.HTTP_201_CREATED)
async def apply_as_rider(
    application: RiderApplication,
    registry: RiderRegistry = Depends(get_rider_registry),
):
    """Submit a rider application. It starts out pending."""
    rider = await registry.apply(application)
    return RiderResponse.model_validate(rider)


@router.get("/pending", response_model=List[RiderResponse])
async def list_pending_riders(
    admin: VerifiedIdentity = Depends(require_admin),
    registry: RiderRegistry = Depends(get_rider_registry),
):
    riders = await registry.list_riders(RiderStatus.PENDING)
    return [RiderResponse.model_validate(r) for r in riders]


@router.get("/approved", response_model=List[RiderResponse])
async def list_approved_riders(
    admin: VerifiedIdentity = Depends(require_admin),
    registry: RiderRegistry = Depends(get_rider_registry),
):
    riders = await registry.list_riders(RiderStatus.ACTIVE)
    return [RiderResponse.model_validate(r) for r in riders]


@router.get("/available", response_model=List[RiderResponse])
async def list_available_riders(
    region: str = Query("", description="Region to dispatch in, e.g. Chattogram"),
    assigner: DispatchAssigner = Depends(get_dispatch_assigner),
):
    """Active riders in a region."""
    riders = await assigner.list_available_riders(region)
    return [RiderResponse.model_validate(r) for r in riders]


@router.patch("/{rider_id}/approve", response_model=RiderApprovalResponse)
async def approve_rider(
    rider_id: str = Path(..., description="Rider ID"),
    admin: VerifiedIdentity = Depends(require_admin),
    registry: RiderRegistry = Depends(get_rider_registry),
):
    """
    Approve a pending rider (admin-only).
    
    The rider becomes active and the user with the rider's email gets the
    ``rider`` role. Both final states are returned.
    """
    result = await registry.approve(rider_id, actor_email=admin.email)
    return RiderApprovalResponse(
        rider=RiderResponse.model_validate(result.rider),
        user=UserResponse.model_validate(result.user) if result.user else None,
        rider_modified=result.rider_modified,
        user_modified=result.user_modified,
    )


@router.delete("/{rider_id}", response_model=DeleteResponse)
async def delete_rider(
    rider_id: str = Path(..., description="Rider ID"),
    admin: VerifiedIdentity = Depends(require_admin),
    registry: RiderRegistry = Depends(get_rider_registry),
):
    deleted = await registry.delete_rider(rider_id, actor_email=admin.email)
    return DeleteResponse(id=rider_id, deleted_count=deleted)

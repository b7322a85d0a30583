"""
Dispatch API Endpoints.

Assigns a rider to a paid, unassigned parcel.
"""

from fastapi import APIRouter, Depends
from quickdrop.app.api.v1.providers import get_dispatch_assigner
from quickdrop.app.domain.dispatch.assigner import DispatchAssigner
from quickdrop.app.schemas.dispatch import RiderAssignment, RiderAssignmentResponse
from quickdrop.app.schemas.parcel import ParcelResponse
from quickdrop.app.schemas.rider import RiderResponse

router = APIRouter(prefix="/dispatch", tags=["Dispatch"])


@router.patch("/assign", response_model=RiderAssignmentResponse)
async def assign_rider(
    assignment: RiderAssignment,
    assigner: DispatchAssigner = Depends(get_dispatch_assigner),
):
    """
    Assign a rider to a parcel.
    
    Validates:
    - Parcel is paid and has no rider yet (409 otherwise)
    - Rider exists and is active
    
    Sets the rider's work status to ``collected``.
    """
    result = await assigner.assign(
        assignment.parcel_id,
        assignment.rider_id,
        assignment.rider_name,
        str(assignment.rider_email),
    )
    return RiderAssignmentResponse(
        parcel=ParcelResponse.model_validate(result.parcel),
        rider=RiderResponse.model_validate(result.rider),
    )

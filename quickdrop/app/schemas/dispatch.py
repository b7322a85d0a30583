"""
Dispatch schemas.
"""

from pydantic import BaseModel, EmailStr, Field
from quickdrop.app.schemas.parcel import ParcelResponse
from quickdrop.app.schemas.rider import RiderResponse


class RiderAssignment(BaseModel):
    """Schema for assigning a rider to a parcel."""
    parcel_id: str
    rider_id: str
    rider_name: str = Field(..., min_length=1, max_length=100)
    rider_email: EmailStr


class RiderAssignmentResponse(BaseModel):
    """Final state of both documents touched by the assignment."""
    parcel: ParcelResponse
    rider: RiderResponse

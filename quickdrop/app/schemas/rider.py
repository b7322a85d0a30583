"""
Rider Pydantic schemas.
"""

from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional
from quickdrop.app.models.rider_enums import RiderStatus
from quickdrop.app.schemas.user import UserResponse


class RiderApplication(BaseModel):
    """Schema for a rider application. Status is always set to pending."""
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)
    age: Optional[int] = Field(None, ge=18, le=100)
    region: str = Field(..., min_length=1, max_length=100)
    district: Optional[str] = Field(None, max_length=100)
    national_id: Optional[str] = Field(None, max_length=50)
    bike_brand: Optional[str] = Field(None, max_length=100)
    bike_registration: Optional[str] = Field(None, max_length=50)


class RiderResponse(BaseModel):
    """Schema for rider response."""
    id: str
    email: str
    name: str
    phone: Optional[str] = None
    age: Optional[int] = None
    region: str
    district: Optional[str] = None
    national_id: Optional[str] = None
    bike_brand: Optional[str] = None
    bike_registration: Optional[str] = None
    status: RiderStatus
    work_status: Optional[str] = None
    created_at: datetime
    approved_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True


class RiderApprovalResponse(BaseModel):
    """
    Final state of every document the approval touched.
    
    ``user`` is null when the rider's email has no user record.
    """
    rider: RiderResponse
    user: Optional[UserResponse] = None
    rider_modified: int
    user_modified: int

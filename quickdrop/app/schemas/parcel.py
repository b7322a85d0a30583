"""
Parcel Pydantic schemas.

Defines request and response models for parcel lifecycle endpoints.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from quickdrop.app.models.parcel_enums import PaymentStatus, DeliveryStatus, ParcelType


class ParcelCreate(BaseModel):
    """Schema for booking a new parcel. The sender is the authenticated caller."""
    title: str = Field(..., min_length=1, max_length=200, description="Parcel title")
    parcel_type: ParcelType = Field(default=ParcelType.DOCUMENT, description="document or non-document")
    weight: Optional[float] = Field(None, gt=0, description="Weight in kilograms")
    cost: float = Field(..., gt=0, description="Delivery cost quoted to the sender")
    sender_name: Optional[str] = Field(None, max_length=100)
    sender_region: Optional[str] = Field(None, max_length=100)
    sender_address: Optional[str] = Field(None, max_length=500)
    sender_contact: Optional[str] = Field(None, max_length=50)
    receiver_name: Optional[str] = Field(None, max_length=100)
    receiver_region: Optional[str] = Field(None, max_length=100)
    receiver_address: Optional[str] = Field(None, max_length=500)
    receiver_contact: Optional[str] = Field(None, max_length=50)
    instructions: Optional[str] = Field(None, max_length=500)


class DeliveryStatusUpdate(BaseModel):
    """
    Schema for a rider's delivery status update.
    
    Kept as a plain string so unrecognized values reach the lifecycle
    manager and are rejected there as invalid arguments.
    """
    status: str = Field(..., description="in_transit or delivered")


class ParcelResponse(BaseModel):
    """Schema for parcel response."""
    id: str
    tracking_id: str
    sender_email: str
    sender_name: Optional[str] = None
    sender_region: Optional[str] = None
    sender_address: Optional[str] = None
    sender_contact: Optional[str] = None
    receiver_name: Optional[str] = None
    receiver_region: Optional[str] = None
    receiver_address: Optional[str] = None
    receiver_contact: Optional[str] = None
    title: str
    parcel_type: ParcelType
    weight: Optional[float] = None
    cost: float
    instructions: Optional[str] = None
    payment_status: PaymentStatus
    transaction_id: Optional[str] = None
    delivery_status: DeliveryStatus
    rider_name: Optional[str] = None
    rider_email: Optional[str] = None
    transit_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    cash_out: bool
    created_at: datetime
    
    class Config:
        from_attributes = True


class DeleteResponse(BaseModel):
    """Schema for hard-delete results."""
    id: str
    deleted_count: int

"""
Payment Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from quickdrop.app.schemas.parcel import ParcelResponse


class PaymentCreate(BaseModel):
    """Schema for recording a captured payment against a parcel."""
    parcel_id: str = Field(..., description="Parcel being paid for")
    amount: float = Field(..., gt=0, description="Amount captured")
    transaction_id: str = Field(..., min_length=1, max_length=255, description="Processor transaction reference")
    payment_method: Optional[str] = Field(None, max_length=50)


class PaymentResponse(BaseModel):
    """Schema for payment response."""
    id: str
    parcel_id: str
    email: str
    amount: float
    transaction_id: str
    payment_method: Optional[str] = None
    paid_date: datetime
    
    class Config:
        from_attributes = True


class PaymentRecordResponse(BaseModel):
    """
    Result of reconciling a payment with its parcel.
    
    ``replayed`` is true when the same transaction was already recorded and
    nothing was written.
    """
    payment: Optional[PaymentResponse] = None
    parcel: ParcelResponse
    parcel_modified: int
    replayed: bool = False


class PaymentIntentRequest(BaseModel):
    """Schema for requesting a processor payment intent."""
    amount: float = Field(..., gt=0, description="Amount in major currency units")


class PaymentIntentResponse(BaseModel):
    client_secret: str
    payment_intent_id: str
    amount: float
    currency: str

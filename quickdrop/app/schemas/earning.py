"""
Rider earning schemas.
"""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class CashOutRequest(BaseModel):
    """
    Schema for a rider cash-out.
    
    Fields are optional at the schema level; the ledger reports missing
    ones as invalid arguments.
    """
    parcel_id: Optional[str] = None
    amount: Optional[float] = None
    rider_email: Optional[str] = None
    rider_name: Optional[str] = None
    tracking_id: Optional[str] = None


class EarningResponse(BaseModel):
    """Schema for earning response."""
    id: str
    parcel_id: str
    tracking_id: Optional[str] = None
    amount: float
    rider_email: str
    rider_name: str
    cash_out_date: datetime
    
    class Config:
        from_attributes = True

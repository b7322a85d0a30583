"""
Rider earning database model.

Immutable record of one cash-out against one parcel.
NO updates or deletions allowed.
"""

from sqlalchemy import Column, String, Float, DateTime
from quickdrop.app.db.session import Base
from quickdrop.app.core.ids import new_id


class Earning(Base):
    __tablename__ = "rider_earnings"
    
    id = Column(String(32), primary_key=True, default=new_id)
    parcel_id = Column(String(32), nullable=False, index=True)
    tracking_id = Column(String(32), nullable=True)
    amount = Column(Float, nullable=False)
    rider_email = Column(String(255), nullable=False, index=True)
    rider_name = Column(String(100), nullable=False)
    
    # Timestamp (Immutable - no updated_at)
    cash_out_date = Column(DateTime(timezone=True), nullable=False)
    
    def __repr__(self):
        return f"<Earning(id={self.id}, parcel_id={self.parcel_id}, amount={self.amount})>"

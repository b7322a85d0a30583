"""
Rider database model.

Created from a rider application in PENDING status; an admin approval
moves it to ACTIVE.
"""

from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.sql import func
from quickdrop.app.db.session import Base
from quickdrop.app.core.ids import new_id
from quickdrop.app.models.rider_enums import RiderStatus


class Rider(Base):
    __tablename__ = "riders"
    
    id = Column(String(32), primary_key=True, default=new_id)
    email = Column(String(255), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    phone = Column(String(50), nullable=True)
    age = Column(Integer, nullable=True)
    region = Column(String(100), nullable=False, index=True)
    district = Column(String(100), nullable=True)
    national_id = Column(String(50), nullable=True)
    bike_brand = Column(String(100), nullable=True)
    bike_registration = Column(String(50), nullable=True)
    
    status = Column(Enum(RiderStatus), default=RiderStatus.PENDING, nullable=False, index=True)
    work_status = Column(String(50), nullable=True)
    
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    
    def __repr__(self):
        return f"<Rider(id={self.id}, email='{self.email}', region='{self.region}', status='{self.status.value}')>"

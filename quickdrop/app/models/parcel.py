"""
Parcel database model.

A parcel is tracked from creation through payment, dispatch and delivery,
and finally rider settlement.
"""

from sqlalchemy import Column, String, Float, DateTime, Enum, Boolean
from sqlalchemy.sql import func
from quickdrop.app.db.session import Base
from quickdrop.app.core.ids import new_id, new_tracking_id
from quickdrop.app.models.parcel_enums import PaymentStatus, DeliveryStatus, ParcelType


class Parcel(Base):
    """
    Parcel model.
    
    payment_status moves unpaid → paid once; delivery_status only moves
    forward. Rider and settlement fields are filled in by dispatch and
    cash-out respectively.
    """
    __tablename__ = "parcels"
    
    id = Column(String(32), primary_key=True, default=new_id)
    tracking_id = Column(String(32), unique=True, nullable=False, index=True, default=new_tracking_id)
    
    # Sender
    sender_email = Column(String(255), nullable=False, index=True)
    sender_name = Column(String(100), nullable=True)
    sender_region = Column(String(100), nullable=True)
    sender_address = Column(String(500), nullable=True)
    sender_contact = Column(String(50), nullable=True)
    
    # Receiver
    receiver_name = Column(String(100), nullable=True)
    receiver_region = Column(String(100), nullable=True)
    receiver_address = Column(String(500), nullable=True)
    receiver_contact = Column(String(50), nullable=True)
    
    # Parcel details
    title = Column(String(200), nullable=False)
    parcel_type = Column(Enum(ParcelType), default=ParcelType.DOCUMENT, nullable=False)
    weight = Column(Float, nullable=True)
    cost = Column(Float, nullable=False)
    instructions = Column(String(500), nullable=True)
    
    # Payment
    payment_status = Column(Enum(PaymentStatus), default=PaymentStatus.UNPAID, nullable=False, index=True)
    transaction_id = Column(String(255), nullable=True)
    
    # Delivery
    delivery_status = Column(Enum(DeliveryStatus), default=DeliveryStatus.NOT_DELIVERED, nullable=False, index=True)
    rider_name = Column(String(100), nullable=True)
    rider_email = Column(String(255), nullable=True, index=True)
    transit_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    
    # Settlement
    cash_out = Column(Boolean, default=False, nullable=False)
    
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    
    def __repr__(self):
        return f"<Parcel(id={self.id}, tracking='{self.tracking_id}', delivery_status='{self.delivery_status.value}')>"

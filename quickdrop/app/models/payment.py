"""
Payment database model.

One row per captured payment; never updated afterwards.
"""

from sqlalchemy import Column, String, Float, DateTime
from quickdrop.app.db.session import Base
from quickdrop.app.core.ids import new_id


class Payment(Base):
    __tablename__ = "payments"
    
    id = Column(String(32), primary_key=True, default=new_id)
    parcel_id = Column(String(32), nullable=False, index=True)
    email = Column(String(255), nullable=False, index=True)  # Payer
    amount = Column(Float, nullable=False)
    transaction_id = Column(String(255), nullable=False)
    payment_method = Column(String(50), nullable=True)
    paid_date = Column(DateTime(timezone=True), nullable=False)
    
    def __repr__(self):
        return f"<Payment(id={self.id}, parcel_id={self.parcel_id}, tx='{self.transaction_id}')>"

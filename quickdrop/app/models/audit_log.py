"""
Audit Log Database Model.

Tracks every state-changing domain operation for reconciliation and support.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from quickdrop.app.db.session import Base


class AuditLog(Base):
    """
    Audit log model.
    
    Events logged:
    - PARCEL_CREATED / PARCEL_DELETED
    - PAYMENT_RECORDED
    - RIDER_ASSIGNED / DELIVERY_STATUS_UPDATED
    - RIDER_CASHED_OUT
    - RIDER_APPROVED / RIDER_DELETED / ROLE_CHANGED
    """
    __tablename__ = "audit_logs"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    
    # Who performed the action (None for unauthenticated operations)
    actor_email = Column(String(255), nullable=True, index=True)
    
    # What action was performed
    action = Column(String(100), nullable=False, index=True)
    
    # Document the action was performed on
    target_id = Column(String(32), nullable=True, index=True)
    
    # Additional context (JSON for flexibility)
    meta_data = Column(JSON, nullable=True)
    
    # Timestamp
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    
    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', actor={self.actor_email}, target={self.target_id})>"

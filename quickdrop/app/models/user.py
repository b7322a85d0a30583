"""
User database model.

Users are keyed by email; identity itself lives with the external
identity provider.
"""

from sqlalchemy import Column, String, DateTime, Enum
from sqlalchemy.sql import func
from quickdrop.app.db.session import Base
from quickdrop.app.core.ids import new_id
from quickdrop.app.models.enums import UserRole


class User(Base):
    """
    User model.
    
    role changes only through an admin role update or rider approval.
    """
    __tablename__ = "users"
    
    id = Column(String(32), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=True)
    photo_url = Column(String(500), nullable=True)
    role = Column(Enum(UserRole), default=UserRole.USER, nullable=False)
    
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    
    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"

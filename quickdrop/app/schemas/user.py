"""
User Pydantic schemas.
"""

from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional
from quickdrop.app.models.enums import UserRole


class UserCreate(BaseModel):
    """
    Schema for signup.
    
    Role is never client-controlled; every new user starts as ``user``.
    """
    email: EmailStr = Field(..., description="User email address")
    name: Optional[str] = Field(None, max_length=100)
    photo_url: Optional[str] = Field(None, max_length=500)


class UserResponse(BaseModel):
    """Schema for user response."""
    id: str
    email: str
    name: Optional[str] = None
    photo_url: Optional[str] = None
    role: UserRole
    created_at: datetime
    
    class Config:
        from_attributes = True


class UserRoleResponse(BaseModel):
    role: UserRole


class RoleUpdate(BaseModel):
    """Schema for an admin role change."""
    role: UserRole

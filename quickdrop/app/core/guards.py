"""
Security guards for role-based and self-access control.

Each gate is a plain function taking a VerifiedIdentity, plus a FastAPI
dependency wrapping it. Endpoints compose the subset they need.
"""

from typing import Optional
from fastapi import Depends, Query
from quickdrop.app.core.dependencies import VerifiedIdentity, get_verified_identity
from quickdrop.app.core.exceptions import AuthenticationError, InsufficientPermissionsError
from quickdrop.app.db.repository import Repository, get_repository
from quickdrop.app.models.enums import UserRole
from quickdrop.app.models.user import User


def ensure_self(identity: VerifiedIdentity, email: Optional[str]) -> VerifiedIdentity:
    """
    The caller may only act on their own email.
    
    Raises:
        InsufficientPermissionsError if ``email`` differs from the verified email
    """
    if not email or email != identity.email:
        raise InsufficientPermissionsError("Email does not match token")
    return identity


async def ensure_role(repo: Repository, identity: VerifiedIdentity, role: UserRole) -> VerifiedIdentity:
    """
    Look up the caller's User record and compare its role.
    
    Raises:
        AuthenticationError if the identity carries no email
        InsufficientPermissionsError if the user is unknown or has another role
    """
    if not identity.email:
        raise AuthenticationError("No email found in token")
    
    user = await repo.find_one(User, User.email == identity.email)
    if user is None or user.role != role:
        raise InsufficientPermissionsError(
            f"Access denied. Required role: {role.value}",
            details={"required_role": role.value}
        )
    return identity


async def require_self(
    email: Optional[str] = Query(None, description="Email of the caller"),
    identity: VerifiedIdentity = Depends(get_verified_identity),
) -> VerifiedIdentity:
    """
    Dependency for endpoints scoped to the caller's own records.
    
    Usage:
        @router.get("/payments")
        async def list_payments(email: str, identity = Depends(require_self)):
            ...
    """
    return ensure_self(identity, email)


def require_role(role: UserRole):
    """
    Dependency factory for role-based access control.
    
    Usage:
        @router.get("/riders/pending")
        async def pending(identity = Depends(require_role(UserRole.ADMIN))):
            ...
    """
    async def role_checker(
        identity: VerifiedIdentity = Depends(get_verified_identity),
        repo: Repository = Depends(get_repository),
    ) -> VerifiedIdentity:
        return await ensure_role(repo, identity, role)
    
    return role_checker


require_admin = require_role(UserRole.ADMIN)
require_rider = require_role(UserRole.RIDER)


async def require_rider_self(
    email: Optional[str] = Query(None, description="Rider email"),
    identity: VerifiedIdentity = Depends(require_rider),
) -> VerifiedIdentity:
    """Rider role AND the email query parameter is the caller's own."""
    return ensure_self(identity, email)

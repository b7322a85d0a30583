"""
Admin API Endpoints.

User search and role management (admin-only).
"""

from typing import List
from fastapi import APIRouter, Depends, Path, Query
from quickdrop.app.api.v1.providers import get_user_directory
from quickdrop.app.core.dependencies import VerifiedIdentity
from quickdrop.app.core.guards import require_admin
from quickdrop.app.domain.accounts.users import UserDirectory
from quickdrop.app.schemas.user import RoleUpdate, UserResponse

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/users/search", response_model=List[UserResponse])
async def search_users(
    email: str = Query(..., description="Email fragment, case-insensitive"),
    admin: VerifiedIdentity = Depends(require_admin),
    directory: UserDirectory = Depends(get_user_directory),
):
    users = await directory.search_users(email)
    return [UserResponse.model_validate(u) for u in users]


@router.patch("/users/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    request: RoleUpdate,
    user_id: str = Path(..., description="User ID"),
    admin: VerifiedIdentity = Depends(require_admin),
    directory: UserDirectory = Depends(get_user_directory),
):
    """Set a user's role (admin-only). Logged as ROLE_CHANGED."""
    user = await directory.update_role(user_id, request.role, actor_email=admin.email)
    return UserResponse.model_validate(user)

"""
User API Endpoints.

Signup and role lookup.
"""

from fastapi import APIRouter, Depends, Path, status
from quickdrop.app.api.v1.providers import get_user_directory
from quickdrop.app.core.dependencies import VerifiedIdentity, get_verified_identity
from quickdrop.app.domain.accounts.users import UserDirectory
from quickdrop.app.schemas.user import UserCreate, UserResponse, UserRoleResponse

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    directory: UserDirectory = Depends(get_user_directory),
):
    """
    Register a user after signup with the identity provider.
    
    The role is always ``user``; 409 if the email is already registered.
    """
    user = await directory.create_user(user_data)
    return UserResponse.model_validate(user)


@router.get("/{email}/role", response_model=UserRoleResponse)
async def get_user_role(
    email: str = Path(..., description="User email"),
    identity: VerifiedIdentity = Depends(get_verified_identity),
    directory: UserDirectory = Depends(get_user_directory),
):
    role = await directory.get_role(email)
    return UserRoleResponse(role=role)

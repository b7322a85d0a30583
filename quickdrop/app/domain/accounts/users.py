"""
User directory.

Signup, role lookup, admin search and role changes.
"""

import logging
from typing import List, Optional

from quickdrop.app.core.exceptions import InvalidArgumentError, ResourceNotFoundError
from quickdrop.app.core.ids import parse_id
from quickdrop.app.db.repository import Repository
from quickdrop.app.models.enums import UserRole
from quickdrop.app.models.user import User
from quickdrop.app.schemas.user import UserCreate
from quickdrop.app.services.audit import AuditAction, log_event

logger = logging.getLogger(__name__)


class UserDirectory:

    def __init__(self, repo: Repository):
        self.repo = repo

    async def create_user(self, data: UserCreate) -> User:
        """
        Register a user with the default role.
        
        A duplicate email surfaces as ConflictError from the unique index.
        """
        async with self.repo.transaction():
            user = await self.repo.insert(User(
                email=str(data.email),
                name=data.name,
                photo_url=data.photo_url,
                role=UserRole.USER,
            ))
            await log_event(
                self.repo,
                AuditAction.USER_CREATED,
                actor_email=user.email,
                target_id=user.id,
            )
        return user

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self.repo.find_one(User, User.email == email)

    async def get_role(self, email: str) -> UserRole:
        if not email:
            raise InvalidArgumentError("Email parameter is required")
        user = await self.get_by_email(email)
        if user is None:
            raise ResourceNotFoundError("User", email)
        return user.role

    async def search_users(self, fragment: str) -> List[User]:
        """Case-insensitive substring match on email."""
        if not fragment or not fragment.strip():
            raise InvalidArgumentError("Email is required")
        pattern = fragment.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        return await self.repo.find(
            User,
            User.email.ilike(f"%{pattern}%", escape="\\"),
            order_by=[User.email.asc()],
        )

    async def update_role(self, user_id, role: UserRole, actor_email: Optional[str] = None) -> User:
        user_id = parse_id(user_id, "user")
        async with self.repo.transaction():
            before = await self.repo.get(User, user_id)
            if before is None:
                raise ResourceNotFoundError("User", user_id)
            previous_role = before.role
            await self.repo.update_where(User, User.id == user_id, role=role)
            await log_event(
                self.repo,
                AuditAction.ROLE_CHANGED,
                actor_email=actor_email,
                target_id=user_id,
                metadata={"from": previous_role.value, "to": role.value},
            )
        logger.info("User %s role %s → %s", user_id, previous_role.value, role.value)
        return await self.repo.get(User, user_id)

"""
Rider registry.

Rider applications, admin review lists, approval and removal.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from quickdrop.app.core.exceptions import ConflictError, ResourceNotFoundError
from quickdrop.app.core.ids import parse_id
from quickdrop.app.db.repository import Repository
from quickdrop.app.models.enums import UserRole
from quickdrop.app.models.rider import Rider
from quickdrop.app.models.rider_enums import RiderStatus
from quickdrop.app.models.user import User
from quickdrop.app.schemas.rider import RiderApplication
from quickdrop.app.services.audit import AuditAction, log_event

logger = logging.getLogger(__name__)


@dataclass
class ApprovalResult:
    rider: Rider
    user: Optional[User]
    rider_modified: int
    user_modified: int


class RiderRegistry:

    def __init__(self, repo: Repository):
        self.repo = repo

    async def apply(self, data: RiderApplication) -> Rider:
        """Store an application. Status is always pending regardless of input."""
        async with self.repo.transaction():
            rider = await self.repo.insert(Rider(
                **data.model_dump(),
                status=RiderStatus.PENDING,
            ))
            await log_event(
                self.repo,
                AuditAction.RIDER_APPLIED,
                actor_email=rider.email,
                target_id=rider.id,
                metadata={"region": rider.region},
            )
        return rider

    async def list_riders(self, status: RiderStatus) -> List[Rider]:
        return await self.repo.find(
            Rider,
            Rider.status == status,
            order_by=[Rider.created_at.desc()],
        )

    async def approve(self, rider_id, actor_email: Optional[str] = None) -> ApprovalResult:
        """
        Activate a pending rider and promote the matching user to ``rider``.
        
        Both writes commit together. The result carries the final state of
        the rider and the user (None when the rider's email never signed up).
        
        Raises:
            InvalidArgumentError: malformed id
            ResourceNotFoundError: rider does not exist
            ConflictError: rider is already active
        """
        rider_id = parse_id(rider_id, "rider")

        async with self.repo.transaction():
            rider_modified = await self.repo.update_where(
                Rider,
                Rider.id == rider_id,
                Rider.status == RiderStatus.PENDING,
                status=RiderStatus.ACTIVE,
                approved_at=datetime.now(timezone.utc),
            )
            rider = await self.repo.get(Rider, rider_id)
            if rider is None:
                raise ResourceNotFoundError("Rider", rider_id)
            if rider_modified == 0:
                raise ConflictError(
                    "Rider is already active",
                    details={"rider_id": rider_id}
                )

            user_modified = await self.repo.update_where(
                User,
                User.email == rider.email,
                role=UserRole.RIDER,
            )
            await log_event(
                self.repo,
                AuditAction.RIDER_APPROVED,
                actor_email=actor_email,
                target_id=rider_id,
                metadata={"email": rider.email, "user_promoted": bool(user_modified)},
            )

        if not user_modified:
            logger.warning("Approved rider %s has no user record for %s", rider_id, rider.email)

        return ApprovalResult(
            rider=await self.repo.get(Rider, rider_id),
            user=await self.repo.find_one(User, User.email == rider.email),
            rider_modified=rider_modified,
            user_modified=user_modified,
        )

    async def delete_rider(self, rider_id, actor_email: Optional[str] = None) -> int:
        rider_id = parse_id(rider_id, "rider")
        async with self.repo.transaction():
            deleted = await self.repo.delete_where(Rider, Rider.id == rider_id)
            if deleted == 0:
                raise ResourceNotFoundError("Rider", rider_id)
            await log_event(
                self.repo,
                AuditAction.RIDER_DELETED,
                actor_email=actor_email,
                target_id=rider_id,
            )
        return deleted

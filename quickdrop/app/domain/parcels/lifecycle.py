"""
Parcel Lifecycle Manager (Domain Logic).

Owns the parcel delivery state machine:

    not_delivered → rider_assigned → in_transit → delivered

Payment (unpaid → paid) belongs to the PaymentReconciler and the
not_delivered → rider_assigned step to the DispatchAssigner. This module
handles booking, reads, the rider-driven transitions and deletion.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, FrozenSet, Iterable, List, Optional

from quickdrop.app.core.dependencies import VerifiedIdentity
from quickdrop.app.core.exceptions import (
    ConflictError,
    InsufficientPermissionsError,
    InvalidArgumentError,
    ResourceNotFoundError,
)
from quickdrop.app.core.ids import parse_id
from quickdrop.app.db.repository import Repository
from quickdrop.app.models.parcel import Parcel
from quickdrop.app.models.parcel_enums import (
    ACTIVE_DELIVERY_STATUSES,
    DeliveryStatus,
    PaymentStatus,
)
from quickdrop.app.schemas.parcel import ParcelCreate
from quickdrop.app.services.audit import AuditAction, log_event

logger = logging.getLogger(__name__)

# Transitions a rider may drive. Everything else is rejected.
RIDER_TRANSITIONS: Dict[DeliveryStatus, FrozenSet[DeliveryStatus]] = {
    DeliveryStatus.RIDER_ASSIGNED: frozenset({DeliveryStatus.IN_TRANSIT, DeliveryStatus.DELIVERED}),
    DeliveryStatus.IN_TRANSIT: frozenset({DeliveryStatus.DELIVERED}),
}


def check_rider_transition(current: DeliveryStatus, target) -> DeliveryStatus:
    """
    Validate a rider-submitted transition.

    Returns:
        The parsed target status

    Raises:
        InvalidArgumentError if ``target`` is unrecognized or does not move
        forward from ``current`` along an allowed edge
    """
    parsed = DeliveryStatus.parse(target)
    if parsed is None:
        raise InvalidArgumentError(
            f"Unrecognized delivery status: {target!r}",
            details={"status": target}
        )
    if parsed not in RIDER_TRANSITIONS.get(current, frozenset()):
        raise InvalidArgumentError(
            f"Cannot move parcel from {current.value} to {parsed.value}",
            details={"current": current.value, "requested": parsed.value}
        )
    return parsed


class ParcelLifecycleManager:

    def __init__(self, repo: Repository):
        self.repo = repo

    async def create_parcel(self, identity: VerifiedIdentity, data: ParcelCreate) -> Parcel:
        """Book a parcel for the caller: unpaid, not delivered, not cashed out."""
        async with self.repo.transaction():
            parcel = await self.repo.insert(Parcel(
                sender_email=identity.email,
                payment_status=PaymentStatus.UNPAID,
                delivery_status=DeliveryStatus.NOT_DELIVERED,
                cash_out=False,
                **data.model_dump(),
            ))
            await log_event(
                self.repo,
                AuditAction.PARCEL_CREATED,
                actor_email=identity.email,
                target_id=parcel.id,
                metadata={"tracking_id": parcel.tracking_id, "cost": parcel.cost},
            )
        return parcel

    async def list_by_sender(self, email: str) -> List[Parcel]:
        return await self.repo.find(
            Parcel,
            Parcel.sender_email == email,
            order_by=[Parcel.created_at.desc()],
        )

    async def get_parcel(self, parcel_id) -> Parcel:
        """
        Raises:
            InvalidArgumentError for a malformed id
            ResourceNotFoundError if no parcel has this id
        """
        parcel_id = parse_id(parcel_id, "parcel")
        parcel = await self.repo.get(Parcel, parcel_id)
        if parcel is None:
            raise ResourceNotFoundError("Parcel", parcel_id)
        return parcel

    async def list_for_rider(
        self,
        rider_email: str,
        statuses: Iterable[DeliveryStatus],
    ) -> List[Parcel]:
        return await self.repo.find(
            Parcel,
            Parcel.rider_email == rider_email,
            Parcel.delivery_status.in_(list(statuses)),
            order_by=[Parcel.created_at.desc()],
        )

    async def list_active_deliveries(self, rider_email: str) -> List[Parcel]:
        return await self.list_for_rider(rider_email, ACTIVE_DELIVERY_STATUSES)

    async def list_completed_deliveries(self, rider_email: str) -> List[Parcel]:
        return await self.list_for_rider(rider_email, [DeliveryStatus.DELIVERED])

    async def update_delivery_status(
        self,
        identity: VerifiedIdentity,
        parcel_id,
        status,
    ) -> Parcel:
        """
        Apply a rider-submitted delivery status update.

        The write is conditional on the status observed when the request was
        validated, so two racing updates cannot both apply.

        Raises:
            InvalidArgumentError: malformed id, unknown status, or not a
                forward step allowed to riders
            ResourceNotFoundError: parcel does not exist
            InsufficientPermissionsError: parcel is not assigned to the caller
            ConflictError: the parcel changed state concurrently
        """
        parcel = await self.get_parcel(parcel_id)

        if parcel.rider_email != identity.email:
            raise InsufficientPermissionsError(
                "This parcel is not assigned to you",
                details={"parcel_id": parcel.id}
            )

        current = parcel.delivery_status
        target = check_rider_transition(current, status)

        now = datetime.now(timezone.utc)
        values = {"delivery_status": target}
        if target == DeliveryStatus.IN_TRANSIT:
            values["transit_at"] = now
        elif target == DeliveryStatus.DELIVERED:
            values["delivered_at"] = now

        async with self.repo.transaction():
            modified = await self.repo.update_where(
                Parcel,
                Parcel.id == parcel.id,
                Parcel.rider_email == identity.email,
                Parcel.delivery_status == current,
                **values,
            )
            if modified == 0:
                logger.warning(
                    "Delivery update lost race: parcel=%s expected=%s",
                    parcel.id, current.value
                )
                raise ConflictError(
                    "Parcel status changed concurrently",
                    details={"parcel_id": parcel.id, "expected": current.value}
                )
            await log_event(
                self.repo,
                AuditAction.DELIVERY_STATUS_UPDATED,
                actor_email=identity.email,
                target_id=parcel.id,
                metadata={"from": current.value, "to": target.value},
            )

        logger.info("Parcel %s moved %s → %s", parcel.id, current.value, target.value)
        return await self.get_parcel(parcel.id)

    async def delete_parcel(self, parcel_id, actor_email: Optional[str] = None) -> int:
        """Hard delete. Raises ResourceNotFoundError when nothing was deleted."""
        parcel_id = parse_id(parcel_id, "parcel")
        async with self.repo.transaction():
            deleted = await self.repo.delete_where(Parcel, Parcel.id == parcel_id)
            if deleted == 0:
                raise ResourceNotFoundError("Parcel", parcel_id)
            await log_event(
                self.repo,
                AuditAction.PARCEL_DELETED,
                actor_email=actor_email,
                target_id=parcel_id,
            )
        return deleted

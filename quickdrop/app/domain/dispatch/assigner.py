"""
Dispatch Assigner (Domain Logic).

Matches paid, unassigned parcels to active riders in a region.
"""

import logging
from dataclasses import dataclass
from typing import List

from quickdrop.app.core.exceptions import (
    ConflictError,
    InvalidArgumentError,
    ResourceNotFoundError,
)
from quickdrop.app.core.ids import parse_id
from quickdrop.app.db.repository import Repository
from quickdrop.app.models.parcel import Parcel
from quickdrop.app.models.parcel_enums import DeliveryStatus, PaymentStatus
from quickdrop.app.models.rider import Rider
from quickdrop.app.models.rider_enums import RiderStatus, WORK_STATUS_COLLECTED
from quickdrop.app.services.audit import AuditAction, log_event

logger = logging.getLogger(__name__)


@dataclass
class AssignmentResult:
    parcel: Parcel
    rider: Rider


class DispatchAssigner:

    def __init__(self, repo: Repository):
        self.repo = repo

    async def list_unassigned(self) -> List[Parcel]:
        """Parcels that are paid but have no rider yet, oldest first."""
        return await self.repo.find(
            Parcel,
            Parcel.payment_status == PaymentStatus.PAID,
            Parcel.delivery_status == DeliveryStatus.NOT_DELIVERED,
            order_by=[Parcel.created_at.asc()],
        )

    async def list_available_riders(self, region: str) -> List[Rider]:
        if not region or not region.strip():
            raise InvalidArgumentError("Region is required")
        return await self.repo.find(
            Rider,
            Rider.region == region.strip(),
            Rider.status == RiderStatus.ACTIVE,
            order_by=[Rider.name.asc()],
        )

    async def assign(
        self,
        parcel_id,
        rider_id,
        rider_name: str,
        rider_email: str,
    ) -> AssignmentResult:
        """
        Assign a rider to a parcel.

        Both writes share one transaction. The parcel write is guarded on
        (paid, not_delivered) and is the source of truth: if it modifies
        nothing, the rider is left untouched.

        Raises:
            InvalidArgumentError: malformed ids, unpaid parcel, inactive rider,
                or an email that does not belong to the rider
            ResourceNotFoundError: parcel or rider does not exist
            ConflictError: the parcel already has a rider (or is further along)
        """
        parcel_id = parse_id(parcel_id, "parcel")
        rider_id = parse_id(rider_id, "rider")

        rider = await self.repo.get(Rider, rider_id)
        if rider is None:
            raise ResourceNotFoundError("Rider", rider_id)
        if rider.status != RiderStatus.ACTIVE:
            raise InvalidArgumentError(
                "Rider is not active",
                details={"rider_id": rider_id, "status": rider.status.value}
            )
        if (rider_email or "").lower() != rider.email.lower():
            raise InvalidArgumentError(
                "Rider email does not match the rider record",
                details={"rider_id": rider_id, "rider_email": rider_email}
            )

        async with self.repo.transaction():
            parcel_modified = await self.repo.update_where(
                Parcel,
                Parcel.id == parcel_id,
                Parcel.payment_status == PaymentStatus.PAID,
                Parcel.delivery_status == DeliveryStatus.NOT_DELIVERED,
                delivery_status=DeliveryStatus.RIDER_ASSIGNED,
                rider_name=rider.name,
                rider_email=rider.email,
            )
            if parcel_modified == 0:
                await self._raise_assignment_failure(parcel_id)

            rider_modified = await self.repo.update_where(
                Rider,
                Rider.id == rider_id,
                Rider.status == RiderStatus.ACTIVE,
                work_status=WORK_STATUS_COLLECTED,
            )
            if rider_modified == 0:
                # Rider was deleted or deactivated after the pre-check
                raise ConflictError(
                    "Rider is no longer available",
                    details={"rider_id": rider_id}
                )

            await log_event(
                self.repo,
                AuditAction.RIDER_ASSIGNED,
                target_id=parcel_id,
                metadata={"rider_id": rider_id, "rider_email": rider.email},
            )

        logger.info("Parcel %s assigned to rider %s", parcel_id, rider_id)
        return AssignmentResult(
            parcel=await self.repo.get(Parcel, parcel_id),
            rider=await self.repo.get(Rider, rider_id),
        )

    async def _raise_assignment_failure(self, parcel_id: str) -> None:
        """Explain why the guarded parcel write matched nothing."""
        parcel = await self.repo.get(Parcel, parcel_id)
        if parcel is None:
            raise ResourceNotFoundError("Parcel", parcel_id)
        if parcel.delivery_status != DeliveryStatus.NOT_DELIVERED:
            logger.warning(
                "Rejected double assignment: parcel=%s status=%s",
                parcel_id, parcel.delivery_status.value
            )
            raise ConflictError(
                "Parcel already has a rider assigned",
                details={"parcel_id": parcel_id, "delivery_status": parcel.delivery_status.value}
            )
        raise InvalidArgumentError(
            "Parcel has not been paid",
            details={"parcel_id": parcel_id, "payment_status": parcel.payment_status.value}
        )

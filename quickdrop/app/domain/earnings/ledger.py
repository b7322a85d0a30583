"""
Earnings Ledger (Domain Logic).

Records a rider's cash-out against a delivered parcel. The parcel's
cash_out flag is the durable marker; it is flipped with a guarded write so
a parcel pays out at most once.
"""

import logging
from datetime import datetime, timezone
from typing import List

from quickdrop.app.core.dependencies import VerifiedIdentity
from quickdrop.app.core.exceptions import (
    ConflictError,
    InsufficientPermissionsError,
    InvalidArgumentError,
    ResourceNotFoundError,
)
from quickdrop.app.core.ids import parse_id
from quickdrop.app.db.repository import Repository
from quickdrop.app.models.earning import Earning
from quickdrop.app.models.parcel import Parcel
from quickdrop.app.models.parcel_enums import DeliveryStatus
from quickdrop.app.schemas.earning import CashOutRequest
from quickdrop.app.services.audit import AuditAction, log_event

logger = logging.getLogger(__name__)

REQUIRED_CASH_OUT_FIELDS = ("parcel_id", "amount", "rider_email", "rider_name")


class EarningsLedger:

    def __init__(self, repo: Repository):
        self.repo = repo

    async def list_earnings(self, rider_email: str) -> List[Earning]:
        return await self.repo.find(
            Earning,
            Earning.rider_email == rider_email,
            order_by=[Earning.cash_out_date.desc()],
        )

    async def cash_out(self, identity: VerifiedIdentity, request: CashOutRequest) -> Earning:
        """
        Settle one delivered parcel for the calling rider.

        Raises:
            InvalidArgumentError: missing field, non-positive amount,
                malformed id, a tracking id of another parcel,
                or the parcel is not delivered yet
            InsufficientPermissionsError: cashing out for someone else, or
                the parcel belongs to another rider
            ResourceNotFoundError: parcel does not exist
            ConflictError: the parcel was already cashed out
        """
        missing = [name for name in REQUIRED_CASH_OUT_FIELDS if not getattr(request, name)]
        if missing:
            raise InvalidArgumentError(
                "Missing required cashout fields",
                details={"missing": missing}
            )
        if request.amount <= 0:
            raise InvalidArgumentError("Amount must be greater than zero", details={"amount": request.amount})

        parcel_id = parse_id(request.parcel_id, "parcel")

        if request.rider_email != identity.email:
            raise InsufficientPermissionsError("Riders can only cash out their own earnings")

        async with self.repo.transaction():
            modified = await self.repo.update_where(
                Parcel,
                Parcel.id == parcel_id,
                Parcel.rider_email == request.rider_email,
                Parcel.delivery_status == DeliveryStatus.DELIVERED,
                Parcel.cash_out == False,
                cash_out=True,
            )
            if modified == 0:
                await self._raise_cash_out_failure(parcel_id, request.rider_email)

            parcel = await self.repo.get(Parcel, parcel_id)
            if request.tracking_id and request.tracking_id != parcel.tracking_id:
                raise InvalidArgumentError(
                    "Tracking ID does not match the parcel",
                    details={"parcel_id": parcel_id, "tracking_id": request.tracking_id}
                )

            earning = await self.repo.insert(Earning(
                parcel_id=parcel_id,
                tracking_id=parcel.tracking_id,
                amount=request.amount,
                rider_email=request.rider_email,
                rider_name=request.rider_name,
                cash_out_date=datetime.now(timezone.utc),
            ))
            await log_event(
                self.repo,
                AuditAction.RIDER_CASHED_OUT,
                actor_email=identity.email,
                target_id=parcel_id,
                metadata={"earning_id": earning.id, "amount": request.amount},
            )

        logger.info("Rider %s cashed out parcel %s (%.2f)", request.rider_email, parcel_id, request.amount)
        return earning

    async def _raise_cash_out_failure(self, parcel_id: str, rider_email: str) -> None:
        parcel = await self.repo.get(Parcel, parcel_id)
        if parcel is None:
            raise ResourceNotFoundError("Parcel", parcel_id)
        if parcel.rider_email != rider_email:
            raise InsufficientPermissionsError(
                "This parcel is not assigned to you",
                details={"parcel_id": parcel_id}
            )
        if parcel.cash_out:
            logger.warning("Rejected duplicate cash-out for parcel %s", parcel_id)
            raise ConflictError(
                "Parcel has already been cashed out",
                details={"parcel_id": parcel_id}
            )
        raise InvalidArgumentError(
            "Parcel has not been delivered yet",
            details={"parcel_id": parcel_id, "delivery_status": parcel.delivery_status.value}
        )

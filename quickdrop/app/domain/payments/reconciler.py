"""
Payment Reconciler (Domain Logic).

Links a captured payment to its parcel: the payment row and the parcel's
unpaid → paid flip are written in one transaction, so a failed flip never
leaves an orphaned payment behind.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from quickdrop.app.core.dependencies import VerifiedIdentity
from quickdrop.app.core.exceptions import ConflictError, ResourceNotFoundError
from quickdrop.app.core.ids import parse_id
from quickdrop.app.db.repository import Repository
from quickdrop.app.models.parcel import Parcel
from quickdrop.app.models.parcel_enums import PaymentStatus
from quickdrop.app.models.payment import Payment
from quickdrop.app.schemas.payment import PaymentCreate
from quickdrop.app.services.audit import AuditAction, log_event
from quickdrop.app.services.payment_gateway import PaymentIntent, StripePaymentGateway

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationResult:
    parcel: Parcel
    payment: Optional[Payment]
    parcel_modified: int
    replayed: bool = False


class PaymentReconciler:

    def __init__(self, repo: Repository, gateway: Optional[StripePaymentGateway] = None):
        self.repo = repo
        self.gateway = gateway

    async def create_payment_intent(self, amount: float) -> PaymentIntent:
        return await self.gateway.create_payment_intent(amount)

    async def list_payments(self, email: str) -> List[Payment]:
        return await self.repo.find(
            Payment,
            Payment.email == email,
            order_by=[Payment.paid_date.desc()],
        )

    async def record_payment(self, identity: VerifiedIdentity, data: PaymentCreate) -> ReconciliationResult:
        """
        Record a payment and mark its parcel paid.

        The guarded parcel flip runs first; the payment row is only inserted
        when the flip applied, and both commit together.

        Resubmitting the transaction id a parcel was already paid with is a
        replay: nothing is written and the current state is returned.

        Raises:
            InvalidArgumentError: malformed parcel id
            ResourceNotFoundError: parcel does not exist
            ConflictError: parcel already paid under another transaction
        """
        parcel_id = parse_id(data.parcel_id, "parcel")

        async with self.repo.transaction():
            modified = await self.repo.update_where(
                Parcel,
                Parcel.id == parcel_id,
                Parcel.payment_status == PaymentStatus.UNPAID,
                payment_status=PaymentStatus.PAID,
                transaction_id=data.transaction_id,
            )
            if modified == 0:
                return await self._replay_or_raise(parcel_id, data.transaction_id)

            payment = await self.repo.insert(Payment(
                parcel_id=parcel_id,
                email=identity.email,
                amount=data.amount,
                transaction_id=data.transaction_id,
                payment_method=data.payment_method,
                paid_date=datetime.now(timezone.utc),
            ))
            await log_event(
                self.repo,
                AuditAction.PAYMENT_RECORDED,
                actor_email=identity.email,
                target_id=parcel_id,
                metadata={
                    "payment_id": payment.id,
                    "transaction_id": data.transaction_id,
                    "amount": data.amount,
                },
            )

        logger.info("Parcel %s paid (tx=%s)", parcel_id, data.transaction_id)
        return ReconciliationResult(
            parcel=await self.repo.get(Parcel, parcel_id),
            payment=payment,
            parcel_modified=modified,
        )

    async def _replay_or_raise(self, parcel_id: str, transaction_id: str) -> ReconciliationResult:
        """Explain why the guarded flip matched nothing."""
        parcel = await self.repo.get(Parcel, parcel_id)
        if parcel is None:
            raise ResourceNotFoundError("Parcel", parcel_id)

        if parcel.transaction_id != transaction_id:
            logger.warning("Rejected second payment for parcel %s (tx=%s)", parcel_id, transaction_id)
            raise ConflictError(
                "Parcel has already been paid",
                details={"parcel_id": parcel_id}
            )

        existing = await self.repo.find_one(
            Payment,
            Payment.parcel_id == parcel_id,
            Payment.transaction_id == transaction_id,
        )
        logger.info("Replayed payment for parcel %s (tx=%s)", parcel_id, transaction_id)
        return ReconciliationResult(
            parcel=parcel,
            payment=existing,
            parcel_modified=0,
            replayed=True,
        )

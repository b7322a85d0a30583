"""
Payment API Endpoints.

Payment history, processor payment intents and payment reconciliation.
"""

from typing import List
from fastapi import APIRouter, Depends, Query, status
from quickdrop.app.api.v1.providers import get_payment_reconciler
from quickdrop.app.core.dependencies import VerifiedIdentity, get_verified_identity
from quickdrop.app.core.guards import require_self
from quickdrop.app.domain.payments.reconciler import PaymentReconciler
from quickdrop.app.schemas.parcel import ParcelResponse
from quickdrop.app.schemas.payment import (
    PaymentCreate,
    PaymentIntentRequest,
    PaymentIntentResponse,
    PaymentRecordResponse,
    PaymentResponse,
)

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.get("", response_model=List[PaymentResponse])
async def list_payments(
    email: str = Query(..., description="Payer email (must match the token)"),
    identity: VerifiedIdentity = Depends(require_self),
    reconciler: PaymentReconciler = Depends(get_payment_reconciler),
):
    """Payment history of the caller, most recent first."""
    payments = await reconciler.list_payments(email)
    return [PaymentResponse.model_validate(p) for p in payments]


@router.post("/intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    request: PaymentIntentRequest,
    identity: VerifiedIdentity = Depends(get_verified_identity),
    reconciler: PaymentReconciler = Depends(get_payment_reconciler),
):
    """Create a card PaymentIntent and hand its client secret to the checkout page."""
    intent = await reconciler.create_payment_intent(request.amount)
    return PaymentIntentResponse(
        client_secret=intent.client_secret,
        payment_intent_id=intent.id,
        amount=intent.amount,
        currency=intent.currency,
    )


@router.post("", response_model=PaymentRecordResponse, status_code=status.HTTP_201_CREATED)
async def record_payment(
    payment_data: PaymentCreate,
    identity: VerifiedIdentity = Depends(get_verified_identity),
    reconciler: PaymentReconciler = Depends(get_payment_reconciler),
):
    """
    Record a captured payment and mark the parcel paid.
    
    Check ``parcel_modified``: 0 together with ``replayed`` means this
    transaction had already been recorded.
    """
    result = await reconciler.record_payment(identity, payment_data)
    return PaymentRecordResponse(
        payment=PaymentResponse.model_validate(result.payment) if result.payment else None,
        parcel=ParcelResponse.model_validate(result.parcel),
        parcel_modified=result.parcel_modified,
        replayed=result.replayed,
    )

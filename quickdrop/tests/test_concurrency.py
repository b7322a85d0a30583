"""
Guarded-write tests.

Validates that a guarded write matching nothing is rejected: a repeated
writer sees a modified count of zero, and so does a writer whose pre-read
went stale before its write landed.
"""

import pytest
from sqlalchemy import func, select

from quickdrop.app.core.dependencies import VerifiedIdentity
from quickdrop.app.core.exceptions import ConflictError
from quickdrop.app.db.repository import Repository
from quickdrop.app.domain.dispatch.assigner import DispatchAssigner
from quickdrop.app.domain.earnings.ledger import EarningsLedger
from quickdrop.app.domain.parcels.lifecycle import ParcelLifecycleManager
from quickdrop.app.domain.payments.reconciler import PaymentReconciler
from quickdrop.app.models.earning import Earning
from quickdrop.app.models.parcel import Parcel
from quickdrop.app.models.parcel_enums import DeliveryStatus, PaymentStatus
from quickdrop.app.models.payment import Payment
from quickdrop.app.schemas.earning import CashOutRequest
from quickdrop.app.schemas.payment import PaymentCreate


async def _count(db_session, model, *criteria):
    result = await db_session.execute(select(func.count()).select_from(model).where(*criteria))
    return result.scalar_one()


@pytest.mark.asyncio
async def test_guarded_update_reports_zero_when_guard_fails(db_session, make_parcel):
    parcel = await make_parcel()
    repo = Repository(db_session)

    async with repo.transaction():
        first = await repo.update_where(
            Parcel,
            Parcel.id == parcel.id,
            Parcel.payment_status == PaymentStatus.UNPAID,
            payment_status=PaymentStatus.PAID,
        )
    async with repo.transaction():
        second = await repo.update_where(
            Parcel,
            Parcel.id == parcel.id,
            Parcel.payment_status == PaymentStatus.UNPAID,
            payment_status=PaymentStatus.PAID,
        )

    assert first == 1
    assert second == 0


@pytest.mark.asyncio
async def test_failed_unit_of_work_rolls_back(db_session, make_parcel):
    parcel = await make_parcel()
    repo = Repository(db_session)

    with pytest.raises(ConflictError):
        async with repo.transaction():
            await repo.update_where(Parcel, Parcel.id == parcel.id, cash_out=True)
            raise ConflictError("abort")

    reloaded = await repo.get(Parcel, parcel.id)
    assert reloaded.cash_out is False


@pytest.mark.asyncio
async def test_repeated_payment_records_once(db_session, make_parcel):
    parcel = await make_parcel()
    identity = VerifiedIdentity(email="sender@quickdrop.io")
    reconciler = PaymentReconciler(Repository(db_session))

    await reconciler.record_payment(
        identity, PaymentCreate(parcel_id=parcel.id, amount=150.0, transaction_id="tx-a")
    )
    with pytest.raises(ConflictError):
        await reconciler.record_payment(
            identity, PaymentCreate(parcel_id=parcel.id, amount=150.0, transaction_id="tx-b")
        )

    assert await _count(db_session, Payment, Payment.parcel_id == parcel.id) == 1


@pytest.mark.asyncio
async def test_repeated_assignment_applies_once(db_session, make_parcel, active_rider):
    parcel = await make_parcel(payment_status=PaymentStatus.PAID, transaction_id="tx1")
    assigner = DispatchAssigner(Repository(db_session))

    result = await assigner.assign(parcel.id, active_rider.id, active_rider.name, active_rider.email)
    assert result.parcel.delivery_status == DeliveryStatus.RIDER_ASSIGNED

    with pytest.raises(ConflictError):
        await assigner.assign(parcel.id, active_rider.id, active_rider.name, active_rider.email)

    reloaded = await Repository(db_session).get(Parcel, parcel.id)
    assert reloaded.rider_email == active_rider.email
    assert reloaded.delivery_status == DeliveryStatus.RIDER_ASSIGNED


@pytest.mark.asyncio
async def test_repeated_cash_out_pays_once(db_session, make_parcel, active_rider):
    parcel = await make_parcel(
        payment_status=PaymentStatus.PAID,
        delivery_status=DeliveryStatus.DELIVERED,
        rider_name=active_rider.name,
        rider_email=active_rider.email,
    )
    identity = VerifiedIdentity(email=active_rider.email)
    ledger = EarningsLedger(Repository(db_session))
    request = CashOutRequest(
        parcel_id=parcel.id,
        amount=40.0,
        rider_email=active_rider.email,
        rider_name=active_rider.name,
    )

    await ledger.cash_out(identity, request)
    with pytest.raises(ConflictError):
        await ledger.cash_out(identity, request)

    assert await _count(db_session, Earning, Earning.parcel_id == parcel.id) == 1


@pytest.mark.asyncio
async def test_status_update_loses_to_write_after_its_read(db_session, assigned_parcel, active_rider, mocker):
    repo = Repository(db_session)
    manager = ParcelLifecycleManager(repo)
    read_parcel = manager.get_parcel

    async def read_then_overtake(parcel_id):
        parcel = await read_parcel(parcel_id)
        async with repo.transaction():
            await repo.update_where(
                Parcel,
                Parcel.id == parcel.id,
                delivery_status=DeliveryStatus.IN_TRANSIT,
            )
        return parcel

    mocker.patch.object(manager, "get_parcel", side_effect=read_then_overtake)

    with pytest.raises(ConflictError):
        await manager.update_delivery_status(
            VerifiedIdentity(email=active_rider.email), assigned_parcel.id, "in_transit"
        )

    reloaded = await repo.get(Parcel, assigned_parcel.id)
    assert reloaded.delivery_status == DeliveryStatus.IN_TRANSIT
    assert reloaded.transit_at is None

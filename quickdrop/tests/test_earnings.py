"""
Rider earnings and cash-out tests.
"""

import pytest
from sqlalchemy import select

from quickdrop.app.models.earning import Earning
from quickdrop.app.models.parcel_enums import DeliveryStatus, PaymentStatus

RIDER_EMAIL = "rider@quickdrop.io"


@pytest.fixture
async def delivered_parcel(make_parcel, active_rider):
    return await make_parcel(
        payment_status=PaymentStatus.PAID,
        transaction_id="tx1",
        delivery_status=DeliveryStatus.DELIVERED,
        rider_name=active_rider.name,
        rider_email=active_rider.email,
    )


def _cash_out(parcel, **overrides):
    payload = {
        "parcel_id": parcel.id,
        "amount": 40.0,
        "rider_email": RIDER_EMAIL,
        "rider_name": "Rahim",
        "tracking_id": parcel.tracking_id,
    }
    payload.update(overrides)
    return payload


async def _earnings_for(db_session, parcel_id):
    result = await db_session.execute(select(Earning).where(Earning.parcel_id == parcel_id))
    return list(result.scalars().all())


@pytest.mark.asyncio
async def test_cash_out(client, rider_headers, delivered_parcel, db_session):
    response = await client.post("/v1/rider/cash-out", json=_cash_out(delivered_parcel), headers=rider_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["parcel_id"] == delivered_parcel.id
    assert data["amount"] == 40.0
    assert data["rider_email"] == RIDER_EMAIL

    view = await client.get(f"/v1/parcels/{delivered_parcel.id}")
    assert view.json()["cash_out"] is True
    assert len(await _earnings_for(db_session, delivered_parcel.id)) == 1

    earnings = await client.get("/v1/rider/earnings", params={"email": RIDER_EMAIL}, headers=rider_headers)
    assert earnings.status_code == 200
    assert [e["parcel_id"] for e in earnings.json()] == [delivered_parcel.id]


@pytest.mark.asyncio
async def test_second_cash_out_is_rejected(client, rider_headers, delivered_parcel, db_session):
    first = await client.post("/v1/rider/cash-out", json=_cash_out(delivered_parcel), headers=rider_headers)
    assert first.status_code == 201

    second = await client.post("/v1/rider/cash-out", json=_cash_out(delivered_parcel), headers=rider_headers)
    assert second.status_code == 409
    assert len(await _earnings_for(db_session, delivered_parcel.id)) == 1


@pytest.mark.asyncio
async def test_cash_out_records_parcel_tracking_id(client, rider_headers, delivered_parcel, db_session):
    payload = _cash_out(delivered_parcel)
    del payload["tracking_id"]

    response = await client.post("/v1/rider/cash-out", json=payload, headers=rider_headers)
    assert response.status_code == 201
    assert response.json()["tracking_id"] == delivered_parcel.tracking_id

    [earning] = await _earnings_for(db_session, delivered_parcel.id)
    assert earning.tracking_id == delivered_parcel.tracking_id


@pytest.mark.asyncio
async def test_cash_out_with_foreign_tracking_id_is_rejected(client, rider_headers, delivered_parcel, db_session):
    response = await client.post(
        "/v1/rider/cash-out",
        json=_cash_out(delivered_parcel, tracking_id="QD-NOTMINE"),
        headers=rider_headers,
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Tracking ID does not match the parcel"
    assert await _earnings_for(db_session, delivered_parcel.id) == []

    view = await client.get(f"/v1/parcels/{delivered_parcel.id}")
    assert view.json()["cash_out"] is False


@pytest.mark.asyncio
async def test_cash_out_requires_rider_role(client, sender_headers, delivered_parcel, db_session):
    response = await client.post("/v1/rider/cash-out", json=_cash_out(delivered_parcel), headers=sender_headers)
    assert response.status_code == 403
    assert await _earnings_for(db_session, delivered_parcel.id) == []


@pytest.mark.asyncio
async def test_cash_out_for_another_rider_is_forbidden(client, rider_headers, delivered_parcel):
    response = await client.post(
        "/v1/rider/cash-out",
        json=_cash_out(delivered_parcel, rider_email="other-rider@quickdrop.io"),
        headers=rider_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_cash_out_of_parcel_assigned_elsewhere(client, rider_headers, make_parcel, active_rider):
    parcel = await make_parcel(
        payment_status=PaymentStatus.PAID,
        delivery_status=DeliveryStatus.DELIVERED,
        rider_name="Other",
        rider_email="other-rider@quickdrop.io",
    )
    response = await client.post("/v1/rider/cash-out", json=_cash_out(parcel), headers=rider_headers)
    assert response.status_code == 403

    view = await client.get(f"/v1/parcels/{parcel.id}")
    assert view.json()["cash_out"] is False


@pytest.mark.asyncio
async def test_cash_out_missing_fields(client, rider_headers):
    response = await client.post("/v1/rider/cash-out", json={"amount": 40.0}, headers=rider_headers)
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Missing required cashout fields"
    assert set(body["details"]["missing"]) == {"parcel_id", "rider_email", "rider_name"}


@pytest.mark.asyncio
async def test_cash_out_before_delivery(client, rider_headers, assigned_parcel, db_session):
    response = await client.post("/v1/rider/cash-out", json=_cash_out(assigned_parcel), headers=rider_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Parcel has not been delivered yet"
    assert await _earnings_for(db_session, assigned_parcel.id) == []


@pytest.mark.asyncio
async def test_cash_out_missing_parcel(client, rider_headers, delivered_parcel):
    response = await client.post(
        "/v1/rider/cash-out",
        json=_cash_out(delivered_parcel, parcel_id="e" * 32),
        headers=rider_headers,
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_cash_out_rejects_non_positive_amount(client, rider_headers, delivered_parcel):
    response = await client.post(
        "/v1/rider/cash-out",
        json=_cash_out(delivered_parcel, amount=-1),
        headers=rider_headers,
    )
    assert response.status_code == 400

"""
Authorization gate tests.

Bearer verification (401), self-access (403) and role checks (403).
"""

import pytest
from datetime import timedelta

from quickdrop.app.core.dependencies import VerifiedIdentity, verify_credential
from quickdrop.app.core.exceptions import AuthenticationError, InsufficientPermissionsError
from quickdrop.app.core.guards import ensure_role, ensure_self
from quickdrop.app.db.repository import Repository
from quickdrop.app.models.enums import UserRole

SENDER_EMAIL = "sender@quickdrop.io"


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Correlation-ID" in response.headers


@pytest.mark.asyncio
async def test_missing_token_is_unauthenticated(client):
    response = await client.get("/v1/parcels", params={"email": SENDER_EMAIL})
    assert response.status_code == 401
    body = response.json()
    assert body["error_code"] == "ERR_AUTH_001"
    assert body["message"] == "Missing or invalid Authorization header"


@pytest.mark.asyncio
async def test_garbage_token_is_unauthenticated(client):
    response = await client.get(
        "/v1/parcels",
        params={"email": SENDER_EMAIL},
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired token"


@pytest.mark.asyncio
async def test_expired_token_is_unauthenticated(client, token_headers):
    headers = token_headers(SENDER_EMAIL, expires_delta=timedelta(minutes=-5))
    response = await client.get("/v1/parcels", params={"email": SENDER_EMAIL}, headers=headers)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_unverified_email_is_unauthenticated(client, token_headers):
    headers = token_headers(SENDER_EMAIL, extra_claims={"email_verified": False})
    response = await client.get("/v1/parcels", params={"email": SENDER_EMAIL}, headers=headers)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_self_access_mismatch_is_forbidden(client, sender_headers):
    response = await client.get(
        "/v1/parcels",
        params={"email": "someone-else@quickdrop.io"},
        headers=sender_headers,
    )
    assert response.status_code == 403
    assert response.json()["message"] == "Email does not match token"


@pytest.mark.asyncio
async def test_self_access_without_email_is_forbidden(client, sender_headers):
    response = await client.get("/v1/payments", headers=sender_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_self_access_match_is_allowed(client, sender_headers):
    response = await client.get("/v1/parcels", params={"email": SENDER_EMAIL}, headers=sender_headers)
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_admin_endpoint_rejects_regular_user(client, sender_headers):
    response = await client.get("/v1/riders/pending", headers=sender_headers)
    assert response.status_code == 403
    body = response.json()
    assert body["error_code"] == "ERR_PERM_001"
    assert body["details"]["required_role"] == "admin"


@pytest.mark.asyncio
async def test_admin_endpoint_rejects_unknown_user(client, token_headers):
    response = await client.get("/v1/riders/approved", headers=token_headers("ghost@quickdrop.io"))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_admin_endpoint_allows_admin(client, admin_headers):
    response = await client.get("/v1/riders/pending", headers=admin_headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_rider_endpoint_rejects_admin(client, admin_headers):
    response = await client.get(
        "/v1/rider/earnings",
        params={"email": "admin@quickdrop.io"},
        headers=admin_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_rider_self_endpoint_rejects_other_email(client, rider_headers):
    response = await client.get(
        "/v1/rider/pending-deliveries",
        params={"email": "other-rider@quickdrop.io"},
        headers=rider_headers,
    )
    assert response.status_code == 403


def test_verify_credential_rejects_missing_token():
    with pytest.raises(AuthenticationError):
        verify_credential(None)


def test_ensure_self():
    identity = VerifiedIdentity(email=SENDER_EMAIL)
    assert ensure_self(identity, SENDER_EMAIL) is identity
    with pytest.raises(InsufficientPermissionsError):
        ensure_self(identity, "other@quickdrop.io")


@pytest.mark.asyncio
async def test_ensure_role_without_email(db_session):
    with pytest.raises(AuthenticationError):
        await ensure_role(Repository(db_session), VerifiedIdentity(email=None), UserRole.ADMIN)


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(client):
    response = await client.get("/health", headers={"X-Correlation-ID": "req-42"})
    assert response.headers["X-Correlation-ID"] == "req-42"
    assert float(response.headers["X-Process-Time"]) >= 0

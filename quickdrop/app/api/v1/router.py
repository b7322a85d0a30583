"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from quickdrop.app.api.v1.endpoints import (
    parcels, rider, payments, users, admin, riders, dispatch
)

router = APIRouter()

# Parcel lifecycle
router.include_router(parcels.router)
router.include_router(rider.router)

# Payments
router.include_router(payments.router)

# Accounts
router.include_router(users.router)
router.include_router(admin.router)
router.include_router(riders.router)

# Dispatch
router.include_router(dispatch.router)

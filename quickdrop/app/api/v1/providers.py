"""
Component providers.

Each domain component is built per request around the request's Repository.
"""

from fastapi import Depends
from quickdrop.app.db.repository import Repository, get_repository
from quickdrop.app.domain.accounts.riders import RiderRegistry
from quickdrop.app.domain.accounts.users import UserDirectory
from quickdrop.app.domain.dispatch.assigner import DispatchAssigner
from quickdrop.app.domain.earnings.ledger import EarningsLedger
from quickdrop.app.domain.parcels.lifecycle import ParcelLifecycleManager
from quickdrop.app.domain.payments.reconciler import PaymentReconciler
from quickdrop.app.services.payment_gateway import StripePaymentGateway, get_payment_gateway


def get_lifecycle_manager(repo: Repository = Depends(get_repository)) -> ParcelLifecycleManager:
    return ParcelLifecycleManager(repo)


def get_dispatch_assigner(repo: Repository = Depends(get_repository)) -> DispatchAssigner:
    return DispatchAssigner(repo)


def get_payment_reconciler(
    repo: Repository = Depends(get_repository),
    gateway: StripePaymentGateway = Depends(get_payment_gateway),
) -> PaymentReconciler:
    return PaymentReconciler(repo, gateway)


def get_earnings_ledger(repo: Repository = Depends(get_repository)) -> EarningsLedger:
    return EarningsLedger(repo)


def get_user_directory(repo: Repository = Depends(get_repository)) -> UserDirectory:
    return UserDirectory(repo)


def get_rider_registry(repo: Repository = Depends(get_repository)) -> RiderRegistry:
    return RiderRegistry(repo)

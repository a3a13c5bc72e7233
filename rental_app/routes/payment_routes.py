from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query, Request
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.date_helper import get_today
from core.dependencies import get_settings, get_stripe_client
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from core.settings import Settings
from fintechs.stripe_client import StripeClient
from schemas.schema import (
    CheckoutOut,
    PaymentFailInput,
    PaymentOut,
    ReconcileResult,
)
from services.checkout_service import CheckoutService
from services.payment_query_service import PaymentQueryService
from services.reconciliation_service import ReconciliationService

router = APIRouter(tags=["Payments"])


@cbv(router)
class PaymentRoutes:
    @router.get("/payments/recent", response_model=List[PaymentOut])
    @safe_handler
    async def recent(
        self,
        limit: int = Query(20, ge=1, le=100),
        today: date = Depends(get_today),
        settings: Settings = Depends(get_settings),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PaymentQueryService(db, settings, today).list_recent(limit)

    @router.get("/payments/{payment_id}", response_model=PaymentOut)
    @safe_handler
    async def get_payment(
        self,
        payment_id: str,
        today: date = Depends(get_today),
        settings: Settings = Depends(get_settings),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PaymentQueryService(db, settings, today).get_payment(payment_id)

    @router.get("/leases/{lease_id}/payments", response_model=List[PaymentOut])
    @safe_handler
    async def list_for_lease(
        self,
        lease_id: str,
        today: date = Depends(get_today),
        settings: Settings = Depends(get_settings),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PaymentQueryService(db, settings, today).list_by_lease(lease_id)

    @router.get("/owners/{owner_id}/payments/open", response_model=List[PaymentOut])
    @safe_handler
    async def list_open_for_owner(
        self,
        owner_id: str,
        today: date = Depends(get_today),
        settings: Settings = Depends(get_settings),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PaymentQueryService(db, settings, today).list_open_for_owner(
            owner_id
        )

    @router.post("/payments/{payment_id}/checkout", response_model=CheckoutOut)
    @safe_handler
    async def checkout(
        self,
        request: Request,
        payment_id: str,
        stripe: StripeClient = Depends(get_stripe_client),
        settings: Settings = Depends(get_settings),
        db: AsyncSession = Depends(get_db_async),
    ):
        return await CheckoutService(db, stripe, settings).create_checkout_session(
            payment_id
        )

    @router.post("/payments/{payment_id}/fail", response_model=ReconcileResult)
    @safe_handler
    async def mark_failed(
        self,
        payment_id: str,
        payload: PaymentFailInput,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await ReconciliationService(db).mark_failed(
            payment_id, reason=payload.reason
        )

    @router.post("/payments/{payment_id}/retry", response_model=ReconcileResult)
    @safe_handler
    async def retry(
        self,
        payment_id: str,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await ReconciliationService(db).retry(payment_id)

from fastapi import APIRouter, Depends, Request
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.dependencies import get_signature_verifier
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from fintech_verify_signature.verify_signature import StripeSignatureVerifier
from schemas.schema import ManualPaymentConfirm
from webhooks.service_webhooks import PaymentWebhooks

router = APIRouter(tags=["Webhooks"])


@cbv(router)
class WebhookRoutes:
    @router.post("/webhook/payments")
    @safe_handler
    async def payments_webhook(
        self,
        request: Request,
        payload: ManualPaymentConfirm,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PaymentWebhooks(db=db, request=request).payments_webhook(payload)

    @router.post("/webhook/stripe")
    @safe_handler
    async def stripe_webhook(
        self,
        request: Request,
        db: AsyncSession = Depends(get_db_async),
        verifier: StripeSignatureVerifier = Depends(get_signature_verifier),
    ):
        return await PaymentWebhooks(
            db=db, request=request, verifier=verifier
        ).stripe_webhook()

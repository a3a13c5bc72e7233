import logging

from fastapi import Request

from core.exceptions import InvalidRequest
from fintech_verify_signature.verify_signature import StripeSignatureVerifier
from schemas.schema import ManualPaymentConfirm
from services.reconciliation_service import ReconciliationService

logger = logging.getLogger(__name__)


class PaymentWebhooks:
    def __init__(self, db, request: Request, verifier: StripeSignatureVerifier | None = None):
        self.request = request
        self.verifier = verifier
        self.reconciliation_service: ReconciliationService = ReconciliationService(db)

    async def stripe_webhook(self) -> dict:
        raw_body = await self.request.body()
        signature = self.request.headers.get("stripe-signature")

        event = self.verifier.construct_event(raw_body, signature)
        logger.info(f"Stripe event {event.get('id')} received: {event.get('type')}")

        return await self.reconciliation_service.handle_stripe_event(event)

    async def payments_webhook(self, payload: ManualPaymentConfirm) -> dict:
        if not payload.payment_id.strip():
            raise InvalidRequest("paymentId is required")

        await self.reconciliation_service.confirm_manual(
            payload.payment_id, tx_ref=payload.tx_ref
        )
        return {"ok": True}

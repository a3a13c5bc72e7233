import logging

from core.date_helper import utc_now
from core.exceptions import InvalidTransition, NotFound
from models.enums import (
    PAYMENT_TRANSITIONS,
    PaymentProvider,
    PaymentStatus,
    StripeEventType,
)
from models.utils import synthetic_tx_ref
from repos.payment_repo import PaymentRepo
from schemas.schema import PaymentRecord, ReconcileResult

logger = logging.getLogger("payments.reconciler")


class ReconciliationService:
    """Finalizes payment status from provider events and manual actions.

    Every path reads the current status first and short-circuits when the
    payment is already in the target state, so repeated deliveries are
    harmless. The paid update itself is conditional on the row not being
    paid yet, which covers two deliveries racing past the read.
    """

    def __init__(self, db):
        self.db = db
        self.payment_repo: PaymentRepo = PaymentRepo(db)

    async def _get_or_404(self, payment_id: str) -> PaymentRecord:
        payment = await self.payment_repo.get(payment_id)
        if not payment:
            raise NotFound(f"Payment {payment_id} not found")
        return payment

    @staticmethod
    def _check_transition(payment: PaymentRecord, target: PaymentStatus):
        if target not in PAYMENT_TRANSITIONS[payment.status]:
            raise InvalidTransition(
                f"Payment {payment.id} cannot move from {payment.status.value} to {target.value}"
            )

    async def confirm_manual(
        self, payment_id: str, tx_ref: str | None = None
    ) -> ReconcileResult:
        payment = await self._get_or_404(payment_id)
        return await self._settle(payment, tx_ref=tx_ref, provider=None)

    async def handle_stripe_event(self, event: dict) -> dict:
        event_type = event.get("type")
        if event_type != StripeEventType.CHECKOUT_SESSION_COMPLETED.value:
            logger.info(f"Ignoring Stripe event {event.get('id')} of type {event_type}")
            return {"received": True}

        session = (event.get("data") or {}).get("object") or {}
        payment_id = (session.get("metadata") or {}).get("paymentId")
        if not payment_id:
            logger.warning(f"Stripe session {session.get('id')} carries no paymentId")
            return {"received": True}

        intent = session.get("payment_intent")
        if isinstance(intent, dict):
            intent = intent.get("id")
        tx_ref = intent or session.get("id")

        payment = await self.payment_repo.get(payment_id)
        if not payment:
            logger.warning(f"Stripe session {session.get('id')} references unknown payment {payment_id}")
            return {"received": True}

        await self._settle(payment, tx_ref=tx_ref, provider=PaymentProvider.STRIPE)
        return {"received": True}

    async def _settle(
        self,
        payment: PaymentRecord,
        tx_ref: str | None,
        provider: PaymentProvider | None,
    ) -> ReconcileResult:
        if payment.status == PaymentStatus.PAID:
            logger.info(f"Payment {payment.id} already paid, ignoring confirmation")
            return ReconcileResult(
                payment_id=payment.id, status=PaymentStatus.PAID, changed=False
            )

        self._check_transition(payment, PaymentStatus.PAID)

        if provider is None and payment.provider is None:
            provider = PaymentProvider.MOCK

        changed = await self.payment_repo.mark_paid(
            payment.id,
            tx_ref=tx_ref or synthetic_tx_ref(),
            paid_at=utc_now(),
            provider=provider,
        )
        if changed:
            logger.info(f"Payment {payment.id} marked paid")
        else:
            logger.info(f"Payment {payment.id} was settled concurrently")

        return ReconcileResult(
            payment_id=payment.id, status=PaymentStatus.PAID, changed=bool(changed)
        )

    async def mark_failed(
        self, payment_id: str, reason: str | None = None
    ) -> ReconcileResult:
        payment = await self._get_or_404(payment_id)
        if payment.status == PaymentStatus.FAILED:
            return ReconcileResult(
                payment_id=payment.id, status=PaymentStatus.FAILED, changed=False
            )

        self._check_transition(payment, PaymentStatus.FAILED)
        changed = await self.payment_repo.transition(
            payment.id,
            from_status=payment.status,
            to_status=PaymentStatus.FAILED,
            failure_reason=reason,
        )
        if not changed:
            raise InvalidTransition(f"Payment {payment.id} changed state concurrently")

        logger.info(f"Payment {payment.id} marked failed: {reason or 'no reason given'}")
        return ReconcileResult(
            payment_id=payment.id, status=PaymentStatus.FAILED, changed=True
        )

    async def retry(self, payment_id: str) -> ReconcileResult:
        payment = await self._get_or_404(payment_id)
        if payment.status != PaymentStatus.FAILED:
            raise InvalidTransition(
                f"Only failed payments can be retried; payment {payment.id} is {payment.status.value}"
            )

        changed = await self.payment_repo.transition(
            payment.id,
            from_status=PaymentStatus.FAILED,
            to_status=PaymentStatus.PENDING,
        )
        if not changed:
            raise InvalidTransition(f"Payment {payment.id} changed state concurrently")

        logger.info(f"Payment {payment.id} reopened for retry")
        return ReconcileResult(
            payment_id=payment.id, status=PaymentStatus.PENDING, changed=True
        )

import logging

from core.exceptions import AlreadyPaid, NotConfigured, NotFound, ProviderError
from core.settings import Settings
from core.url_parser import parser
from fintechs.stripe_client import StripeClient
from models.enums import PaymentStatus
from models.utils import to_minor_units
from repos.payment_repo import PaymentRepo
from schemas.schema import CheckoutOut

logger = logging.getLogger(__name__)


class CheckoutService:
    def __init__(self, db, stripe: StripeClient, settings: Settings):
        self.stripe = stripe
        self.settings = settings
        self.payment_repo: PaymentRepo = PaymentRepo(db)

    def redirect_url(self, payment_id: str, outcome: str) -> str:
        return parser.join(
            self.settings.WEB_BASE_URL, f"/pay/{payment_id}?status={outcome}"
        )

    async def create_checkout_session(self, payment_id: str) -> CheckoutOut:
        if not self.stripe.configured:
            raise NotConfigured("Stripe not configured")

        payment = await self.payment_repo.get(payment_id)
        if not payment:
            raise NotFound("Payment not found")

        if payment.status == PaymentStatus.PAID:
            raise AlreadyPaid()

        session = await self.stripe.create_checkout_session(
            amount_minor=to_minor_units(payment.amount),
            currency=self.settings.CURRENCY,
            product_name=f"Rent {payment.due_date.isoformat()}",
            metadata={"paymentId": payment.id, "leaseId": payment.lease_id or ""},
            success_url=self.redirect_url(payment.id, "success"),
            cancel_url=self.redirect_url(payment.id, "cancel"),
        )

        url = session.get("url")
        if not url:
            raise ProviderError("Stripe session has no redirect url")

        logger.info(f"Opened checkout session {session.get('id')} for payment {payment.id}")
        return CheckoutOut(url=url)

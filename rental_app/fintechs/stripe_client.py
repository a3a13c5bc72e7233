import asyncio
import logging

import stripe

from core.breaker import CircuitBreaker
from core.exceptions import NotConfigured, ProviderError
from core.settings import Settings

logger = logging.getLogger(__name__)


class StripeClient:
    """Async Stripe Checkout client on top of the official SDK."""

    def __init__(
        self,
        settings: Settings,
        http_client: stripe.HTTPClient | None = None,
        breaker: CircuitBreaker | None = None,
    ):
        self.secret = settings.STRIPE_SECRET_KEY
        self.timeout = settings.PROVIDER_TIMEOUT_SECONDS
        self.breaker = breaker or CircuitBreaker(name="stripe")
        self.client: stripe.StripeClient | None = None
        if self.secret:
            self.client = stripe.StripeClient(
                self.secret,
                base_addresses={"api": settings.STRIPE_API_BASE},
                http_client=http_client or stripe.HTTPXClient(timeout=self.timeout),
                max_network_retries=0,
            )

    @property
    def configured(self) -> bool:
        return self.client is not None

    async def create_checkout_session(
        self,
        *,
        amount_minor: int,
        currency: str,
        product_name: str,
        metadata: dict[str, str],
        success_url: str,
        cancel_url: str,
    ) -> dict:
        if not self.configured:
            raise NotConfigured("Stripe not configured")

        params = {
            "mode": "payment",
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": currency,
                        "unit_amount": amount_minor,
                        "product_data": {"name": product_name},
                    },
                    "quantity": 1,
                }
            ],
            "metadata": metadata,
            "success_url": success_url,
            "cancel_url": cancel_url,
        }

        async def handler():
            return await self._create_session(params)

        return await self.breaker.call(handler)

    async def _create_session(self, params: dict) -> dict:
        try:
            session = await asyncio.wait_for(
                self.client.v1.checkout.sessions.create_async(params=params),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise ProviderError(
                f"Stripe request timed out after {self.timeout}s"
            ) from e
        except stripe.StripeError as e:
            message = e.user_message or str(e)
            logger.warning(f"Stripe checkout session returned {e.http_status}: {message}")
            raise ProviderError(f"Stripe error: {message}") from e

        return session.to_dict()

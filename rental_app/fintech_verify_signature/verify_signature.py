import json
import logging

import stripe

from core.exceptions import NotConfigured, SignatureVerificationFailed
from core.settings import Settings

logger = logging.getLogger(__name__)


class StripeSignatureVerifier:
    """Checks the `Stripe-Signature` header and decodes the event body.

    Without a signing secret the event is rejected in strict mode and
    accepted unverified otherwise.
    """

    def __init__(self, settings: Settings):
        self.secret = settings.STRIPE_WEBHOOK_SECRET
        self.strict = settings.WEBHOOK_STRICT_MODE
        self.tolerance = settings.STRIPE_SIGNATURE_TOLERANCE_SECONDS

    def construct_event(self, body: bytes, signature: str | None) -> dict:
        if not self.secret:
            if self.strict:
                raise NotConfigured("Webhook signing secret not configured")
            logger.warning(
                "Accepting unverified webhook: no signing secret and strict mode is off"
            )
            return self._decode(body)

        # the SDK only builds events from JSON objects
        self._decode(body)
        try:
            event = stripe.Webhook.construct_event(
                body, signature, self.secret, self.tolerance
            )
        except stripe.SignatureVerificationError as e:
            raise SignatureVerificationFailed(e.user_message or "Invalid signature") from e
        except ValueError as e:
            raise SignatureVerificationFailed(f"Invalid webhook payload: {e}") from e

        return event.to_dict()

    @staticmethod
    def _decode(body: bytes) -> dict:
        try:
            payload = json.loads(body)
        except ValueError as e:
            raise SignatureVerificationFailed("Webhook body is not valid JSON") from e
        if not isinstance(payload, dict):
            raise SignatureVerificationFailed("Webhook body is not a JSON object")
        return payload

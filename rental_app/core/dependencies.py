from fastapi import Request

from fintech_verify_signature.verify_signature import StripeSignatureVerifier
from fintechs.stripe_client import StripeClient

from .settings import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_stripe_client(request: Request) -> StripeClient:
    return request.app.state.stripe


def get_signature_verifier(request: Request) -> StripeSignatureVerifier:
    return request.app.state.signature_verifier

import pytest
from fastapi import HTTPException

from core.exceptions import (
    ActiveLeaseExists,
    AlreadyPaid,
    NotConfigured,
    NotFound,
    SignatureVerificationFailed,
    StoreUnavailable,
)
from core.safe_handler import safe_handler


@pytest.mark.parametrize(
    "error, status, message",
    [
        (NotConfigured("Stripe not configured"), 500, "Stripe not configured"),
        (NotFound("Payment not found"), 404, "Payment not found"),
        (AlreadyPaid(), 400, "Payment already paid"),
        (ActiveLeaseExists(), 409, "Unit already has an active lease"),
        (SignatureVerificationFailed("bad signature"), 400, "bad signature"),
        (StoreUnavailable(), 503, StoreUnavailable.default_message()),
    ],
)
async def test_domain_errors_become_http_errors(error, status, message):
    @safe_handler
    async def endpoint():
        raise error

    with pytest.raises(HTTPException) as exc:
        await endpoint()

    assert exc.value.status_code == status
    assert exc.value.detail == message


async def test_unexpected_errors_become_friendly_500():
    @safe_handler
    async def endpoint():
        raise KeyError("paymentId")

    with pytest.raises(HTTPException) as exc:
        await endpoint()

    assert exc.value.status_code == 500
    assert exc.value.detail == "Some required information is missing."


async def test_results_pass_through():
    @safe_handler
    async def endpoint(value):
        return {"value": value}

    assert await endpoint(3) == {"value": 3}

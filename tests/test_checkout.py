from datetime import datetime, timezone
from decimal import Decimal

import pytest

from core.exceptions import AlreadyPaid, NotConfigured, NotFound, ProviderError
from models.enums import PaymentStatus
from services.checkout_service import CheckoutService


async def test_checkout_sends_amount_in_cents(
    db, add_payment, stripe_client, stripe_stub, test_settings
):
    await add_payment(amount=Decimal("500.00"))

    result = await CheckoutService(db, stripe_client, test_settings).create_checkout_session("P1")

    assert result.url == "https://checkout.stripe.com/c/pay/cs_test_1"

    request = stripe_stub.requests[-1]
    assert request.method == "POST"
    assert request.url.path == "/v1/checkout/sessions"
    assert request.headers["Authorization"] == "Bearer sk_test_123"

    form = stripe_stub.last_form
    assert form["mode"] == "payment"
    assert form["line_items[0][price_data][unit_amount]"] == "50000"
    assert form["line_items[0][price_data][currency]"] == "eur"
    assert form["line_items[0][price_data][product_data][name]"] == "Rent 2025-03-05"
    assert form["line_items[0][quantity]"] == "1"
    assert form["metadata[paymentId]"] == "P1"
    assert form["metadata[leaseId]"] == "L1"


async def test_fractional_amount_is_rounded_to_whole_cents(
    db, add_payment, stripe_client, stripe_stub, test_settings
):
    await add_payment(amount=Decimal("1234.5"))

    await CheckoutService(db, stripe_client, test_settings).create_checkout_session("P1")

    assert stripe_stub.last_form["line_items[0][price_data][unit_amount]"] == "123450"


async def test_redirect_urls_point_back_to_payment_page(
    db, add_payment, stripe_client, stripe_stub, test_settings
):
    await add_payment()

    await CheckoutService(db, stripe_client, test_settings).create_checkout_session("P1")

    form = stripe_stub.last_form
    assert form["success_url"] == "https://app.example.com/pay/P1?status=success"
    assert form["cancel_url"] == "https://app.example.com/pay/P1?status=cancel"


async def test_paid_payment_cannot_be_checked_out(
    db, add_payment, stripe_client, stripe_stub, test_settings
):
    await add_payment(
        status=PaymentStatus.PAID,
        tx_ref="TX-abc12345",
        paid_at=datetime(2025, 3, 6, tzinfo=timezone.utc),
    )

    with pytest.raises(AlreadyPaid) as exc:
        await CheckoutService(db, stripe_client, test_settings).create_checkout_session("P1")

    assert exc.value.status_code == 400
    assert stripe_stub.requests == []


async def test_failed_payment_can_be_checked_out(
    db, add_payment, stripe_client, test_settings
):
    await add_payment(status=PaymentStatus.FAILED, failure_reason="card declined")

    result = await CheckoutService(db, stripe_client, test_settings).create_checkout_session("P1")

    assert result.url.startswith("https://checkout.stripe.com/")


async def test_unknown_payment_is_not_found(db, stripe_client, stripe_stub, test_settings):
    with pytest.raises(NotFound):
        await CheckoutService(db, stripe_client, test_settings).create_checkout_session("missing")

    assert stripe_stub.requests == []


async def test_missing_secret_key_is_not_configured(
    db, add_payment, test_settings, make_stripe_client
):
    await add_payment()
    settings = test_settings.model_copy(update={"STRIPE_SECRET_KEY": None})
    client, stub = make_stripe_client(settings)

    with pytest.raises(NotConfigured) as exc:
        await CheckoutService(db, client, settings).create_checkout_session("P1")

    assert exc.value.status_code == 500
    assert exc.value.message == "Stripe not configured"
    assert stub.requests == []


async def test_provider_error_is_surfaced(
    db, add_payment, test_settings, make_stripe_client
):
    await add_payment()
    client, _ = make_stripe_client(
        status_code=400, body={"error": {"message": "Invalid currency"}}
    )

    with pytest.raises(ProviderError) as exc:
        await CheckoutService(db, client, test_settings).create_checkout_session("P1")

    assert "Invalid currency" in exc.value.message


async def test_session_without_url_is_a_provider_error(
    db, add_payment, test_settings, make_stripe_client
):
    await add_payment()
    client, _ = make_stripe_client(body={"id": "cs_test_2"})

    with pytest.raises(ProviderError):
        await CheckoutService(db, client, test_settings).create_checkout_session("P1")


async def test_slow_provider_times_out(db, add_payment, test_settings, make_stripe_client):
    await add_payment()
    settings = test_settings.model_copy(update={"PROVIDER_TIMEOUT_SECONDS": 0.05})
    client, stub = make_stripe_client(settings, delay=1)

    with pytest.raises(ProviderError) as exc:
        await CheckoutService(db, client, settings).create_checkout_session("P1")

    assert "timed out" in exc.value.message
    assert stub.requests == []


async def test_repeated_provider_failures_open_the_breaker(
    db, add_payment, test_settings, make_stripe_client
):
    await add_payment()
    client, stub = make_stripe_client(
        status_code=500, body={"error": {"message": "Internal error"}}
    )
    service = CheckoutService(db, client, test_settings)

    for _ in range(client.breaker.failure_threshold):
        with pytest.raises(ProviderError):
            await service.create_checkout_session("P1")

    with pytest.raises(ProviderError) as exc:
        await service.create_checkout_session("P1")

    assert "unavailable" in exc.value.message
    assert len(stub.requests) == client.breaker.failure_threshold

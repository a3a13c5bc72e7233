import json
import time

import pytest
import stripe

from core.exceptions import NotConfigured, SignatureVerificationFailed
from fintech_verify_signature.verify_signature import StripeSignatureVerifier

SECRET = "whsec_test_123"
BODY = json.dumps(
    {
        "id": "evt_1",
        "object": "event",
        "type": "checkout.session.completed",
        "data": {
            "object": {
                "id": "cs_test_1",
                "object": "checkout.session",
                "metadata": {"paymentId": "P1"},
            }
        },
    }
).encode()


@pytest.fixture
def verifier(test_settings):
    return StripeSignatureVerifier(test_settings)


def sign(body: bytes, timestamp: int, secret: str = SECRET) -> str:
    return stripe.WebhookSignature._compute_signature(f"{timestamp}.{body.decode()}", secret)


def header_for(body: bytes = BODY, timestamp: int | None = None, secret: str = SECRET) -> str:
    timestamp = timestamp or int(time.time())
    return f"t={timestamp},v1={sign(body, timestamp, secret)}"


def test_valid_signature_returns_event(verifier):
    event = verifier.construct_event(BODY, header_for())

    assert isinstance(event, dict)
    assert event["id"] == "evt_1"
    assert event["type"] == "checkout.session.completed"
    assert event["data"]["object"]["metadata"] == {"paymentId": "P1"}


def test_any_matching_v1_signature_is_accepted(verifier):
    now = int(time.time())
    header = f"t={now},v1=deadbeef,v1={sign(BODY, now)}"

    assert verifier.construct_event(BODY, header)["id"] == "evt_1"


def test_tampered_body_is_rejected(verifier):
    header = header_for()

    with pytest.raises(SignatureVerificationFailed):
        verifier.construct_event(BODY.replace(b"evt_1", b"evt_2"), header)


def test_signature_from_another_secret_is_rejected(verifier):
    with pytest.raises(SignatureVerificationFailed):
        verifier.construct_event(BODY, header_for(secret="whsec_other"))


@pytest.mark.parametrize(
    "header", [None, "", "v1=abc", "t=notanumber,v1=abc", "t=1741170000"]
)
def test_missing_or_malformed_header_is_rejected(verifier, header):
    with pytest.raises(SignatureVerificationFailed) as exc:
        verifier.construct_event(BODY, header)

    assert exc.value.status_code == 400


def test_old_timestamp_is_rejected(verifier):
    stale = int(time.time()) - 301

    with pytest.raises(SignatureVerificationFailed) as exc:
        verifier.construct_event(BODY, header_for(timestamp=stale))

    assert "tolerance" in exc.value.message


def test_timestamp_inside_tolerance_is_accepted(verifier):
    recent = int(time.time()) - 250

    assert verifier.construct_event(BODY, header_for(timestamp=recent))


def test_tolerance_comes_from_settings(test_settings):
    settings = test_settings.model_copy(update={"STRIPE_SIGNATURE_TOLERANCE_SECONDS": 60})
    stale = int(time.time()) - 120

    with pytest.raises(SignatureVerificationFailed):
        StripeSignatureVerifier(settings).construct_event(BODY, header_for(timestamp=stale))


@pytest.mark.parametrize("body", [b"[1, 2, 3]", b"not json"])
def test_non_object_body_is_rejected(verifier, body):
    with pytest.raises(SignatureVerificationFailed):
        verifier.construct_event(body, header_for(body=body))


def test_strict_mode_without_secret_is_not_configured(test_settings):
    settings = test_settings.model_copy(
        update={"STRIPE_WEBHOOK_SECRET": None, "WEBHOOK_STRICT_MODE": True}
    )

    with pytest.raises(NotConfigured):
        StripeSignatureVerifier(settings).construct_event(BODY, None)


def test_loose_mode_without_secret_accepts_unverified_events(test_settings, caplog):
    settings = test_settings.model_copy(
        update={"STRIPE_WEBHOOK_SECRET": None, "WEBHOOK_STRICT_MODE": False}
    )

    with caplog.at_level("WARNING"):
        event = StripeSignatureVerifier(settings).construct_event(BODY, None)

    assert event["id"] == "evt_1"
    assert "unverified" in caplog.text

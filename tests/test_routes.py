import json
import time
from datetime import date

import pytest
import stripe
from fastapi.testclient import TestClient

from app import create_app
from core.date_helper import get_today

TODAY = date(2025, 3, 5)


@pytest.fixture
def client(test_settings, stripe_client):
    app = create_app(settings=test_settings, stripe_client=stripe_client)
    app.dependency_overrides[get_today] = lambda: TODAY
    with TestClient(app) as client:
        yield client


@pytest.fixture
def lease_id(client):
    assert client.put(
        "/owners/O1", json={"email": "owner@example.com", "name": "Olivia Owner"}
    ).status_code == 200

    unit = client.post(
        "/units",
        json={
            "owner_id": "O1",
            "address": "Via Roma 12",
            "city": "Milano",
            "rooms": 3,
            "m2": "75",
            "rent_ask": "900",
        },
    )
    assert unit.status_code == 201

    tenant = client.post(
        "/tenants",
        json={"owner_id": "O1", "name": "Tom Tenant", "email": "tenant@example.com"},
    )
    assert tenant.status_code == 201

    lease = client.post(
        "/leases",
        json={
            "unit_id": unit.json()["id"],
            "tenant_id": tenant.json()["id"],
            "start_date": "2025-01-01",
            "rent": "500.00",
            "due_day": 5,
            "payment_method": "SEPA_MANDATE",
        },
    )
    assert lease.status_code == 201
    return lease.json()["id"]


@pytest.fixture
def payment_id(client, lease_id):
    assert client.post("/cron/payments/due").status_code == 200
    payments = client.get(f"/leases/{lease_id}/payments").json()
    return payments[0]["id"]


def stripe_headers(settings, body: bytes) -> dict:
    timestamp = int(time.time())
    signature = stripe.WebhookSignature._compute_signature(
        f"{timestamp}.{body.decode()}", settings.STRIPE_WEBHOOK_SECRET
    )
    return {"stripe-signature": f"t={timestamp},v1={signature}"}


def test_healthz(client):
    resp = client.get("/healthz")

    assert resp.status_code == 200
    assert resp.text == "ok"


def test_lease_onboarding(client, lease_id):
    lease = client.get(f"/leases/{lease_id}").json()

    assert lease["mandate_ref"].startswith("MND-")
    assert lease["tenant_email"] == "tenant@example.com"

    unit = client.get(f"/units/{lease['unit_id']}").json()
    assert unit["status"] == "occupied"

    active = client.get(f"/units/{lease['unit_id']}/active-lease").json()
    assert active["id"] == lease_id


def test_second_lease_on_occupied_unit_conflicts(client, lease_id):
    lease = client.get(f"/leases/{lease_id}").json()

    resp = client.post(
        "/leases",
        json={
            "unit_id": lease["unit_id"],
            "tenant_id": lease["tenant_id"],
            "start_date": "2025-02-01",
            "rent": "600.00",
            "due_day": 10,
            "payment_method": "MANUAL",
        },
    )

    assert resp.status_code == 409
    assert resp.json()["error"] == "Unit already has an active lease"


def test_invalid_lease_payload_is_unprocessable(client, lease_id):
    resp = client.post(
        "/leases",
        json={
            "unit_id": "U1",
            "tenant_id": "T1",
            "start_date": "2025-01-01",
            "rent": "500.00",
            "due_day": 31,
            "payment_method": "SEPA_MANDATE",
        },
    )

    assert resp.status_code == 422
    assert resp.json()["error"] == "Validation failed"
    assert [d["field"] for d in resp.json()["details"]] == ["due_day"]


def test_cron_generates_once_per_day(client, lease_id):
    first = client.post("/cron/payments/due")
    second = client.post("/cron/payments/due")

    assert first.json() == {"ok": True, "created": 1, "existing": 0, "failed": 0}
    assert second.json() == {"ok": True, "created": 0, "existing": 1, "failed": 0}

    payments = client.get(f"/leases/{lease_id}/payments").json()
    assert len(payments) == 1
    assert payments[0]["status"] == "pending"
    assert payments[0]["effective_status"] == "pending"
    assert payments[0]["provider"] == "SEPA"
    assert payments[0]["due_date"] == "2025-03-05"


def test_cron_skips_days_after_28(client, lease_id):
    client.app.dependency_overrides[get_today] = lambda: date(2025, 3, 30)

    resp = client.post("/cron/payments/due")

    assert resp.status_code == 200
    assert resp.json() == {"skipped": True, "reason": "unsupported day"}


def test_open_payments_turn_late_after_grace(client, payment_id):
    client.app.dependency_overrides[get_today] = lambda: date(2025, 3, 11)

    payment = client.get(f"/payments/{payment_id}").json()
    open_payments = client.get("/owners/O1/payments/open").json()

    assert payment["status"] == "pending"
    assert payment["effective_status"] == "late"
    assert [p["id"] for p in open_payments] == [payment_id]


def test_checkout_returns_provider_url(client, payment_id, stripe_stub):
    resp = client.post(f"/payments/{payment_id}/checkout")

    assert resp.status_code == 200
    assert resp.json() == {"url": "https://checkout.stripe.com/c/pay/cs_test_1"}
    assert stripe_stub.last_form["line_items[0][price_data][unit_amount]"] == "50000"


def test_checkout_for_unknown_payment(client):
    resp = client.post("/payments/nope/checkout")

    assert resp.status_code == 404
    assert resp.json()["error"] == "Payment not found"


def test_checkout_without_stripe_key(test_settings, make_stripe_client):
    settings = test_settings.model_copy(update={"STRIPE_SECRET_KEY": None})
    stripe_client, _ = make_stripe_client(settings)
    app = create_app(settings=settings, stripe_client=stripe_client)

    with TestClient(app) as client:
        resp = client.post("/payments/P1/checkout")

    assert resp.status_code == 500
    assert resp.json()["error"] == "Stripe not configured"


def test_manual_webhook_marks_paid_and_blocks_checkout(client, payment_id):
    resp = client.post("/webhook/payments", json={"paymentId": payment_id, "txRef": "TX-bank0001"})
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}

    payment = client.get(f"/payments/{payment_id}").json()
    assert payment["status"] == "paid"
    assert payment["tx_ref"] == "TX-bank0001"
    assert payment["paid_at"] is not None

    resp = client.post(f"/payments/{payment_id}/checkout")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Payment already paid"


def test_manual_webhook_requires_payment_id(client):
    resp = client.post("/webhook/payments", json={"txRef": "TX-bank0001"})

    assert resp.status_code == 422


def test_stripe_webhook_settles_payment(client, payment_id, test_settings):
    body = json.dumps(
        {
            "id": "evt_1",
            "type": "checkout.session.completed",
            "data": {
                "object": {
                    "id": "cs_test_1",
                    "payment_intent": "pi_123",
                    "metadata": {"paymentId": payment_id},
                }
            },
        }
    ).encode()

    resp = client.post(
        "/webhook/stripe", content=body, headers=stripe_headers(test_settings, body)
    )

    assert resp.status_code == 200
    assert resp.json() == {"received": True}

    payment = client.get(f"/payments/{payment_id}").json()
    assert payment["status"] == "paid"
    assert payment["provider"] == "STRIPE"
    assert payment["tx_ref"] == "pi_123"


def test_stripe_webhook_with_bad_signature_changes_nothing(
    client, payment_id, test_settings
):
    body = json.dumps(
        {
            "type": "checkout.session.completed",
            "data": {"object": {"metadata": {"paymentId": payment_id}}},
        }
    ).encode()
    timestamp = int(time.time())

    resp = client.post(
        "/webhook/stripe",
        content=body,
        headers={"stripe-signature": f"t={timestamp},v1=forged"},
    )

    assert resp.status_code == 400
    assert "error" in resp.json()
    assert client.get(f"/payments/{payment_id}").json()["status"] == "pending"


def test_fail_and_retry_endpoints(client, payment_id):
    failed = client.post(f"/payments/{payment_id}/fail", json={"reason": "mandate revoked"})
    assert failed.json()["status"] == "failed"

    assert client.get(f"/payments/{payment_id}").json()["failure_reason"] == "mandate revoked"

    retried = client.post(f"/payments/{payment_id}/retry")
    assert retried.json()["status"] == "pending"

    again = client.post(f"/payments/{payment_id}/retry")
    assert again.status_code == 409


def test_recent_payments(client, payment_id):
    resp = client.get("/payments/recent", params={"limit": 5})

    assert resp.status_code == 200
    assert [p["id"] for p in resp.json()] == [payment_id]


def test_terminate_lease_frees_unit(client, lease_id):
    lease = client.get(f"/leases/{lease_id}").json()

    resp = client.post(f"/leases/{lease_id}/terminate", json={"end_date": "2025-03-01"})

    assert resp.status_code == 200
    assert resp.json()["end_date"] == "2025-03-01"
    assert client.get(f"/units/{lease['unit_id']}").json()["status"] == "vacant"
    assert client.get(f"/units/{lease['unit_id']}/active-lease").status_code == 404


def test_unit_assets_endpoints(client, lease_id):
    units = client.get("/owners/O1/units").json()
    unit_id = units[0]["id"]

    created = client.post(
        f"/units/{unit_id}/assets",
        json={"type": "boiler", "next_certification_date": "2025-10-01"},
    )
    assert created.status_code == 201

    patched = client.patch(
        f"/assets/{created.json()['id']}", json={"provider_pref": "Termoidraulica Rossi"}
    )
    assert patched.json()["provider_pref"] == "Termoidraulica Rossi"

    assets = client.get(f"/units/{unit_id}/assets").json()
    assert [a["type"] for a in assets] == ["boiler"]


def test_tenant_lifecycle_over_http(client):
    assert client.put(
        "/owners/O1", json={"email": "owner@example.com", "name": "Olivia Owner"}
    ).status_code == 200

    created = client.post(
        "/tenants",
        json={"owner_id": "O1", "name": "Tina Tenant", "email": "tina@example.com"},
    )
    assert created.status_code == 201
    tenant_id = created.json()["id"]

    assert client.get(f"/tenants/{tenant_id}").json()["name"] == "Tina Tenant"

    patched = client.patch(f"/tenants/{tenant_id}", json={"name": "Tina Rossi"})
    assert patched.status_code == 200
    assert patched.json()["name"] == "Tina Rossi"
    assert patched.json()["email"] == "tina@example.com"

    owned = client.get("/owners/O1/tenants").json()
    assert [t["id"] for t in owned] == [tenant_id]

    deleted = client.delete(f"/tenants/{tenant_id}")
    assert deleted.status_code == 200
    assert deleted.json() == {"id": tenant_id, "deleted": True}

    missing = client.get(f"/tenants/{tenant_id}")
    assert missing.status_code == 404
    assert missing.json() == {"success": False, "error": "Tenant not found"}


def test_tenant_for_unknown_owner_is_rejected(client):
    resp = client.post(
        "/tenants",
        json={"owner_id": "nobody", "name": "Tina Tenant", "email": "tina@example.com"},
    )

    assert resp.status_code == 404
    assert resp.json()["error"] == "Owner not found"

from __future__ import annotations
import json

import pytest
from fastapi.testclient import TestClient

from jobboard.api.deps import get_coordinator
from jobboard.core.config import settings
from jobboard.core.errors import PaymentSessionNotFound
from jobboard.db.database import get_db
from jobboard.main import app
from jobboard.models.job import Job
from jobboard.models.payment_session import PaymentSession
from jobboard.schemas.payment import PaymentEvent, PendingSubmissionIn
from jobboard.services.commit_service import CommitCoordinator
from jobboard.services.payment_service import create_pending_submission, handle_payment_event, sign_payload

FORM = {
    "jobTitle": "Applied Scientist",
    "locationAddress": "Melbourne, VIC",
    "locationType": "hybrid",
    "jobTypes": ["full-time"],
    "payType": "range",
    "payRangeMin": 140000,
    "payRangeMax": 170000,
    "payPeriod": "year",
    "jobDescription": "<p>Research and ship.</p>",
    "companyName": "Kangaroo Labs",
    "companyDescription": "Applied AI studio.",
    "category": "teaching-research",
}


class QuietNotifier:
    def build_payload(self, job, employer_id=None):
        return {}

    def send(self, payload):
        return True, "ok"


def event(kind, session_id):
    return {"id": "evt_1", "type": kind, "data": {"object": {"id": session_id, "payment_status": "paid"}}}


@pytest.fixture
def coordinator():
    return CommitCoordinator(notifier=QuietNotifier(), analysis_trigger=lambda _job_id: None)


@pytest.fixture
def client(session_factory, coordinator):
    def override_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_coordinator] = lambda: coordinator
    yield TestClient(app)
    app.dependency_overrides.clear()


def store(db, session_id="cs_test_1", tier="featured"):
    return create_pending_submission(
        db,
        PendingSubmissionIn(session_id=session_id, employer_id="emp-9", pricing_tier=tier, amount=19900, job_form_data=FORM),
    )


def test_pending_submission_is_idempotent(db):
    first = store(db)
    second = store(db)

    assert first.id == second.id
    assert first.status == "pending"
    assert db.query(PaymentSession).count() == 1


def test_completed_event_commits_once(db, coordinator):
    store(db)
    completed = PaymentEvent.model_validate(event("checkout.session.completed", "cs_test_1"))

    first = handle_payment_event(db, completed, coordinator)
    second = handle_payment_event(db, completed, coordinator)

    assert first.created is True
    assert second.created is False
    assert first.job.id == second.job.id
    assert first.job.is_featured is True
    assert first.job.employer_id == "emp-9"
    assert first.job.company.description == "Applied AI studio."
    session = db.query(PaymentSession).one()
    assert session.status == "completed"
    assert session.completed_at is not None


def test_unknown_session_raises(db, coordinator):
    completed = PaymentEvent.model_validate(event("checkout.session.completed", "cs_missing"))

    with pytest.raises(PaymentSessionNotFound):
        handle_payment_event(db, completed, coordinator)


def test_expired_session_never_creates_job(db, coordinator):
    store(db)

    result = handle_payment_event(db, PaymentEvent.model_validate(event("checkout.session.expired", "cs_test_1")), coordinator)

    assert result is None
    assert db.query(PaymentSession).one().status == "expired"
    assert db.query(Job).count() == 0


def test_other_event_types_are_ignored(db, coordinator):
    store(db)

    result = handle_payment_event(db, PaymentEvent.model_validate(event("invoice.paid", "cs_test_1")), coordinator)

    assert result is None
    assert db.query(PaymentSession).one().status == "pending"


def test_webhook_redelivery_yields_one_job(client, session_factory):
    created = client.post(
        "/api/v1/submissions",
        json={"session_id": "cs_api_1", "pricing_tier": "standard", "amount": 9900, "job_form_data": FORM},
    )
    assert created.status_code == 201
    assert created.json()["status"] == "pending"

    body = event("checkout.session.completed", "cs_api_1")
    first = client.post("/api/v1/webhooks/payments", json=body)
    second = client.post("/api/v1/webhooks/payments", json=body)

    assert first.status_code == 200 and second.status_code == 200
    assert first.json()["created"] is True
    assert second.json()["created"] is False
    assert first.json()["job_id"] == second.json()["job_id"]

    db = session_factory()
    try:
        assert db.query(Job).count() == 1
    finally:
        db.close()


def test_webhook_unknown_session_is_404(client):
    resp = client.post("/api/v1/webhooks/payments", json=event("checkout.session.completed", "cs_nope"))

    assert resp.status_code == 404


def test_webhook_rejects_malformed_event(client):
    resp = client.post("/api/v1/webhooks/payments", json={"type": "checkout.session.completed"})

    assert resp.status_code == 400


def test_submission_without_title_is_rejected(client):
    resp = client.post(
        "/api/v1/submissions",
        json={"session_id": "cs_bad", "job_form_data": {"companyName": "Acme"}},
    )

    assert resp.status_code == 422


def test_webhook_signature_checked_when_secret_set(client, monkeypatch):
    monkeypatch.setattr(settings, "payment_webhook_secret", "whsec_test")
    body = json.dumps(event("invoice.paid", "cs_x")).encode()

    unsigned = client.post("/api/v1/webhooks/payments", content=body, headers={"Content-Type": "application/json"})
    forged = client.post(
        "/api/v1/webhooks/payments",
        content=body,
        headers={"Content-Type": "application/json", "X-Webhook-Signature": "deadbeef"},
    )
    signed = client.post(
        "/api/v1/webhooks/payments",
        content=body,
        headers={"Content-Type": "application/json", "X-Webhook-Signature": sign_payload(body, "whsec_test")},
    )

    assert unsigned.status_code == 400
    assert forged.status_code == 400
    assert signed.status_code == 200
    assert signed.json() == {"received": True}

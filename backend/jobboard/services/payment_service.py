from __future__ import annotations
import hashlib
import hmac
from datetime import datetime

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobboard.core.errors import PaymentSessionNotFound
from jobboard.models.payment_session import PaymentSession
from jobboard.schemas.payment import PaymentEvent, PendingSubmissionIn
from jobboard.schemas.job import SubmissionPayload
from jobboard.services.commit_service import CommitCoordinator, CommitResult

SESSION_COMPLETED = "checkout.session.completed"
SESSION_EXPIRED = "checkout.session.expired"


def sign_payload(body: bytes, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def verify_signature(body: bytes, signature: str | None, secret: str) -> bool:
    if not secret:
        return True
    if not signature:
        return False
    return hmac.compare_digest(sign_payload(body, secret), signature)


def get_session(db: Session, session_id: str) -> PaymentSession | None:
    return db.query(PaymentSession).filter(PaymentSession.session_id == session_id).first()


def create_pending_submission(db: Session, body: PendingSubmissionIn) -> PaymentSession:
    # Reject payloads the commit step could not turn into a job.
    SubmissionPayload.model_validate(body.job_form_data)

    existing = get_session(db, body.session_id)
    if existing:
        return existing

    row = PaymentSession(
        session_id=body.session_id,
        employer_id=body.employer_id,
        pricing_tier=body.pricing_tier,
        amount=body.amount,
        currency=body.currency,
        status="pending",
        job_form_data=body.job_form_data,
    )
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return get_session(db, body.session_id)
    db.refresh(row)
    logger.info(f"pending submission stored session={row.session_id} tier={row.pricing_tier}")
    return row


def handle_payment_event(db: Session, event: PaymentEvent, coordinator: CommitCoordinator) -> CommitResult | None:
    session_id = event.data.object.id

    if event.type == SESSION_COMPLETED:
        session = get_session(db, session_id)
        if session is None:
            raise PaymentSessionNotFound(session_id)
        if session.status != "completed":
            session.status = "completed"
            session.completed_at = datetime.utcnow()
            db.commit()
        return coordinator.commit(
            db,
            payment_id=session.session_id,
            payload=session.job_form_data,
            pricing_tier=session.pricing_tier,
            employer_id=session.employer_id,
        )

    if event.type == SESSION_EXPIRED:
        session = get_session(db, session_id)
        if session is None:
            logger.warning(f"expired event for unknown session {session_id}")
            return None
        if session.status == "pending":
            session.status = "expired"
            db.commit()
        logger.info(f"payment session {session_id} expired")
        return None

    logger.info(f"unhandled payment event type={event.type}")
    return None

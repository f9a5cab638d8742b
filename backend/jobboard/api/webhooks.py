from __future__ import annotations
from fastapi import APIRouter, Depends, Header, HTTPException, Request
from loguru import logger
from pydantic import ValidationError
from sqlalchemy.orm import Session

from jobboard.api.deps import get_coordinator
from jobboard.core.config import settings
from jobboard.core.errors import PaymentSessionNotFound
from jobboard.db.database import get_db
from jobboard.schemas.payment import PaymentEvent
from jobboard.services.commit_service import CommitCoordinator
from jobboard.services.payment_service import handle_payment_event, verify_signature

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


async def raw_body(request: Request) -> bytes:
    return await request.body()


@router.post("/payments")
def payment_webhook(
    body: bytes = Depends(raw_body),
    x_webhook_signature: str | None = Header(default=None),
    db: Session = Depends(get_db),
    coordinator: CommitCoordinator = Depends(get_coordinator),
):
    if not verify_signature(body, x_webhook_signature, settings.payment_webhook_secret):
        raise HTTPException(status_code=400, detail="Webhook signature verification failed")

    try:
        event = PaymentEvent.model_validate_json(body)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail="Malformed event") from exc

    try:
        result = handle_payment_event(db, event, coordinator)
    except PaymentSessionNotFound as exc:
        logger.error(f"payment session not found: {exc}")
        raise HTTPException(status_code=404, detail="Payment session not found") from exc

    response = {"received": True}
    if result is not None:
        response.update({"job_id": result.job.id, "created": result.created})
    return response

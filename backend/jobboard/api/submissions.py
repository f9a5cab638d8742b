from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

from jobboard.db.database import get_db
from jobboard.schemas.payment import PendingSubmissionIn, PendingSubmissionOut
from jobboard.services.payment_service import create_pending_submission

router = APIRouter(prefix="/submissions", tags=["submissions"])


@router.post("", response_model=PendingSubmissionOut, status_code=201)
def create_submission(body: PendingSubmissionIn, db: Session = Depends(get_db)):
    try:
        return create_pending_submission(db, body)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors()) from exc

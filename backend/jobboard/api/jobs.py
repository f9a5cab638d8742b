from __future__ import annotations
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from jobboard.api.deps import require_operator
from jobboard.db.database import get_db
from jobboard.models.job import Job
from jobboard.schemas.job import JobOut

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("", response_model=list[JobOut])
def list_jobs(
    q: str | None = None,
    category: str | None = None,
    status: str | None = None,
    featured: bool | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    _: str = Depends(require_operator),
    db: Session = Depends(get_db),
):
    query = db.query(Job)

    if q:
        like = f"%{q}%"
        query = query.filter((Job.title.ilike(like)) | (Job.description.ilike(like)) | (Job.location.ilike(like)))
    if category:
        query = query.filter(Job.category == category)
    if status:
        query = query.filter(Job.status == status)
    if featured is not None:
        query = query.filter(Job.is_featured.is_(featured))
    if start:
        query = query.filter(Job.created_at >= start)
    if end:
        query = query.filter(Job.created_at <= end)

    return query.order_by(Job.featured_order.desc(), Job.created_at.desc()).offset(offset).limit(limit).all()


@router.get("/{job_id}", response_model=JobOut)
def get_job(job_id: int, _: str = Depends(require_operator), db: Session = Depends(get_db)):
    row = db.get(Job, job_id)
    if not row:
        raise HTTPException(status_code=404, detail="job not found")
    return row

from __future__ import annotations
from fastapi import APIRouter

from jobboard.core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {"status": "ok", "service": settings.app_name, "env": settings.env}

from __future__ import annotations
from fastapi import APIRouter, HTTPException
from loguru import logger

from jobboard.api.deps import verify_login
from jobboard.schemas.auth import LoginRequest, TokenResponse
from jobboard.utils.auth import create_access_token

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest):
    if not verify_login(req.username, req.password):
        logger.warning(f"operator login rejected for {req.username!r}")
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return TokenResponse(access_token=create_access_token(req.username))

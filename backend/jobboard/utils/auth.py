from __future__ import annotations
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from jobboard.core.config import settings

OPERATOR_SCOPE = "operator"


def create_access_token(subject: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expire_minutes)
    claims = {"sub": subject, "scope": OPERATOR_SCOPE, "exp": expire}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_access_token(token: str) -> str | None:
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    if claims.get("scope") != OPERATOR_SCOPE:
        return None
    return claims.get("sub")

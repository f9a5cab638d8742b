from __future__ import annotations
from fastapi import BackgroundTasks, Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from jobboard.core.config import settings
from jobboard.db.database import get_db
from jobboard.fetchers.content_fetcher import ContentFetcher
from jobboard.services.analysis import run_job_analysis
from jobboard.services.commit_service import CommitCoordinator
from jobboard.services.extractor import StructuredExtractor
from jobboard.services.settings_service import load_commit_tables, load_taxonomy
from jobboard.utils.auth import verify_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_prefix}/auth/login")


def require_operator(token: str = Depends(oauth2_scheme)) -> str:
    subject = verify_access_token(token)
    if not subject:
        raise HTTPException(status_code=401, detail="Invalid token")
    return subject


def verify_login(username: str, password: str) -> bool:
    return username == settings.auth_username and password == settings.auth_password


def get_fetcher() -> ContentFetcher:
    return ContentFetcher()


def get_extractor(db: Session = Depends(get_db)) -> StructuredExtractor:
    return StructuredExtractor(taxonomy=load_taxonomy(db))


def get_coordinator(background_tasks: BackgroundTasks, db: Session = Depends(get_db)) -> CommitCoordinator:
    # Analysis runs after the response so the webhook acknowledges quickly.
    return CommitCoordinator(
        tables=load_commit_tables(db),
        taxonomy=load_taxonomy(db),
        analysis_trigger=lambda job_id: background_tasks.add_task(run_job_analysis, job_id),
    )

from __future__ import annotations
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from jobboard.api.deps import require_operator
from jobboard.db.database import get_db
from jobboard.schemas.setting import CommitTablesConfig, TaxonomyConfig
from jobboard.services.settings_service import get_setting, upsert_setting

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/taxonomy")
def get_taxonomy(_: str = Depends(require_operator), db: Session = Depends(get_db)):
    return get_setting(db, "taxonomy")


@router.put("/taxonomy")
def put_taxonomy(body: TaxonomyConfig, _: str = Depends(require_operator), db: Session = Depends(get_db)):
    return upsert_setting(db, "taxonomy", body.model_dump())


@router.get("/commit-tables")
def get_commit_tables(_: str = Depends(require_operator), db: Session = Depends(get_db)):
    return get_setting(db, "commit_tables")


@router.put("/commit-tables")
def put_commit_tables(body: CommitTablesConfig, _: str = Depends(require_operator), db: Session = Depends(get_db)):
    return upsert_setting(db, "commit_tables", body.model_dump())

from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from sqlalchemy.orm import Session

from jobboard.api.deps import get_extractor, get_fetcher, require_operator
from jobboard.core.errors import ExtractionError, FetchError, ModelNotConfigured
from jobboard.db.database import get_db
from jobboard.fetchers.content_fetcher import ContentFetcher
from jobboard.schemas.imports import ImportRequest, ImportResponse
from jobboard.services.extractor import StructuredExtractor
from jobboard.services.import_service import import_listing

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/import-job", response_model=ImportResponse, response_model_by_alias=True)
def import_job(
    body: ImportRequest,
    _: str = Depends(require_operator),
    db: Session = Depends(get_db),
    fetcher: ContentFetcher = Depends(get_fetcher),
    extractor: StructuredExtractor = Depends(get_extractor),
):
    url = body.url
    raw_text = None if url else body.raw_text
    try:
        outcome = import_listing(db, url=url, raw_text=raw_text, fetcher=fetcher, extractor=extractor)
    except FetchError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except ExtractionError as exc:
        logger.error(f"import extraction failed url={url}: {exc}")
        raise HTTPException(status_code=422, detail="Could not process this listing") from exc
    except ModelNotConfigured as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    return ImportResponse(data=outcome.record, company_match=outcome.company_match)

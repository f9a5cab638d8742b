from __future__ import annotations
from dataclasses import dataclass

from loguru import logger
from sqlalchemy.orm import Session

from jobboard.core.errors import FetchError
from jobboard.fetchers.content_fetcher import ContentFetcher
from jobboard.schemas.imports import CompanyMatch
from jobboard.schemas.job import ExtractedJobRecord
from jobboard.services.commit_service import find_company_by_name
from jobboard.services.extractor import StructuredExtractor


@dataclass
class ImportOutcome:
    record: ExtractedJobRecord
    company_match: CompanyMatch | None
    source_url: str | None
    length_capped: bool = False


def match_company(db: Session, name: str) -> CompanyMatch | None:
    name = (name or "").strip()
    if not name:
        return None
    company = find_company_by_name(db, name)
    if company is None:
        return None
    return CompanyMatch(id=company.id, name=company.name)


def import_listing(
    db: Session,
    url: str | None = None,
    raw_text: str | None = None,
    fetcher: ContentFetcher | None = None,
    extractor: StructuredExtractor | None = None,
) -> ImportOutcome:
    if bool(url) == bool(raw_text):
        raise ValueError("Provide either a URL or raw text, not both")

    fetcher = fetcher or ContentFetcher()
    extractor = extractor or StructuredExtractor()

    capped = False
    if url:
        content = fetcher.fetch(url)
        text, capped = content.text, content.length_capped
    else:
        text, capped = fetcher.normalize(raw_text)
        if not fetcher.accept(text):
            raise FetchError(f"Raw text is too short (minimum {fetcher.min_chars} characters)")

    record = extractor.extract(text, source_url=url)
    company_match = match_company(db, record.company_name)
    if company_match:
        logger.info(f"import matched existing company id={company_match.id} name={company_match.name!r}")
    return ImportOutcome(record=record, company_match=company_match, source_url=url, length_capped=capped)

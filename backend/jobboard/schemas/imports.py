from __future__ import annotations
from pydantic import BaseModel, model_validator

from jobboard.schemas.job import ExtractedJobRecord


class ImportRequest(BaseModel):
    url: str | None = None
    raw_text: str | None = None

    @model_validator(mode="after")
    def _one_source(self):
        self.url = (self.url or "").strip() or None
        self.raw_text = (self.raw_text or "").strip() or None
        if not (self.url or self.raw_text):
            raise ValueError("Either a URL or raw text is required")
        return self


class CompanyMatch(BaseModel):
    id: int
    name: str


class ImportResponse(BaseModel):
    success: bool = True
    data: ExtractedJobRecord
    company_match: CompanyMatch | None = None

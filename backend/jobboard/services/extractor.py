from __future__ import annotations
import math

import anthropic
from loguru import logger
from pydantic import ValidationError

from jobboard.core.config import settings
from jobboard.core.errors import ExtractionError
from jobboard.schemas.job import ExtractedJobRecord
from jobboard.services.llm import LLMClient
from jobboard.services.settings_service import Taxonomy, load_taxonomy
from jobboard.utils.html import clean_highlight, sanitize_html
from jobboard.utils.salary import resolve_pay_type

LOCATION_TYPES = ("in-person", "fully-remote", "hybrid", "on-the-road")
JOB_TYPES = ("full-time", "part-time", "permanent", "fixed-term", "contract", "casual", "internship", "graduate")
PAY_TYPES = ("fixed", "range", "maximum", "minimum")
PAY_PERIODS = ("hour", "day", "week", "month", "year")
APPLICATION_METHODS = ("external", "email")

FALLBACK_SALARY = {"pay_type": "range", "pay_range_min": 60000.0, "pay_range_max": 90000.0, "pay_period": "year"}
MAX_JOB_TYPES = 4
HIGHLIGHT_MAX = 80

TOOL_NAME = "extract_job_data"

SYSTEM_PROMPT = """You are an expert job listing data extractor for an Australian AI jobs board. Extract structured data from job listing text by calling the extract_job_data tool.

Field guidelines:
- jobTitle: The job title
- locationAddress: Format as 'Suburb/City, STATE' using the most specific location (e.g. Parramatta, NSW NOT Sydney, NSW). Multiple locations joined with ' | '. Standard abbreviations: NSW, VIC, QLD, WA, SA, TAS, ACT, NT. Use 'Australia' if unknown.
- locationType: 'in-person', 'fully-remote', 'hybrid', or 'on-the-road'
- jobTypes: Array of 'full-time', 'part-time', 'permanent', 'fixed-term', 'contract', 'casual', 'internship', 'graduate'
- payType: Always provide, use 'range' when estimating
- payRangeMin/payRangeMax: Annual AUD salary bounds
- payPeriod: 'year', 'hour', 'day', or null
- salaryIsEstimated: true if you estimated the salary, false if explicitly stated
- highlight1: Max 80 chars, main function/s of the job. No emojis, no em dashes.
- highlight2: Max 80 chars, years of experience. Use + not 'plus', - not 'to' (e.g. '5+ years ML experience').
- highlight3: Max 80 chars, key skills. No emojis, no em dashes.
- jobDescription: Extract using EXACT original text, word for word. Skip scraped navigation/headers/footers. Wrap in clean HTML (<p>, <ul>, <li>, <strong>).
- requirements: Extract using EXACT original text. Wrap in HTML. Empty string if already in jobDescription.
- applicationUrl: Application URL if found, or empty string
- applicationEmail: Application email if found, or empty string
- companyName: The hiring company name
- companyWebsite: Company website URL if found, or empty string
- category: Best match from: {categories}
- aiFocusPercentage: 0-100 how AI/ML focused this role is

IMPORTANT RULES:
- For salary: convert to annual AUD if given in other periods. If salary is NOT mentioned, estimate a realistic range based on role, seniority, experience, and Australian market rates. Set payType to "range" and salaryIsEstimated to true. NEVER leave all salary fields null.
- For jobDescription and requirements: use the EXACT words from the original listing. Do NOT rewrite, paraphrase, or summarise.
- If the role is remote-eligible or mentions "work from home", set locationType to "fully-remote" or "hybrid" as appropriate."""


def build_extract_tool(taxonomy: Taxonomy) -> dict:
    return {
        "name": TOOL_NAME,
        "description": "Submit extracted job listing data.",
        "input_schema": {
            "type": "object",
            "properties": {
                "jobTitle": {"type": "string"},
                "locationAddress": {"type": "string"},
                "locationType": {"type": "string", "enum": list(LOCATION_TYPES)},
                "jobTypes": {"type": "array", "items": {"type": "string", "enum": list(JOB_TYPES)}},
                "payType": {"type": "string", "enum": list(PAY_TYPES)},
                "payRangeMin": {"type": "number"},
                "payRangeMax": {"type": "number"},
                "payAmount": {"type": "number"},
                "payPeriod": {"type": "string", "enum": list(PAY_PERIODS)},
                "salaryIsEstimated": {"type": "boolean"},
                "highlight1": {"type": "string"},
                "highlight2": {"type": "string"},
                "highlight3": {"type": "string"},
                "jobDescription": {"type": "string"},
                "requirements": {"type": "string"},
                "applicationMethod": {"type": "string", "enum": list(APPLICATION_METHODS)},
                "applicationUrl": {"type": "string"},
                "applicationEmail": {"type": "string"},
                "companyName": {"type": "string"},
                "companyWebsite": {"type": "string"},
                "category": {"type": "string", "enum": taxonomy.slugs},
                "aiFocusPercentage": {"type": "number"},
            },
            "required": [
                "jobTitle", "locationAddress", "locationType", "jobTypes",
                "salaryIsEstimated", "highlight1", "highlight2", "highlight3",
                "jobDescription", "requirements", "applicationMethod",
                "applicationUrl", "applicationEmail", "companyName", "companyWebsite",
                "category", "aiFocusPercentage",
            ],
        },
    }


def _as_str(value) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return ""
    return str(value).strip()


def _as_number(value) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def _as_enum(value, allowed: tuple[str, ...], default):
    text = _as_str(value).lower()
    return text if text in allowed else default


def _as_job_types(value) -> list[str]:
    if not isinstance(value, list):
        return ["full-time"]
    picked: list[str] = []
    for item in value:
        text = _as_str(item).lower()
        if text in JOB_TYPES and text not in picked:
            picked.append(text)
    return picked[:MAX_JOB_TYPES] or ["full-time"]


class StructuredExtractor:
    def __init__(
        self,
        llm: LLMClient | None = None,
        taxonomy: Taxonomy | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
    ):
        self.llm = llm or LLMClient()
        self.taxonomy = taxonomy or load_taxonomy()
        self.model = model or settings.extraction_model
        self.max_tokens = max_tokens or settings.extraction_max_tokens

    def system_prompt(self) -> str:
        return SYSTEM_PROMPT.replace("{categories}", ", ".join(self.taxonomy.slugs))

    def extract(self, text: str, source_url: str | None = None) -> ExtractedJobRecord:
        if source_url:
            user = f"Extract job listing data from this page content (source: {source_url}):\n\n{text}"
        else:
            user = f"Extract job listing data from this text:\n\n{text}"

        try:
            result = self.llm.call_tool(
                model=self.model,
                system=self.system_prompt(),
                user=user,
                tool=build_extract_tool(self.taxonomy),
                max_tokens=self.max_tokens,
            )
        except anthropic.APIError as exc:
            raise ExtractionError(f"model request failed: {exc}") from exc

        if result.tool_input is None:
            raise ExtractionError("No tool use response from model")

        record = self.sanitize(result.tool_input)
        logger.info(
            f"extracted title={record.job_title!r} category={record.category} "
            f"estimated_salary={record.salary_is_estimated} source={source_url or 'raw-text'}"
        )
        return record

    def sanitize(self, raw: dict) -> ExtractedJobRecord:
        title = _as_str(raw.get("jobTitle"))
        if not title:
            raise ExtractionError("missing title")

        low = _as_number(raw.get("payRangeMin"))
        high = _as_number(raw.get("payRangeMax"))
        amount = _as_number(raw.get("payAmount"))
        pay_type = resolve_pay_type(_as_enum(raw.get("payType"), PAY_TYPES, None), low, high, amount)
        pay = {
            "pay_type": pay_type,
            "pay_range_min": low,
            "pay_range_max": high,
            "pay_amount": amount,
            "pay_period": _as_enum(raw.get("payPeriod"), PAY_PERIODS, None),
            "salary_is_estimated": bool(raw.get("salaryIsEstimated")),
        }
        if low is None and high is None and amount is None:
            logger.warning(f"no salary signal for {title!r}, applying fallback range")
            pay.update(FALLBACK_SALARY, salary_is_estimated=True)

        category = self.taxonomy.correct(_as_str(raw.get("category")).lower())
        if not self.taxonomy.is_valid(category):
            category = self.taxonomy.default_category

        ai_focus = _as_number(raw.get("aiFocusPercentage"))
        ai_focus = 50 if ai_focus is None else max(0, min(100, int(round(ai_focus))))

        try:
            return ExtractedJobRecord(
                job_title=title,
                location_address=_as_str(raw.get("locationAddress")) or "Australia",
                location_type=_as_enum(raw.get("locationType"), LOCATION_TYPES, "in-person"),
                job_types=_as_job_types(raw.get("jobTypes")),
                highlight1=clean_highlight(_as_str(raw.get("highlight1")), HIGHLIGHT_MAX),
                highlight2=clean_highlight(_as_str(raw.get("highlight2")), HIGHLIGHT_MAX),
                highlight3=clean_highlight(_as_str(raw.get("highlight3")), HIGHLIGHT_MAX),
                job_description=sanitize_html(_as_str(raw.get("jobDescription"))),
                requirements=sanitize_html(_as_str(raw.get("requirements"))),
                application_method=_as_enum(raw.get("applicationMethod"), APPLICATION_METHODS, "external"),
                application_url=_as_str(raw.get("applicationUrl")),
                application_email=_as_str(raw.get("applicationEmail")),
                company_name=_as_str(raw.get("companyName")),
                company_website=_as_str(raw.get("companyWebsite")),
                category=category,
                ai_focus_percentage=ai_focus,
                **pay,
            )
        except ValidationError as exc:
            raise ExtractionError(f"invalid listing record: {exc}") from exc

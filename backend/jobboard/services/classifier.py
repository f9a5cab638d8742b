from __future__ import annotations
import json
import re
import time
from dataclasses import dataclass, field

from loguru import logger
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from jobboard.core.config import settings
from jobboard.core.errors import ClassificationParseError, IncompleteRationaleError
from jobboard.schemas.classification import CONFIDENCE_LEVELS, ClassificationResult, ValidationIssue
from jobboard.services.llm import LLMClient
from jobboard.services.settings_service import Taxonomy, load_taxonomy

TOOL_NAME = "classify_job"
DEFAULT_RATIONALE = "Classification completed."
RATIONALE_MIN = 20
RATIONALE_TARGET = 120
DESCRIPTION_BUDGET = 3000
REQUIREMENTS_BUDGET = 1000

SYSTEM_PROMPT = """You are an expert AI/ML job classifier for an Australian job board.

Given a job posting, you must assign it the single best-fit category from the list below.

AVAILABLE CATEGORIES:
{categories}

Call the classify_job tool with:
- "category": one of the exact slugs listed above. No other values are accepted.
- "rationale": ONE short sentence under 120 characters, ending with a full stop.
- "confidence": "high", "medium" or "low".

Pick the SINGLE best-fit category. If truly ambiguous, prefer the more specific one.

CLASSIFICATION GUIDELINES:
- "machine-learning": ML model training, deployment, MLOps, feature engineering
- "ai-ml-architect": senior/lead roles designing AI/ML systems and architecture
- "data-science": analysis, experimentation, statistical modelling
- "data-engineer": data pipelines, ETL, data infrastructure
- "teaching-research": academic research, R&D scientists, university positions
- "ai-automation": applying AI to automate business processes
- "ai-governance": AI ethics, responsible AI, compliance
- "computer-vision": image/video processing, object detection
- "quality-assurance": QA, testing, test automation for AI/ML systems
- "software-development": general software engineering that supports AI systems
- "engineering": broad engineering roles with AI/ML components
- "infrastructure": cloud, DevOps, platform roles supporting AI workloads
- "analyst": business/data analyst roles with AI/ML elements
- "product": product management for AI/ML products
- "strategy-transformation": AI strategy, digital transformation, consulting
- "annotation": data labelling and annotation for ML
- "marketing": AI-related marketing roles
- "sales": AI-related sales roles

Confidence levels:
- high: Title and description clearly match one category
- medium: Good fit but could arguably be another category
- low: Genuinely ambiguous between multiple categories

Use Australian/British English spelling."""

CLASSIFY_TOOL = {
    "name": TOOL_NAME,
    "description": "Submit the category assigned to a job posting.",
    "input_schema": {
        "type": "object",
        "properties": {
            "category": {"type": "string"},
            "rationale": {"type": "string"},
            "confidence": {"type": "string", "enum": list(CONFIDENCE_LEVELS)},
        },
        "required": ["category", "rationale", "confidence"],
    },
}

_OBJECT_RE = re.compile(r"\{.*\}", re.S)
_BARE_KEY_RE = re.compile(r"([{,]\s*)([A-Za-z_]\w*)\s*:")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")
_CATEGORY_RE = re.compile(r"category[\"'\s:]+[\"']([a-z-]+)[\"']", re.I)
_RATIONALE_RE = re.compile(r"rationale[\"'\s:]+(?:\"([^\"]*)\"|'([^']*)')", re.I)
_CONFIDENCE_RE = re.compile(r"confidence[\"'\s:]+[\"']?(high|medium|low)[\"']?", re.I)


def is_complete_sentence(text: str) -> bool:
    return bool(text) and text.strip()[-1:] in (".", "!", "?")


def classification_from_mapping(data: dict) -> ClassificationResult:
    return ClassificationResult(
        category=str(data.get("category") or "").strip().lower(),
        rationale=str(data.get("rationale") or "").strip(),
        confidence=str(data.get("confidence") or "").strip().lower(),
    )


def _repair_json(candidate: str) -> str:
    text = re.sub(r"[\r\n]+", " ", candidate)
    text = _TRAILING_COMMA_RE.sub(r"\1", text)
    if '"' not in text:
        text = text.replace("'", '"')
    text = _BARE_KEY_RE.sub(r'\1"\2":', text)
    return text


def parse_classification(text: str) -> ClassificationResult:
    """Strict JSON first, then a repaired object, then per-field regexes."""
    match = _OBJECT_RE.search(text or "")
    if match:
        for candidate in (match.group(0), _repair_json(match.group(0))):
            try:
                data = json.loads(candidate)
            except json.JSONDecodeError:
                continue
            if isinstance(data, dict) and data.get("category"):
                return classification_from_mapping(data)

    category = _CATEGORY_RE.search(text or "")
    if category:
        rationale = _RATIONALE_RE.search(text)
        confidence = _CONFIDENCE_RE.search(text)
        return ClassificationResult(
            category=category.group(1).lower(),
            rationale=(rationale.group(1) or rationale.group(2) or "").strip() if rationale else DEFAULT_RATIONALE,
            confidence=confidence.group(1).lower() if confidence else "medium",
        )

    raise ClassificationParseError("Could not parse classification from response")


@dataclass
class ClassificationOutcome:
    result: ClassificationResult
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def is_valid(self) -> bool:
        return not self.errors


class CategoryClassifier:
    def __init__(
        self,
        llm: LLMClient | None = None,
        taxonomy: Taxonomy | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        max_attempts: int | None = None,
        retry_wait: float | None = None,
        sleep=time.sleep,
    ):
        self.llm = llm or LLMClient()
        self.taxonomy = taxonomy or load_taxonomy()
        self.model = model or settings.classifier_model
        self.max_tokens = max_tokens or settings.classifier_max_tokens
        self.max_attempts = max_attempts or settings.classify_max_attempts
        self.retry_wait = settings.classify_retry_wait_seconds if retry_wait is None else retry_wait
        self.sleep = sleep

    def system_prompt(self) -> str:
        listing = "\n".join(f'  - "{slug}" -> {label}' for slug, label in self.taxonomy.categories.items())
        return SYSTEM_PROMPT.replace("{categories}", listing)

    @staticmethod
    def job_content(title: str, description: str, requirements: str | None, current_category: str) -> str:
        parts = [
            f"Job Title: {title}",
            f"Current (legacy) category: {current_category}",
            "",
            "Job Description:",
            (description or "")[:DESCRIPTION_BUDGET],
        ]
        if requirements:
            parts += ["", "Requirements:", requirements[:REQUIREMENTS_BUDGET]]
        return "\n".join(parts).strip()

    def classify(
        self,
        job_id: str,
        title: str,
        description: str,
        requirements: str | None,
        current_category: str,
    ) -> ClassificationOutcome:
        content = self.job_content(title, description, requirements, current_category)
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.retry_wait),
            retry=retry_if_exception_type(ClassificationParseError),
            sleep=self.sleep,
            before_sleep=self._log_retry,
            reraise=True,
        )
        try:
            result = retrying(self._classify_once, content)
        except IncompleteRationaleError as exc:
            # Out of attempts: keep the last answer and let validation flag it.
            result = exc.result

        issues, result = self.validate(job_id, title, result)
        return ClassificationOutcome(result=result, issues=issues)

    def _log_retry(self, retry_state) -> None:
        exc = retry_state.outcome.exception()
        logger.warning(f"classifier retry {retry_state.attempt_number}/{self.max_attempts - 1}: {exc}")

    def _classify_once(self, content: str) -> ClassificationResult:
        reply = self.llm.call_tool(
            model=self.model,
            system=self.system_prompt(),
            user=f"Classify this job posting into the single best-fit category:\n\n{content}",
            tool=CLASSIFY_TOOL,
            max_tokens=self.max_tokens,
        )
        if reply.stop_reason == "max_tokens":
            raise ClassificationParseError("Response truncated by max_tokens limit")

        if reply.tool_input and reply.tool_input.get("category"):
            result = classification_from_mapping(reply.tool_input)
        else:
            result = parse_classification(reply.text)

        corrected = self.taxonomy.correct(result.category)
        if corrected != result.category:
            logger.info(f"auto-corrected slug {result.category!r} -> {corrected!r}")
            result.category = corrected

        if result.rationale and not is_complete_sentence(result.rationale):
            raise IncompleteRationaleError(result)
        return result

    def validate(
        self, job_id: str, job_title: str, result: ClassificationResult
    ) -> tuple[list[ValidationIssue], ClassificationResult]:
        issues: list[ValidationIssue] = []

        def flag(issue: str, value, severity: str = "error") -> None:
            issues.append(ValidationIssue(job_id=job_id, job_title=job_title, issue=issue, value=value, severity=severity))

        if not self.taxonomy.is_valid(result.category):
            flag("Invalid category slug", result.category)

        confidence = result.confidence
        if confidence not in CONFIDENCE_LEVELS:
            flag("Invalid confidence", confidence)
            confidence = "medium"

        rationale = result.rationale.strip()
        if not rationale:
            flag("Empty rationale", 0)
        elif len(rationale) < RATIONALE_MIN:
            flag("Rationale too short", len(rationale), "warning")
        elif len(rationale) > RATIONALE_TARGET:
            flag("Rationale too long", len(rationale), "warning")

        if rationale and not is_complete_sentence(rationale):
            flag("Incomplete sentence (API truncation)", rationale[-30:])

        sanitized = ClassificationResult(
            category=result.category,
            rationale=rationale or DEFAULT_RATIONALE,
            confidence=confidence,
        )
        return issues, sanitized

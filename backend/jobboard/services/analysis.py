from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime

from loguru import logger

from jobboard.core.config import settings
from jobboard.db.database import SessionLocal
from jobboard.models.job import Job
from jobboard.schemas.classification import CONFIDENCE_LEVELS
from jobboard.services.llm import LLMClient

TOOL_NAME = "record_ai_focus"
RATIONALE_MAX = 350

SYSTEM_PROMPT = """You are an expert AI/ML job analyst. Your task is to analyse job postings and determine how AI/ML-focused the role is.

Call the record_ai_focus tool with:
- "percentage": number 0-100
- "rationale": string, max 350 chars
- "confidence": "high", "medium" or "low"

Scoring guidelines:
- 80-100: Core AI/ML role (ML Engineer, Data Scientist, AI Researcher, etc.)
- 60-79: Strong AI/ML component (roles that heavily use or develop AI/ML)
- 40-59: Moderate AI/ML elements (roles with some AI/ML responsibilities)
- 20-39: Light AI/ML touch (roles that interact with AI/ML occasionally)
- 0-19: Minimal/no AI/ML focus (traditional tech roles with no AI component)

Confidence levels:
- high: Clear indicators in title and description
- medium: Some ambiguity or limited information
- low: Very limited information or unclear requirements

Keep the rationale concise and factual, focusing on specific AI/ML technologies, responsibilities, or skills mentioned."""

AI_FOCUS_TOOL = {
    "name": TOOL_NAME,
    "description": "Record how AI/ML focused a job posting is.",
    "input_schema": {
        "type": "object",
        "properties": {
            "percentage": {"type": "number"},
            "rationale": {"type": "string"},
            "confidence": {"type": "string", "enum": list(CONFIDENCE_LEVELS)},
        },
        "required": ["percentage", "rationale", "confidence"],
    },
}


@dataclass
class AIFocusAnalysis:
    percentage: int
    rationale: str
    confidence: str


def analyse_job(llm: LLMClient, title: str, description: str, requirements: str | None = None) -> AIFocusAnalysis:
    content = f"Job Title: {title}\n\nJob Description:\n{description}"
    if requirements:
        content += f"\n\nRequirements:\n{requirements}"

    reply = llm.call_tool(
        model=settings.analysis_model,
        system=SYSTEM_PROMPT,
        user=f"Analyse this job posting and determine its AI/ML focus level:\n\n{content}",
        tool=AI_FOCUS_TOOL,
        max_tokens=256,
    )
    data = reply.tool_input or {}
    percentage = data.get("percentage")
    if isinstance(percentage, bool) or not isinstance(percentage, (int, float)):
        raise ValueError("Invalid percentage in AI focus analysis")

    confidence = str(data.get("confidence") or "").lower()
    return AIFocusAnalysis(
        percentage=max(0, min(100, int(round(percentage)))),
        rationale=str(data.get("rationale") or "")[:RATIONALE_MAX],
        confidence=confidence if confidence in CONFIDENCE_LEVELS else "medium",
    )


def run_job_analysis(job_id: int, llm: LLMClient | None = None, session_factory=SessionLocal) -> None:
    """Runs after a commit, outside the request; never raises."""
    db = session_factory()
    try:
        job = db.get(Job, job_id)
        if job is None:
            logger.warning(f"analysis skipped, job {job_id} not found")
            return

        result = analyse_job(llm or LLMClient(), job.title, job.description, job.requirements)
        job.ai_focus_percentage = result.percentage
        job.ai_focus_rationale = result.rationale
        job.ai_focus_confidence = result.confidence
        job.ai_focus_analysed_at = datetime.utcnow()
        db.commit()
        logger.info(f"job {job_id} ai focus={result.percentage} confidence={result.confidence}")
    except Exception as exc:  # noqa: BLE001
        db.rollback()
        logger.error(f"analysis for job {job_id} failed: {exc}")
    finally:
        db.close()

from __future__ import annotations
from dataclasses import dataclass
from typing import Literal, Union

from pydantic import BaseModel

Confidence = Literal["high", "medium", "low"]
CONFIDENCE_LEVELS = ("high", "medium", "low")


class ClassificationResult(BaseModel):
    category: str
    rationale: str
    confidence: str = "medium"


@dataclass
class ValidationIssue:
    job_id: str
    job_title: str
    issue: str
    value: Union[str, int]
    severity: Literal["error", "warning"]

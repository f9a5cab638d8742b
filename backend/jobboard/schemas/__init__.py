from __future__ import annotations
from jobboard.schemas.auth import LoginRequest, TokenResponse
from jobboard.schemas.classification import ClassificationResult, ValidationIssue
from jobboard.schemas.imports import CompanyMatch, ImportRequest, ImportResponse
from jobboard.schemas.job import CompanyOut, ExtractedJobRecord, JobOut, SubmissionPayload
from jobboard.schemas.payment import PaymentEvent, PendingSubmissionIn, PendingSubmissionOut
from jobboard.schemas.setting import CommitTablesConfig, TaxonomyConfig

__all__ = [
    "LoginRequest",
    "TokenResponse",
    "ClassificationResult",
    "ValidationIssue",
    "CompanyMatch",
    "ImportRequest",
    "ImportResponse",
    "CompanyOut",
    "ExtractedJobRecord",
    "JobOut",
    "SubmissionPayload",
    "PaymentEvent",
    "PendingSubmissionIn",
    "PendingSubmissionOut",
    "CommitTablesConfig",
    "TaxonomyConfig",
]

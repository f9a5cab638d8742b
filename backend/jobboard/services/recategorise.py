from __future__ import annotations
import time
from collections import Counter
from dataclasses import dataclass, field

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobboard.core.config import settings
from jobboard.models.job import Job
from jobboard.schemas.classification import ValidationIssue
from jobboard.services.classifier import CategoryClassifier

DEFAULT_LIMIT = 10
ALL_LIMIT = 1000


@dataclass
class Proposal:
    job_id: int
    title: str
    old_category: str
    new_category: str
    confidence: str
    rationale: str


@dataclass
class RecategoriseReport:
    commit: bool
    limit: int
    stop_on_error: bool
    total: int = 0
    classified: int = 0
    with_warnings: int = 0
    failed: int = 0
    stopped_early: bool = False
    by_category: Counter = field(default_factory=Counter)
    by_confidence: Counter = field(default_factory=Counter)
    issues: list[ValidationIssue] = field(default_factory=list)
    proposals: list[Proposal] = field(default_factory=list)

    @property
    def issues_by_type(self) -> Counter:
        return Counter(i.issue for i in self.issues)

    @property
    def success_rate(self) -> float:
        return round(self.classified / self.total * 100, 1) if self.total else 0.0


def select_legacy_jobs(db: Session, legacy_categories, limit: int) -> list[Job]:
    return (
        db.query(Job)
        .filter(Job.status == "approved", Job.category.in_(list(legacy_categories)))
        .order_by(Job.id)
        .limit(limit)
        .all()
    )


def run_recategorisation(
    db: Session,
    classifier: CategoryClassifier,
    limit: int = DEFAULT_LIMIT,
    commit: bool = False,
    stop_on_error: bool = False,
    delay: float | None = None,
    sleep=time.sleep,
) -> RecategoriseReport:
    taxonomy = classifier.taxonomy
    delay = settings.classify_delay_seconds if delay is None else delay
    report = RecategoriseReport(commit=commit, limit=limit, stop_on_error=stop_on_error)

    jobs = select_legacy_jobs(db, taxonomy.legacy_categories, limit)
    report.total = len(jobs)
    logger.info(f"recategorise: {len(jobs)} legacy jobs, mode={'commit' if commit else 'dry-run'}")

    for idx, job in enumerate(jobs):
        if idx:
            sleep(delay)

        try:
            outcome = classifier.classify(str(job.id), job.title, job.description, job.requirements, job.category)
        except Exception as exc:  # noqa: BLE001
            report.failed += 1
            logger.error(f"job {job.id} classification failed: {exc}")
            if stop_on_error:
                report.stopped_early = True
                break
            continue

        result = outcome.result
        old_category = job.category
        report.issues.extend(outcome.issues)
        if outcome.warnings:
            report.with_warnings += 1

        if not outcome.is_valid and stop_on_error:
            logger.error(f"job {job.id} has validation errors, stopping")
            report.stopped_early = True
            break

        if not taxonomy.is_valid(result.category):
            report.failed += 1
            logger.warning(f"job {job.id} skipped, invalid category {result.category!r}")
            continue

        if commit:
            try:
                job.category = result.category
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                report.failed += 1
                logger.error(f"job {job.id} update failed: {exc}")
                if stop_on_error:
                    report.stopped_early = True
                    break
                continue

        report.classified += 1
        report.by_category[result.category] += 1
        report.by_confidence[result.confidence] += 1
        report.proposals.append(
            Proposal(
                job_id=job.id,
                title=job.title,
                old_category=old_category,
                new_category=result.category,
                confidence=result.confidence,
                rationale=result.rationale,
            )
        )

    logger.info(
        f"recategorise done: classified={report.classified} warnings={report.with_warnings} failed={report.failed}"
    )
    return report

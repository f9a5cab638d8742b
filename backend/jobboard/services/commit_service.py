from __future__ import annotations
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobboard.core.config import settings
from jobboard.models.company import Company
from jobboard.models.job import Job
from jobboard.models.notification import Notification
from jobboard.schemas.job import SubmissionPayload
from jobboard.services.notifier import ConfirmationNotifier
from jobboard.services.settings_service import CommitTables, Taxonomy, load_commit_tables, load_taxonomy
from jobboard.utils.salary import resolve_pay_type


@dataclass
class CommitResult:
    job: Job
    created: bool


def salary_bounds(payload: SubmissionPayload, tables: CommitTables) -> tuple[Optional[int], Optional[int]]:
    period = payload.pay_period or "year"
    low = payload.pay_range_min
    high = payload.pay_range_max
    amount = payload.pay_amount
    pay_type = resolve_pay_type(payload.pay_type, low or None, high or None, amount or None)

    def annual(value):
        return tables.annualise(value, period) if value else None

    if pay_type == "range":
        return annual(low), annual(high)
    if pay_type == "minimum":
        return annual(low), None
    if pay_type == "maximum":
        return None, annual(high)
    if pay_type == "fixed":
        return annual(amount), annual(amount)
    return None, None


def find_job_by_payment(db: Session, payment_id: str) -> Job | None:
    return db.query(Job).filter(Job.payment_id == payment_id).first()


def find_company_by_name(db: Session, name: str) -> Company | None:
    return db.query(Company).filter(Company.name == name).first()


class CommitCoordinator:
    def __init__(
        self,
        tables: CommitTables | None = None,
        taxonomy: Taxonomy | None = None,
        notifier: ConfirmationNotifier | None = None,
        analysis_trigger: Callable[[int], None] | None = None,
    ):
        self.tables = tables or load_commit_tables()
        self.taxonomy = taxonomy or load_taxonomy()
        self.notifier = notifier or ConfirmationNotifier(settings.notification_webhook_url)
        self.analysis_trigger = analysis_trigger

    def commit(
        self,
        db: Session,
        payment_id: str,
        payload: SubmissionPayload | dict,
        pricing_tier: str = "standard",
        employer_id: str | None = None,
    ) -> CommitResult:
        if isinstance(payload, dict):
            payload = SubmissionPayload.model_validate(payload)

        existing = find_job_by_payment(db, payment_id)
        if existing:
            logger.info(f"payment {payment_id} already committed as job {existing.id}")
            return CommitResult(job=existing, created=False)

        company = self.resolve_company(db, payload)
        job = Job(**self.build_job_fields(payload, pricing_tier), payment_id=payment_id, employer_id=employer_id)
        job.company_id = company.id if company else None
        db.add(job)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            winner = find_job_by_payment(db, payment_id)
            if winner is None:
                raise
            logger.info(f"payment {payment_id} committed concurrently as job {winner.id}")
            return CommitResult(job=winner, created=False)

        db.refresh(job)
        logger.info(f"job {job.id} created for payment {payment_id} tier={pricing_tier}")

        self._notify(db, job, employer_id)
        self._trigger_analysis(job.id)
        return CommitResult(job=job, created=True)

    def resolve_company(self, db: Session, payload: SubmissionPayload) -> Company | None:
        name = payload.company_name.strip()
        if not name:
            return None

        company = find_company_by_name(db, name)
        if company:
            return company

        company = Company(
            name=name,
            description=payload.company_description.strip() or None,
            website=payload.company_website.strip() or None,
        )
        db.add(company)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            return find_company_by_name(db, name)
        db.refresh(company)
        return company

    def build_job_fields(self, payload: SubmissionPayload, pricing_tier: str) -> dict:
        now = datetime.utcnow()
        featured = pricing_tier in self.tables.featured_tiers
        salary_min, salary_max = salary_bounds(payload, self.tables)

        category = self.taxonomy.correct((payload.category or "").strip().lower())
        if not self.taxonomy.is_valid(category):
            category = self.taxonomy.default_category

        raw_method = (payload.application_method or "").strip().lower()
        method = self.tables.application_method(raw_method)
        application_url = None if raw_method == "indeed" else (payload.application_url.strip() or None)
        application_email = (payload.application_email.strip() or None) if method == "email" else None

        return {
            "title": payload.job_title.strip(),
            "description": payload.job_description,
            "requirements": payload.requirements,
            "location": payload.location_address.strip(),
            "location_type": self.tables.location_type(payload.location_type),
            "job_type": self.tables.job_type(payload.primary_job_type),
            "category": category,
            "salary_min": salary_min,
            "salary_max": salary_max,
            "salary_is_estimated": payload.salary_is_estimated,
            "application_method": method,
            "application_url": application_url,
            "application_email": application_email,
            "highlights": payload.highlight_list,
            "is_featured": featured,
            "featured_until": now + timedelta(days=self.tables.featured_days) if featured else None,
            "featured_order": int(time.time()) if featured else 0,
            "status": "approved",
            "expires_at": now + timedelta(days=self.tables.listing_days),
        }

    def _notify(self, db: Session, job: Job, employer_id: str | None) -> None:
        try:
            payload = self.notifier.build_payload(
                {
                    "title": job.title,
                    "company": job.company.name if job.company else None,
                    "location": job.location,
                    "location_type": job.location_type,
                    "job_type": job.job_type,
                    "category": job.category,
                    "salary_min": job.salary_min,
                    "salary_max": job.salary_max,
                    "salary_is_estimated": job.salary_is_estimated,
                    "is_featured": job.is_featured,
                    "expires_at": job.expires_at,
                    "url": job.application_url,
                },
                employer_id,
            )
            ok, msg = self.notifier.send(payload)
            db.add(
                Notification(
                    job_id=job.id,
                    employer_id=employer_id,
                    channel="webhook",
                    mode="confirmation",
                    status="sent" if ok else "failed",
                    error="" if ok else msg,
                )
            )
            db.commit()
            if not ok:
                logger.warning(f"confirmation for job {job.id} not sent: {msg}")
        except Exception as exc:  # noqa: BLE001
            db.rollback()
            logger.error(f"confirmation for job {job.id} failed: {exc}")

    def _trigger_analysis(self, job_id: int) -> None:
        if self.analysis_trigger is None:
            return
        try:
            self.analysis_trigger(job_id)
        except Exception as exc:  # noqa: BLE001
            logger.error(f"analysis trigger for job {job_id} failed: {exc}")

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jobboard.db.database import Base
from jobboard.models.company import Company


class Job(Base):
    __tablename__ = "jobs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    # One job per payment session; the unique index turns a duplicate webhook race into an IntegrityError.
    payment_id: Mapped[Optional[str]] = mapped_column(String(256), unique=True, nullable=True)
    employer_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    company_id: Mapped[Optional[int]] = mapped_column(ForeignKey("companies.id"), nullable=True)

    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    requirements: Mapped[str] = mapped_column(Text, default="", nullable=False)
    location: Mapped[str] = mapped_column(String(256), default="", nullable=False)
    location_type: Mapped[str] = mapped_column(String(16), default="onsite", nullable=False)
    job_type: Mapped[str] = mapped_column(String(16), default="full-time", nullable=False)
    category: Mapped[str] = mapped_column(String(64), default="machine-learning", nullable=False, index=True)

    salary_min: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    salary_max: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    salary_is_estimated: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    application_method: Mapped[str] = mapped_column(String(16), default="external", nullable=False)
    application_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    application_email: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    highlights: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    featured_until: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    featured_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    status: Mapped[str] = mapped_column(String(32), default="approved", nullable=False, index=True)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    ai_focus_percentage: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    ai_focus_rationale: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ai_focus_confidence: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    ai_focus_analysed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    company: Mapped[Optional[Company]] = relationship(Company, lazy="joined")

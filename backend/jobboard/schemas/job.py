from __future__ import annotations
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

LocationType = Literal["in-person", "fully-remote", "hybrid", "on-the-road"]
JobTypeValue = Literal["full-time", "part-time", "permanent", "fixed-term", "contract", "casual", "internship", "graduate"]
PayType = Literal["fixed", "range", "maximum", "minimum"]
PayPeriod = Literal["hour", "day", "week", "month", "year"]
ApplicationMethod = Literal["external", "email"]


class ExtractedJobRecord(BaseModel):
    job_title: str = Field(alias="jobTitle", min_length=1)
    location_address: str = Field("Australia", alias="locationAddress")
    location_type: LocationType = Field("in-person", alias="locationType")
    job_types: list[JobTypeValue] = Field(default_factory=lambda: ["full-time"], alias="jobTypes", max_length=4)

    pay_type: Optional[PayType] = Field(None, alias="payType")
    pay_range_min: Optional[float] = Field(None, alias="payRangeMin")
    pay_range_max: Optional[float] = Field(None, alias="payRangeMax")
    pay_amount: Optional[float] = Field(None, alias="payAmount")
    pay_period: Optional[PayPeriod] = Field(None, alias="payPeriod")
    salary_is_estimated: bool = Field(False, alias="salaryIsEstimated")

    highlight1: str = Field("", max_length=80)
    highlight2: str = Field("", max_length=80)
    highlight3: str = Field("", max_length=80)

    job_description: str = Field("", alias="jobDescription")
    requirements: str = ""

    application_method: ApplicationMethod = Field("external", alias="applicationMethod")
    application_url: str = Field("", alias="applicationUrl")
    application_email: str = Field("", alias="applicationEmail")

    company_name: str = Field("", alias="companyName")
    company_website: str = Field("", alias="companyWebsite")

    category: str = "machine-learning"
    ai_focus_percentage: int = Field(50, alias="aiFocusPercentage", ge=0, le=100)

    class Config:
        populate_by_name = True


class SubmissionPayload(BaseModel):
    """Form payload captured before payment; shaped like ExtractedJobRecord but edited by a human."""

    job_title: str = Field(alias="jobTitle", min_length=1)
    location_address: str = Field("", alias="locationAddress")
    location_type: Optional[str] = Field(None, alias="locationType")
    job_types: list[str] = Field(default_factory=list, alias="jobTypes")
    job_type: Optional[str] = Field(None, alias="jobType")

    pay_type: Optional[str] = Field(None, alias="payType")
    pay_range_min: Optional[float] = Field(None, alias="payRangeMin")
    pay_range_max: Optional[float] = Field(None, alias="payRangeMax")
    pay_amount: Optional[float] = Field(None, alias="payAmount")
    pay_period: Optional[str] = Field(None, alias="payPeriod")
    salary_is_estimated: bool = Field(False, alias="salaryIsEstimated")

    highlight1: str = ""
    highlight2: str = ""
    highlight3: str = ""
    highlights: list[str] = Field(default_factory=list)

    job_description: str = Field("", alias="jobDescription")
    requirements: str = ""

    application_method: str = Field("external", alias="applicationMethod")
    application_url: str = Field("", alias="applicationUrl")
    application_email: str = Field("", alias="applicationEmail")

    company_name: str = Field("", alias="companyName")
    company_website: str = Field("", alias="companyWebsite")
    company_description: str = Field("", alias="companyDescription")

    category: Optional[str] = None
    ai_focus_percentage: Optional[int] = Field(None, alias="aiFocusPercentage")

    class Config:
        populate_by_name = True
        extra = "ignore"

    @property
    def primary_job_type(self) -> Optional[str]:
        if self.job_types:
            return self.job_types[0]
        return self.job_type

    @property
    def highlight_list(self) -> list[str]:
        if self.highlights:
            return [h for h in self.highlights if h]
        return [h for h in (self.highlight1, self.highlight2, self.highlight3) if h]


class CompanyOut(BaseModel):
    id: int
    name: str
    website: str | None
    description: str | None

    class Config:
        from_attributes = True


class JobOut(BaseModel):
    id: int
    payment_id: str | None
    title: str
    description: str
    requirements: str
    location: str
    location_type: str
    job_type: str
    category: str
    salary_min: int | None
    salary_max: int | None
    salary_is_estimated: bool
    application_method: str
    application_url: str | None
    application_email: str | None
    highlights: list[str]
    is_featured: bool
    featured_until: datetime | None
    status: str
    expires_at: datetime | None
    ai_focus_percentage: int | None
    ai_focus_confidence: str | None
    created_at: datetime
    company: CompanyOut | None = None

    class Config:
        from_attributes = True

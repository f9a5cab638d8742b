from __future__ import annotations
from pydantic import BaseModel, model_validator


class TaxonomyConfig(BaseModel):
    categories: dict[str, str]
    default_category: str
    legacy_categories: list[str] = []
    aliases: dict[str, str] = {}

    @model_validator(mode="after")
    def _targets_known(self):
        if self.default_category not in self.categories:
            raise ValueError(f"default_category {self.default_category!r} is not a category")
        unknown = sorted({v for v in self.aliases.values() if v not in self.categories})
        if unknown:
            raise ValueError(f"aliases point at unknown categories: {', '.join(unknown)}")
        return self


class CommitTablesConfig(BaseModel):
    location_types: dict[str, str]
    default_location_type: str = "onsite"
    job_types: dict[str, str]
    default_job_type: str = "full-time"
    application_methods: dict[str, str] = {"external": "external", "email": "email"}
    pay_period_multipliers: dict[str, int]
    featured_tiers: list[str] = ["featured", "annual"]
    featured_days: int = 3
    listing_days: int = 30

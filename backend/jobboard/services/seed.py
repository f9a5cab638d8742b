from __future__ import annotations

from datetime import datetime

from jobboard.db.database import SessionLocal
from jobboard.models.setting import Setting


def default_taxonomy_config() -> dict:
    return {
        "categories": {
            "ai-ml-architect": "AI/ML Architect",
            "ai-governance": "AI Governance",
            "ai-automation": "AI Automation",
            "analyst": "Analyst",
            "annotation": "Annotation",
            "computer-vision": "Computer Vision",
            "data-engineer": "Data Engineer",
            "data-science": "Data Science",
            "engineering": "Engineering",
            "infrastructure": "Infrastructure",
            "machine-learning": "Machine Learning",
            "marketing": "Marketing",
            "product": "Product",
            "quality-assurance": "Quality Assurance",
            "sales": "Sales",
            "software-development": "Software Development",
            "strategy-transformation": "Strategy & Transformation",
            "teaching-research": "Teaching & Research",
        },
        "default_category": "machine-learning",
        "legacy_categories": ["ai", "ml", "research"],
        # Near-miss slugs the classifier model tends to invent.
        "aliases": {
            "data-analyst": "analyst",
            "data-analytics": "analyst",
            "data-engineering": "data-engineer",
            "ai-safety": "ai-governance",
            "ai-security": "ai-governance",
            "ai-ethics": "ai-governance",
            "qa-engineer": "quality-assurance",
            "qa-engineering": "quality-assurance",
            "talent-acquisition": "product",
            "hr": "product",
            "ai-enablement": "strategy-transformation",
            "consulting": "strategy-transformation",
            "devops": "infrastructure",
            "cloud": "infrastructure",
            "nlp": "machine-learning",
            "deep-learning": "machine-learning",
            "mlops": "machine-learning",
            "research": "teaching-research",
        },
    }


def default_commit_tables() -> dict:
    return {
        "location_types": {
            "fully-remote": "remote",
            "in-person": "onsite",
            "hybrid": "hybrid",
            "on-the-road": "onsite",
        },
        "default_location_type": "onsite",
        "job_types": {
            "full-time": "full-time",
            "part-time": "part-time",
            "permanent": "full-time",
            "fixed-term": "contract",
            "subcontract": "contract",
            "casual": "part-time",
            "temp-to-perm": "contract",
            "contract": "contract",
            "internship": "internship",
            "volunteer": "internship",
            "graduate": "full-time",
        },
        "default_job_type": "full-time",
        "application_methods": {
            "external": "external",
            "email": "email",
            "indeed": "external",
        },
        "pay_period_multipliers": {
            "hour": 2080,
            "day": 260,
            "week": 52,
            "month": 12,
            "year": 1,
        },
        "featured_tiers": ["featured", "annual"],
        "featured_days": 3,
        "listing_days": 30,
    }


def seed_settings_if_empty() -> None:
    db = SessionLocal()
    try:
        keys = {s.key for s in db.query(Setting).all()}
        if "taxonomy" not in keys:
            db.add(Setting(key="taxonomy", value=default_taxonomy_config(), updated_at=datetime.utcnow()))
        if "commit_tables" not in keys:
            db.add(Setting(key="commit_tables", value=default_commit_tables(), updated_at=datetime.utcnow()))
        db.commit()
    finally:
        db.close()

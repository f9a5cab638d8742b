from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.orm import Session

from jobboard.models.setting import Setting
from jobboard.services.seed import default_commit_tables, default_taxonomy_config


@dataclass(frozen=True)
class Taxonomy:
    categories: dict[str, str]
    default_category: str = "machine-learning"
    legacy_categories: tuple[str, ...] = ()
    aliases: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_config(cls, cfg: dict) -> "Taxonomy":
        return cls(
            categories=dict(cfg["categories"]),
            default_category=cfg.get("default_category", "machine-learning"),
            legacy_categories=tuple(cfg.get("legacy_categories") or ()),
            aliases=dict(cfg.get("aliases") or {}),
        )

    @property
    def slugs(self) -> list[str]:
        return list(self.categories)

    def is_valid(self, slug: str) -> bool:
        return slug in self.categories

    def correct(self, slug: str) -> str:
        return self.aliases.get(slug, slug)


@dataclass(frozen=True)
class CommitTables:
    location_types: dict[str, str]
    job_types: dict[str, str]
    application_methods: dict[str, str]
    pay_period_multipliers: dict[str, int]
    default_location_type: str = "onsite"
    default_job_type: str = "full-time"
    featured_tiers: tuple[str, ...] = ("featured", "annual")
    featured_days: int = 3
    listing_days: int = 30

    @classmethod
    def from_config(cls, cfg: dict) -> "CommitTables":
        return cls(
            location_types=dict(cfg["location_types"]),
            job_types=dict(cfg["job_types"]),
            application_methods=dict(cfg.get("application_methods") or {"external": "external", "email": "email"}),
            pay_period_multipliers={k: int(v) for k, v in cfg["pay_period_multipliers"].items()},
            default_location_type=cfg.get("default_location_type", "onsite"),
            default_job_type=cfg.get("default_job_type", "full-time"),
            featured_tiers=tuple(cfg.get("featured_tiers") or ()),
            featured_days=int(cfg.get("featured_days", 3)),
            listing_days=int(cfg.get("listing_days", 30)),
        )

    def location_type(self, value: str | None) -> str:
        return self.location_types.get(value or "", self.default_location_type)

    def job_type(self, value: str | None) -> str:
        return self.job_types.get(value or "", self.default_job_type)

    def application_method(self, value: str | None) -> str:
        return self.application_methods.get(value or "", "external")

    def annualise(self, amount: float, period: str | None) -> int:
        return int(round(amount * self.pay_period_multipliers.get(period or "year", 1)))


def get_setting(db: Session, key: str) -> dict:
    row = db.query(Setting).filter(Setting.key == key).first()
    if row:
        return row.value
    if key == "taxonomy":
        return default_taxonomy_config()
    if key == "commit_tables":
        return default_commit_tables()
    return {}


def upsert_setting(db: Session, key: str, value: dict) -> dict:
    row = db.query(Setting).filter(Setting.key == key).first()
    if row:
        row.value = value
        row.updated_at = datetime.utcnow()
    else:
        row = Setting(key=key, value=value, updated_at=datetime.utcnow())
        db.add(row)
    db.commit()
    db.refresh(row)
    return row.value


def load_taxonomy(db: Session | None = None) -> Taxonomy:
    cfg = get_setting(db, "taxonomy") if db is not None else default_taxonomy_config()
    return Taxonomy.from_config(cfg)


def load_commit_tables(db: Session | None = None) -> CommitTables:
    cfg = get_setting(db, "commit_tables") if db is not None else default_commit_tables()
    return CommitTables.from_config(cfg)

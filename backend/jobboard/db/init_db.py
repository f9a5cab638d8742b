from __future__ import annotations
from jobboard.db.database import Base, engine
from jobboard.models import company, job, notification, payment_session, setting
from jobboard.services.seed import seed_settings_if_empty


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
    seed_settings_if_empty()

from __future__ import annotations
from jobboard.models.company import Company
from jobboard.models.job import Job
from jobboard.models.notification import Notification
from jobboard.models.payment_session import PaymentSession
from jobboard.models.setting import Setting

__all__ = ["Company", "Job", "Notification", "PaymentSession", "Setting"]

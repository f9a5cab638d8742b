from __future__ import annotations
from datetime import datetime

import httpx


class ConfirmationNotifier:
    TITLE_MAX = 110

    def __init__(self, webhook_url: str):
        self.webhook_url = webhook_url

    @classmethod
    def build_payload(cls, job: dict, employer_id: str | None = None) -> dict:
        expires_at = job.get("expires_at")
        if isinstance(expires_at, datetime):
            expires_text = expires_at.strftime("%Y-%m-%d")
        else:
            expires_text = str(expires_at or "N/A")

        job_title = " ".join(str(job.get("title") or "").splitlines()[0].split()) if job.get("title") else "N/A"
        if len(job_title) > cls.TITLE_MAX:
            job_title = f"{job_title[: cls.TITLE_MAX - 3]}..."

        salary_min = job.get("salary_min")
        salary_max = job.get("salary_max")
        if salary_min or salary_max:
            salary_text = f"{salary_min or '?'} - {salary_max or '?'} AUD/year"
            if job.get("salary_is_estimated"):
                salary_text += " (estimated)"
        else:
            salary_text = "N/A"

        desc = (
            f"**Company:** {job.get('company') or 'N/A'}\n"
            f"**Location:** {job.get('location') or 'N/A'} ({job.get('location_type') or 'N/A'})\n"
            f"**Type:** {job.get('job_type') or 'N/A'}\n"
            f"**Category:** {job.get('category') or 'N/A'}\n"
            f"**Salary:** {salary_text}\n"
            f"**Featured:** {'yes' if job.get('is_featured') else 'no'}\n"
            f"**Live until:** {expires_text}\n"
            f"**Employer:** {employer_id or 'N/A'}"
        )
        return {
            "content": f"Job listing is live: {job_title}",
            "embeds": [
                {
                    "title": job_title,
                    "description": desc,
                    "url": job.get("url") or "",
                }
            ],
        }

    def send(self, payload: dict) -> tuple[bool, str]:
        if not self.webhook_url:
            return False, "webhook not configured"
        try:
            with httpx.Client(timeout=20) as client:
                resp = client.post(self.webhook_url, json=payload)
                if resp.status_code >= 300:
                    return False, f"webhook status={resp.status_code} body={resp.text[:300]}"
            return True, "ok"
        except Exception as exc:  # noqa: BLE001
            return False, str(exc)

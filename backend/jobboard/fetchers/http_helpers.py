from __future__ import annotations
import httpx

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}


def fetch_html(url: str, timeout: float = 20) -> str:
    with httpx.Client(timeout=timeout, follow_redirects=True, headers=BROWSER_HEADERS) as client:
        resp = client.get(url)
        resp.raise_for_status()
        return resp.text


def fetch_text(url: str, timeout: float = 20) -> str:
    with httpx.Client(timeout=timeout, follow_redirects=True, headers={"Accept": "text/plain"}) as client:
        resp = client.get(url)
        resp.raise_for_status()
        return resp.text

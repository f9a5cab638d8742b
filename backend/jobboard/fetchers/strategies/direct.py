from __future__ import annotations

from jobboard.fetchers.base import FetchStrategy
from jobboard.fetchers.http_helpers import fetch_html
from jobboard.fetchers.text import html_to_text


class DirectFetchStrategy(FetchStrategy):
    name = "direct"

    def __init__(self, timeout: float = 20, min_main_chars: int = 200):
        self.timeout = timeout
        self.min_main_chars = min_main_chars

    def fetch(self, url: str) -> str:
        html = fetch_html(url, timeout=self.timeout)
        return html_to_text(html, min_main_chars=self.min_main_chars)

from __future__ import annotations

from jobboard.fetchers.base import FetchStrategy
from jobboard.fetchers.http_helpers import fetch_text
from jobboard.fetchers.text import strip_markdown


class ReaderProxyStrategy(FetchStrategy):
    """Renders JS-heavy pages through a reader proxy that answers with markdown."""

    name = "reader"

    def __init__(self, base_url: str, timeout: float = 20):
        self.base_url = base_url
        self.timeout = timeout

    def fetch(self, url: str) -> str:
        return strip_markdown(fetch_text(f"{self.base_url}{url}", timeout=self.timeout))

from __future__ import annotations
from collections.abc import Sequence

from loguru import logger

from jobboard.core.config import settings
from jobboard.core.errors import FetchError
from jobboard.fetchers.base import FetchStrategy, RawContent
from jobboard.fetchers.registry import default_strategies
from jobboard.fetchers.text import collapse_whitespace, truncate

BLOCKED_MESSAGE = "Could not extract meaningful text from the page. The site may block automated requests."


class ContentFetcher:
    def __init__(
        self,
        strategies: Sequence[FetchStrategy] | None = None,
        min_chars: int | None = None,
        max_chars: int | None = None,
    ):
        self.strategies = list(strategies) if strategies is not None else default_strategies()
        self.min_chars = settings.fetch_min_chars if min_chars is None else min_chars
        self.max_chars = settings.fetch_max_chars if max_chars is None else max_chars

    def accept(self, text: str) -> bool:
        return len(text) >= self.min_chars

    def normalize(self, text: str) -> tuple[str, bool]:
        return truncate(collapse_whitespace(text), self.max_chars)

    def fetch(self, url: str) -> RawContent:
        for strategy in self.strategies:
            try:
                raw = strategy.fetch(url)
            except Exception as exc:  # noqa: BLE001
                logger.warning(f"fetch strategy={strategy.name} failed for {url}: {exc}")
                continue

            text, capped = self.normalize(raw)
            if self.accept(text):
                logger.info(f"fetch strategy={strategy.name} url={url} chars={len(text)} capped={capped}")
                return RawContent(text=text, source_url=url, length_capped=capped)
            logger.info(f"fetch strategy={strategy.name} under-delivered for {url} ({len(text)} chars)")

        raise FetchError(BLOCKED_MESSAGE)

from __future__ import annotations
from jobboard.core.config import settings
from jobboard.fetchers.base import FetchStrategy
from jobboard.fetchers.strategies.direct import DirectFetchStrategy
from jobboard.fetchers.strategies.reader import ReaderProxyStrategy


def default_strategies() -> list[FetchStrategy]:
    # Order matters: the reader proxy is slower and billed, so it only runs when direct fetching falls short.
    return [
        DirectFetchStrategy(timeout=settings.fetch_timeout_seconds, min_main_chars=settings.main_content_min_chars),
        ReaderProxyStrategy(settings.reader_base_url, timeout=settings.fetch_timeout_seconds),
    ]

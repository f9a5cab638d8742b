from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class RawContent:
    text: str
    source_url: str
    length_capped: bool = False


class FetchStrategy:
    """One way of turning a URL into page text. Raise on failure; short text is judged by the caller."""

    name: str

    def fetch(self, url: str) -> str:
        raise NotImplementedError

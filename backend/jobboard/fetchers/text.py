from __future__ import annotations
import re

from bs4 import BeautifulSoup

NON_CONTENT_SELECTORS = (
    "script, style, nav, header, footer, iframe, noscript, svg, form, "
    "[role=navigation], [role=banner], [role=contentinfo]"
)
MAIN_CONTENT_SELECTORS = ("main", "[role=main]", "article", ".job-description", ".job-details", "#job-content")

_MARKDOWN_RULES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"```.*?```", re.S), ""),
    (re.compile(r"!\[([^\]]*)\]\([^)]+\)"), ""),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (re.compile(r"^#{1,6}\s+", re.M), ""),
    (re.compile(r"(\*{1,3})(.*?)\1"), r"\2"),
    (re.compile(r"(?<!\w)(_{1,3})(.+?)\1(?!\w)"), r"\2"),
    (re.compile(r"`([^`]+)`"), r"\1"),
    (re.compile(r"^[-*_]{3,}\s*$", re.M), ""),
    (re.compile(r"^>\s+", re.M), ""),
    (re.compile(r"^\s*[-*+]\s+", re.M), "- "),
    (re.compile(r"^\s*\d+\.\s+", re.M), ""),
]


def collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text or "").strip()


def truncate(text: str, max_chars: int) -> tuple[str, bool]:
    if len(text) > max_chars:
        return text[:max_chars], True
    return text, False


def strip_markdown(md: str) -> str:
    text = md or ""
    for pattern, repl in _MARKDOWN_RULES:
        text = pattern.sub(repl, text)
    return text


def html_to_text(html: str, min_main_chars: int = 200) -> str:
    soup = BeautifulSoup(html or "", "html.parser")
    for node in soup.select(NON_CONTENT_SELECTORS):
        node.decompose()

    for selector in MAIN_CONTENT_SELECTORS:
        el = soup.select_one(selector)
        if el is None:
            continue
        text = el.get_text(" ", strip=True)
        if len(text) > min_main_chars:
            return text

    body = soup.body or soup
    return body.get_text(" ", strip=True)

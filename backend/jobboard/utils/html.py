from __future__ import annotations
import re

from bs4 import BeautifulSoup

ALLOWED_TAGS = {"p", "ul", "ol", "li", "strong", "em", "b", "i", "br", "h3", "h4"}
DROPPED_TAGS = ["script", "style", "iframe", "object", "embed", "noscript", "svg", "form"]

# Pictographs, dingbats, flags and the joiners/selectors that glue them together.
EMOJI_RE = re.compile(
    "[\U0001F000-\U0001FAFF\U00002600-\U000027BF\U0001F1E6-\U0001F1FF\u200d\ufe0f\u20e3]"
)
DASHES_RE = re.compile(r"\s*[—–]\s*")


def sanitize_html(fragment: str) -> str:
    if not fragment or not fragment.strip():
        return ""

    soup = BeautifulSoup(fragment, "html.parser")
    for node in soup.find_all(DROPPED_TAGS):
        node.decompose()

    has_markup = False
    for tag in soup.find_all(True):
        if tag.name in ALLOWED_TAGS:
            tag.attrs = {}
            has_markup = True
        else:
            tag.unwrap()

    html = str(soup).strip()
    if not has_markup and html:
        html = f"<p>{html}</p>"
    return html


def clean_highlight(text: str, max_len: int = 80) -> str:
    cleaned = EMOJI_RE.sub("", text or "")
    cleaned = DASHES_RE.sub(" - ", cleaned)
    cleaned = " ".join(cleaned.split())
    return cleaned[:max_len].strip()

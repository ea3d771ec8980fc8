import re
from typing import NamedTuple

from bs4 import BeautifulSoup

DEFAULT_TITLE = "Untitled Website"
MAX_CONTENT_CHARS = 8000
MIN_CONTENT_CHARS = 100

NOISE_SELECTOR = (
    "script, style, nav, header, footer, aside, "
    ".nav, .navigation, .menu, .sidebar, .ads, .advertisement"
)

# Order matters: the first container with any text wins, nothing is merged.
CONTENT_SELECTORS = (
    "main",
    "article",
    ".content",
    ".main-content",
    ".post-content",
    ".entry-content",
    "#content",
    "#main",
    "body",
)

_WHITESPACE_RE = re.compile(r"\s+")
_BLANK_LINES_RE = re.compile(r"\n\s*\n")


class ExtractedContent(NamedTuple):
    title: str
    text: str


def extract_content(html: str) -> ExtractedContent:
    """Return the page title and a bounded plain-text excerpt of its main content."""
    soup = BeautifulSoup(html, "html.parser")

    title_tag = soup.find("title")
    title = title_tag.get_text().strip() if title_tag else ""

    for element in soup.select(NOISE_SELECTOR):
        # extract() tolerates nested matches whose parent was already removed
        element.extract()

    main_text = ""
    for selector in CONTENT_SELECTORS:
        element = soup.select_one(selector)
        if element is None:
            continue
        candidate = element.get_text()
        if candidate.strip():
            main_text = candidate
            break

    if not main_text:
        if soup.head is not None:
            soup.head.extract()
        main_text = soup.get_text()

    return ExtractedContent(
        title=title or DEFAULT_TITLE,
        text=clean_text(main_text)[:MAX_CONTENT_CHARS],
    )


def clean_text(text: str) -> str:
    collapsed = _WHITESPACE_RE.sub(" ", text)
    return _BLANK_LINES_RE.sub("\n", collapsed).strip()


def has_meaningful_text(content: ExtractedContent) -> bool:
    return len(content.text) >= MIN_CONTENT_CHARS

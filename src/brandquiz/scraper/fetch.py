"""Fetch a web page and reduce it to prompt-sized plain text."""

from dataclasses import dataclass, field

import requests
from bs4 import BeautifulSoup

USER_AGENT = "Mozilla/5.0 (compatible; brandquiz/0.1)"
STRIPPED_TAGS = ["script", "style", "nav", "footer", "header", "noscript", "iframe", "svg"]
MAX_HEADINGS = 20
MAX_HEADING_LENGTH = 200
MIN_PARAGRAPH_LENGTH = 20
MAX_PARAGRAPH_LENGTH = 2000
MAX_BODY_CHARS = 12000
TRUNCATION_MARKER = "\n\n[Content truncated]"


@dataclass
class ExtractedContent:
    title: str = ""
    description: str = ""
    headings: list[str] = field(default_factory=list)
    body_text: str = ""
    full_text: str = ""


def normalize_url(url: str) -> str:
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        url = f"https://{url}"
    return url


def _meta_content(soup: BeautifulSoup, **attrs: str) -> str:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return ""
    return (tag.get("content") or "").strip()


def extract_content(html: str, max_chars: int = 16000) -> ExtractedContent:
    """
    Pull title, meta description, headings and body paragraphs out of HTML.

    ``full_text`` joins the non-empty parts and is cut at ``max_chars``
    with a truncation marker appended.
    """
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(STRIPPED_TAGS):
        tag.decompose()

    title = soup.title.get_text(strip=True) if soup.title else ""
    title = title or _meta_content(soup, property="og:title")

    description = _meta_content(soup, name="description") or _meta_content(
        soup, property="og:description"
    )

    headings = []
    for heading in soup.find_all(["h1", "h2", "h3"]):
        text = heading.get_text(" ", strip=True)
        if text and len(text) < MAX_HEADING_LENGTH:
            headings.append(text)
    headings = headings[:MAX_HEADINGS]

    paragraphs = []
    for element in soup.find_all(["p", "li", "td", "blockquote"]):
        text = element.get_text(" ", strip=True)
        if MIN_PARAGRAPH_LENGTH < len(text) < MAX_PARAGRAPH_LENGTH:
            paragraphs.append(text)
    body_text = "\n\n".join(paragraphs)

    parts = []
    if title:
        parts.append(f"Title: {title}")
    if description:
        parts.append(f"Description: {description}")
    if headings:
        parts.append("Headings:\n" + "\n".join(headings))
    if body_text:
        parts.append(f"Content:\n{body_text}")

    full_text = "\n\n".join(parts)
    if len(full_text) > max_chars:
        full_text = full_text[:max_chars] + TRUNCATION_MARKER

    return ExtractedContent(
        title=title,
        description=description,
        headings=headings,
        body_text=body_text[:MAX_BODY_CHARS],
        full_text=full_text,
    )


class WebsiteTextExtractor:
    """Text-extraction collaborator backed by requests and BeautifulSoup."""

    def __init__(self, timeout: float = 10.0, max_chars: int = 16000):
        self.timeout = timeout
        self.max_chars = max_chars

    def extract(self, url: str) -> str:
        """
        Fetch ``url`` and return its plain text.

        Raises:
            requests.RequestException: On network errors or a non-2xx status
        """
        response = requests.get(
            normalize_url(url),
            headers={
                "User-Agent": USER_AGENT,
                "Accept": "text/html,application/xhtml+xml",
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        return extract_content(response.text, self.max_chars).full_text

"""Extract the readable body text and title from an HTML page."""
from __future__ import annotations

from bs4 import BeautifulSoup

from med_quiz.text import normalize_text

NON_CONTENT_TAGS = (
    "script", "style", "noscript", "nav", "footer", "header",
    "svg", "iframe", "form", "button", "input", "aside",
)


def extract_main_text(html: str) -> tuple[str, str]:
    """Return ``(title, text)`` for *html*, preferring ``<main>``/``<article>`` content."""
    soup = BeautifulSoup(html, "html.parser")
    title_tag = soup.find("title")
    title = title_tag.get_text().strip() if title_tag else ""

    for tag in soup(list(NON_CONTENT_TAGS)):
        tag.decompose()

    root = (
        soup.find("main")
        or soup.find("article")
        or soup.find(attrs={"role": "main"})
        or soup.body
        or soup
    )
    return title, normalize_text(root.get_text(separator=" "))

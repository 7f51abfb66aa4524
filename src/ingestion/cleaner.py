"""Text cleaning for HTML reference documents (filings, press releases, articles)."""

import re

from bs4 import BeautifulSoup

# Containers that usually hold the body of a filing or article page
CONTENT_SELECTORS = [
    ("article", {}),
    ("main", {}),
    ("div", {"id": "article"}),
    ("div", {"id": "content"}),
]


def clean_html_text(html: str) -> str:
    """Extract and clean readable text from an HTML document.

    Prefers the main article container, strips navigation and script
    artifacts, flattens tables into a single marked line each, and
    normalizes whitespace while preserving paragraph breaks.
    """
    soup = BeautifulSoup(html, "html.parser")

    article = None
    for name, attrs in CONTENT_SELECTORS:
        article = soup.find(name, attrs=attrs)
        if article:
            break
    if not article:
        article = soup.body or soup
        if not article:
            return ""

    for tag in article.find_all(["script", "style", "nav", "footer", "header", "noscript"]):
        tag.decompose()

    # Financial tables carry figures the model needs; keep them on one line
    for table in article.find_all("table"):
        table_text = table.get_text(separator=" | ", strip=True)
        if table_text:
            table.replace_with(f"\n[Table: {table_text}]\n")
        else:
            table.decompose()

    text = article.get_text(separator="\n", strip=False)
    text = normalize_whitespace(text)
    return text.strip()


def normalize_whitespace(text: str) -> str:
    """Normalize whitespace while preserving paragraph breaks."""
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n +\n", "\n\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text

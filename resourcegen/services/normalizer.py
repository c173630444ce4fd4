"""Text normalisation utilities: slugs, kebab-case tags and plain-text summaries."""

import re
import unicodedata

from bs4 import BeautifulSoup

# camelCase boundary, e.g. "pullQuote" -> "pull-Quote"
_CAMEL_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def kebab_case(value: str) -> str:
    """Lowercase *value* and join its words with single hyphens (``"Pull Quote"`` -> ``"pull-quote"``)."""
    value = _CAMEL_RE.sub("-", value.strip())
    return _NON_ALNUM_RE.sub("-", value.lower()).strip("-")


def generate_slug(title: str, fallback: str = "post") -> str:
    """Generate a clean URL slug from *title*.

    The slug is lowercased, ASCII-only, and uses hyphens as separators.
    """
    slug = unicodedata.normalize("NFKD", title or "")
    slug = slug.encode("ascii", "ignore").decode("ascii")
    slug = _NON_ALNUM_RE.sub("-", slug.lower()).strip("-")
    return slug or fallback


def plain_text(html: str) -> str:
    """Return the visible text of an HTML fragment with whitespace collapsed."""
    if not html:
        return ""
    text = BeautifulSoup(html, "lxml").get_text(separator=" ", strip=True)
    return " ".join(text.split())


def summarize(html: str, limit: int = 160) -> str:
    """Plain-text summary of *html*, cut to *limit* characters with a trailing ellipsis."""
    text = plain_text(html)
    if not text:
        return ""
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "…"

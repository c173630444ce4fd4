"""Derived per-page values: SEO metadata, author, dates, FAQ data and result blocks."""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence

from resourcegen.models.metadata import AuthorProfile, FaqPair, SeoMetadata
from resourcegen.services.markup import escape_html, img_tag
from resourcegen.services.resolver import (
    Entity,
    Includes,
    asset_url_for,
    fields_of,
    get_field,
    get_text,
    normalize_url,
    resolve_links,
    unwrap,
)
from resourcegen.services.rich_text import flatten_text, is_document

logger = logging.getLogger(__name__)

_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

QUESTION_NODE_TYPES = frozenset(f"heading-{level}" for level in range(2, 7))
ANSWER_NODE_TYPES = frozenset({"paragraph", "unordered-list", "ordered-list"})


def _optional_bool(value: Any) -> Optional[bool]:
    return None if value is None else bool(value)


def get_seo(
    seo_entity: Optional[Entity],
    includes: Optional[Includes] = None,
    items: Optional[Sequence[Entity]] = None,
) -> SeoMetadata:
    """Project a resolved SEO component entry; empty metadata when it is absent."""
    fields = fields_of(seo_entity)
    if not fields:
        return SeoMetadata()

    share_images: List[str] = []
    refs = unwrap(get_field(fields, "share_images"))
    for ref in refs if isinstance(refs, list) else []:
        url = asset_url_for(ref, includes)
        if url:
            share_images.append(url)

    return SeoMetadata(
        title=get_text(fields, "seo_title") or None,
        description=get_text(fields, "seo_description") or None,
        canonical_url=get_text(fields, "canonical_url") or None,
        noindex=_optional_bool(get_field(fields, "noindex")),
        nofollow=_optional_bool(get_field(fields, "nofollow")),
        share_images=share_images,
    )


def get_author(
    author_entity: Optional[Entity], includes: Optional[Includes] = None
) -> Optional[AuthorProfile]:
    """Return the author profile, or ``None`` when the entry is absent or has no name."""
    fields = fields_of(author_entity)
    name = get_text(fields, "author_name")
    if not name:
        return None

    bio = get_field(fields, "author_bio")
    if is_document(bio):
        bio = flatten_text(bio)

    return AuthorProfile(
        name=name,
        avatar_url=asset_url_for(get_field(fields, "author_avatar"), includes),
        bio=bio.strip() if isinstance(bio, str) else "",
        role_company=get_text(fields, "author_role"),
    )


def render_author_card(author: Optional[AuthorProfile]) -> str:
    if author is None:
        return ""
    avatar = img_tag(author.avatar_url, "", "blog-author-avatar") if author.avatar_url else ""
    role = (
        f'<span class="blog-author-role">{escape_html(author.role_company)}</span>'
        if author.role_company
        else ""
    )
    bio = f'<p class="blog-author-bio">{escape_html(author.bio)}</p>' if author.bio else ""
    return (
        f'<div class="blog-author"><div class="blog-author-inner">{avatar}'
        f'<div><span class="blog-author-name">{escape_html(author.name)}</span>{role}{bio}</div>'
        f"</div></div>"
    )


def get_featured_image_url(page_entity: Optional[Entity], includes: Optional[Includes] = None) -> str:
    """Resolve ``featuredImage`` (or ``featured_image``) to an absolute URL, or ``""``."""
    value = get_field(fields_of(page_entity), "featured_image")
    if isinstance(value, str):
        return normalize_url(value)
    return asset_url_for(value, includes)


def parse_date(value: Any) -> Optional[date]:
    """Parse an ISO 8601 date or datetime string; ``None`` when unparsable."""
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        logger.debug("Unparsable date %r", value)
        return None


def format_published_date(value: Any) -> str:
    """Format an ISO date as ``"Month D, YYYY"`` (English); ``""`` when unparsable."""
    parsed = parse_date(value)
    if parsed is None:
        return ""
    return f"{_MONTHS[parsed.month - 1]} {parsed.day}, {parsed.year}"


def extract_faq_pairs(document: Any) -> List[FaqPair]:
    """Scan a rich-text document's top-level nodes for heading/answer pairs.

    A level 2-6 heading opens a pair; following paragraphs and lists add to its
    answer until the next heading.  Pairs without a question or without any
    answer text are dropped, as is content before the first heading.
    """
    if not is_document(document):
        return []

    pairs: List[FaqPair] = []
    question: Optional[str] = None
    answer_parts: List[str] = []

    def flush() -> None:
        if question and answer_parts:
            pairs.append(FaqPair(question=question, answer=" ".join(answer_parts)))

    for node in document["content"]:
        if not isinstance(node, dict):
            continue
        node_type = node.get("nodeType")
        if node_type in QUESTION_NODE_TYPES:
            flush()
            question = flatten_text(node)
            answer_parts = []
        elif node_type in ANSWER_NODE_TYPES and question is not None:
            text = flatten_text(node)
            if text:
                answer_parts.append(text)
    flush()
    return pairs


def build_faq_schema(pairs: Sequence[FaqPair]) -> Optional[Dict[str, Any]]:
    """Return a schema.org ``FAQPage`` object for *pairs*, or ``None`` when empty."""
    if not pairs:
        return None
    return {
        "@context": "https://schema.org",
        "@type": "FAQPage",
        "mainEntity": [
            {
                "@type": "Question",
                "name": pair.question,
                "acceptedAnswer": {"@type": "Answer", "text": pair.answer},
            }
            for pair in pairs
        ],
    }


def build_results_from_result_blocks(
    refs: Any,
    includes: Optional[Includes] = None,
    items: Optional[Sequence[Entity]] = None,
) -> str:
    """Render case-study result/metric blocks; blocks with nothing to show are skipped."""
    parts = []
    for entry in resolve_links(refs, includes, items):
        fields = fields_of(entry)
        if not fields:
            continue
        label = get_field(fields, "metric_label")
        value = get_field(fields, "metric_value")
        description = get_text(fields, "metric_description")

        html = ""
        if label or value:
            html += (
                f'<p class="result-metric"><strong>{escape_html(value or "")}</strong> '
                f"{escape_html(label or '')}</p>"
            )
        if description:
            html += f"<p>{escape_html(description)}</p>"
        graph_url = asset_url_for(get_field(fields, "graph_image"), includes)
        if graph_url:
            html += img_tag(graph_url, str(label or "Result"), "results-graph")
        if html:
            parts.append(f'<div class="result-block">{html}</div>')
    return "\n".join(parts)

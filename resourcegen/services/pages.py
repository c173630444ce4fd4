"""Page assembly: turn one fetched entry into a fully rendered page view.

Shared by the static generator and the preview API so drafts render exactly
like published pages.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

from resourcegen.config import Settings
from resourcegen.models.page import BlogPost, CaseStudy
from resourcegen.services.blocks import render_content_blocks
from resourcegen.services.extractors import (
    build_faq_schema,
    build_results_from_result_blocks,
    extract_faq_pairs,
    format_published_date,
    get_author,
    get_featured_image_url,
    get_seo,
    render_author_card,
)
from resourcegen.services.markup import escape_html
from resourcegen.services.normalizer import generate_slug, summarize
from resourcegen.services.resolver import (
    Entity,
    Includes,
    asset_url,
    entity_id,
    fields_of,
    get_field,
    get_text,
    link_id,
    normalize_url,
    resolve_entry,
    resolve_links,
    unwrap,
)
from resourcegen.services.rich_text import first_document, is_document, rich_text_to_html
from resourcegen.services.structured_data import build_article, build_page_graph

logger = logging.getLogger(__name__)

SITE_NAME = "TheSEOPilot"
RESOURCES_PATH = "/resources/"
BLOG_PATH = "/resources/blog/"
CASE_STUDIES_PATH = "/resources/case-studies/"

FAQ_HEADING = "Frequently Asked Questions"


def page_url(settings: Settings, section_path: str, slug: str = "") -> str:
    url = f"{settings.base_url}{section_path}"
    return f"{url}{quote(slug)}/" if slug else url


def entry_slug(entry: Entity, fallback_title: str = "") -> str:
    """The entry's ``slug`` field, else its ID, else a slug generated from its title.

    The result names both the output directory and the page URL, so anything
    that could leave the section directory is re-slugged.
    """
    slug = get_text(fields_of(entry), "slug") or entity_id(entry) or generate_slug(fallback_title)
    if "/" in slug or "\\" in slug or slug.startswith("."):
        return generate_slug(slug)
    return slug


def _resolve_ref(
    entry: Entity, logical_name: str, includes: Optional[Includes], items: Sequence[Entity]
) -> Optional[Entity]:
    return resolve_entry(link_id(get_field(fields_of(entry), logical_name)), includes, items)


def _faq_document(fields: Dict[str, Any], settings: Settings) -> Optional[dict]:
    document = first_document(fields, settings.faq_fields)
    if document and document["content"]:
        return document
    return None


def _text_or_rich(
    value: Any,
    includes: Optional[Includes],
    items: Sequence[Entity],
    settings: Settings,
) -> str:
    value = unwrap(value)
    if is_document(value):
        return rich_text_to_html(value, includes, items, settings)
    if isinstance(value, str) and value.strip():
        return f"<p>{escape_html(value.strip())}</p>"
    return ""


def build_blog_post(
    entry: Entity,
    includes: Optional[Includes],
    items: Optional[Sequence[Entity]] = None,
    settings: Optional[Settings] = None,
) -> BlogPost:
    """Resolve and render every part of a blog post entry."""
    settings = settings or Settings()
    items = items or []
    fields = fields_of(entry)

    title = get_text(fields, "title") or "Untitled"
    slug = entry_slug(entry, title)
    excerpt = get_text(fields, "excerpt")

    body_parts: List[str] = []
    main_content = first_document(fields, settings.content_fields)
    if main_content:
        body_parts.append(rich_text_to_html(main_content, includes, items, settings))
    body_parts.append(
        render_content_blocks(get_field(fields, "content_blocks"), includes, items, settings)
    )
    body = "\n".join(part for part in body_parts if part)
    if not body:
        logger.debug("Blog post %s has no renderable body content", slug)

    faq_document = _faq_document(fields, settings)
    faq_pairs = extract_faq_pairs(faq_document)
    faqs_html = ""
    if faq_document:
        faq_body = rich_text_to_html(faq_document, includes, items, settings)
        if faq_body:
            faqs_html = (
                '<section class="blog-faqs" aria-labelledby="faqs-heading">'
                f'<h2 id="faqs-heading" class="faqs-heading">{FAQ_HEADING}</h2>'
                f'<div class="faq-content blog-content">{faq_body}</div></section>'
            )

    seo = get_seo(_resolve_ref(entry, "seo", includes, items), includes, items)
    seo_title = seo.title or title
    seo_description = seo.description or excerpt
    canonical_url = seo.canonical_url or page_url(settings, BLOG_PATH, slug)

    author = get_author(_resolve_ref(entry, "author", includes, items), includes)
    publish_date = get_text(fields, "published_date")
    featured_image_url = get_featured_image_url(entry, includes)

    article = build_article(
        headline=seo_title,
        url=canonical_url,
        description=seo_description,
        image=featured_image_url or (seo.share_images[0] if seo.share_images else ""),
        date_published=publish_date,
        author_name=author.name if author else "",
        publisher_name=SITE_NAME,
    )
    crumbs = [
        ("Home", page_url(settings, "/")),
        ("Resources", page_url(settings, RESOURCES_PATH)),
        ("Blog", page_url(settings, BLOG_PATH)),
        (title, canonical_url),
    ]

    return BlogPost(
        id=entity_id(entry),
        title=title,
        slug=slug,
        excerpt=excerpt,
        body=body,
        seo=seo,
        seo_title=seo_title,
        seo_description=seo_description,
        canonical_url=canonical_url,
        publish_date=publish_date,
        published_date_formatted=format_published_date(publish_date),
        featured_image_url=featured_image_url,
        author=author,
        author_html=render_author_card(author),
        faq_pairs=faq_pairs,
        faqs_html=faqs_html,
        json_ld=build_page_graph(article, crumbs, build_faq_schema(faq_pairs)),
    )


def _graph_image_urls(
    fields: Dict[str, Any], includes: Optional[Includes], items: Sequence[Entity]
) -> List[str]:
    urls = []
    for field_id in ("graphImage1Url", "graphImage2Url"):
        url = normalize_url(unwrap(fields.get(field_id)))
        if url:
            urls.append(url)
    for asset in resolve_links(fields.get("graphImages"), includes, items):
        url = asset_url(asset)
        if url:
            urls.append(url)
    return urls


def build_case_study(
    entry: Entity,
    includes: Optional[Includes],
    items: Optional[Sequence[Entity]] = None,
    settings: Optional[Settings] = None,
) -> CaseStudy:
    """Resolve and render every part of a case study entry."""
    settings = settings or Settings()
    items = items or []
    fields = fields_of(entry)

    title = get_text(fields, "title") or "Case Study"
    slug = entry_slug(entry, title)

    results_html = build_results_from_result_blocks(
        get_field(fields, "result_blocks"), includes, items
    )
    if not results_html:
        results = get_field(fields, "results")
        if isinstance(results, list):
            results_html = build_results_from_result_blocks(results, includes, items)
        else:
            results_html = _text_or_rich(results, includes, items, settings)

    seo = get_seo(_resolve_ref(entry, "seo", includes, items), includes, items)
    seo_title = seo.title or title
    seo_description = seo.description or summarize(results_html)
    canonical_url = seo.canonical_url or page_url(settings, CASE_STUDIES_PATH, slug)
    featured_image_url = get_featured_image_url(entry, includes)

    article = build_article(
        headline=seo_title,
        url=canonical_url,
        description=seo_description,
        image=featured_image_url or (seo.share_images[0] if seo.share_images else ""),
        date_published=get_text(fields, "published_date"),
        publisher_name=SITE_NAME,
    )
    crumbs = [
        ("Home", page_url(settings, "/")),
        ("Resources", page_url(settings, RESOURCES_PATH)),
        ("Case Studies", page_url(settings, CASE_STUDIES_PATH)),
        (title, canonical_url),
    ]

    return CaseStudy(
        id=entity_id(entry),
        title=title,
        slug=slug,
        client=get_text(fields, "client"),
        killer_metric=get_text(fields, "killer_metric"),
        challenge_html=_text_or_rich(get_field(fields, "challenge"), includes, items, settings),
        strategy_html=_text_or_rich(get_field(fields, "strategy"), includes, items, settings),
        results_html=results_html,
        why_ai_cites_html=_text_or_rich(
            get_field(fields, "why_ai_cites"), includes, items, settings
        ),
        graph_image_urls=_graph_image_urls(fields, includes, items),
        seo=seo,
        seo_title=seo_title,
        seo_description=seo_description,
        canonical_url=canonical_url,
        featured_image_url=featured_image_url,
        json_ld=build_page_graph(article, crumbs),
    )

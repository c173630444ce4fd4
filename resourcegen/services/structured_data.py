"""schema.org JSON-LD for generated pages."""

import json
from typing import Any, Dict, List, Optional, Sequence, Tuple

Breadcrumb = Tuple[str, str]  # (name, absolute URL)


def build_breadcrumbs(crumbs: Sequence[Breadcrumb]) -> Dict[str, Any]:
    return {
        "@type": "BreadcrumbList",
        "itemListElement": [
            {"@type": "ListItem", "position": position, "name": name, "item": url}
            for position, (name, url) in enumerate(crumbs, start=1)
        ],
    }


def build_article(
    headline: str,
    url: str,
    description: str = "",
    image: str = "",
    date_published: str = "",
    author_name: str = "",
    publisher_name: str = "",
) -> Dict[str, Any]:
    article: Dict[str, Any] = {
        "@type": "Article",
        "@id": f"{url}#article",
        "headline": headline,
        "url": url,
        "mainEntityOfPage": url,
    }
    if description:
        article["description"] = description
    if image:
        article["image"] = [image]
    if date_published:
        article["datePublished"] = date_published
    if author_name:
        article["author"] = {"@type": "Person", "name": author_name}
    if publisher_name:
        article["publisher"] = {"@type": "Organization", "name": publisher_name}
    return article


def build_page_graph(
    article: Dict[str, Any],
    crumbs: Sequence[Breadcrumb],
    faq_schema: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Combine Article, BreadcrumbList and (optional) FAQPage nodes into one ``@graph``."""
    graph: List[Dict[str, Any]] = [article, build_breadcrumbs(crumbs)]
    if faq_schema:
        graph.append({key: value for key, value in faq_schema.items() if key != "@context"})
    return {"@context": "https://schema.org", "@graph": graph}


def dump_json_ld(data: Dict[str, Any]) -> str:
    """Serialize *data* for inline use inside a ``<script>`` element.

    ``<``, ``>`` and ``&`` are emitted as unicode escapes so ``</script>`` or
    ``<!--`` in content cannot terminate the script block.
    """
    text = json.dumps(data, ensure_ascii=False)
    return text.replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")


def json_ld_script(data: Optional[Dict[str, Any]]) -> str:
    if not data:
        return ""
    return f'<script type="application/ld+json">{dump_json_ld(data)}</script>'


def build_collection_graph(
    name: str, url: str, description: str, crumbs: Sequence[Breadcrumb]
) -> Dict[str, Any]:
    """``@graph`` for a listing page: a CollectionPage plus its breadcrumbs."""
    page = {"@type": "CollectionPage", "@id": f"{url}#page", "name": name, "url": url}
    if description:
        page["description"] = description
    return {"@context": "https://schema.org", "@graph": [page, build_breadcrumbs(crumbs)]}

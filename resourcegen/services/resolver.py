"""Value unwrapping and link resolution over a fetched Contentful entry graph.

A Contentful list response carries two pools of fully-populated records: the
top-level ``items`` and the ``includes`` index (``{"Entry": [...], "Asset":
[...]}``) of transitively linked records.  Field values inside those records
may be locale-wrapped (``{"en-US": value}``) when the query asked for all
locales, so every field read goes through :func:`unwrap` first.

Locale handling is single-locale by convention: a locale map yields the value
of its first key.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)

Entity = Dict[str, Any]
Includes = Mapping[str, Sequence[Entity]]

# A dict carrying any of these keys is a structural value (link stub, inlined
# entity, rich-text node or asset file payload), never a locale map.
_STRUCTURAL_KEYS = frozenset({"sys", "nodeType", "url", "fileName"})

# Logical field -> accepted field IDs, highest priority first.
FIELD_ALIASES: Dict[str, tuple] = {
    # rich content block
    "rich_text": ("content", "body", "richText", "rich_text"),
    "image": ("image",),
    "caption": ("caption",),
    "full_width": ("fullWidth", "full_width"),
    "block_style": ("blockType", "block_type"),
    # call-to-action block
    "cta_heading": ("heading", "headline", "title"),
    "cta_description": ("description", "text", "subheading"),
    "cta_button_label": ("buttonLabel", "button_label", "buttonText", "ctaLabel", "ctaText"),
    "cta_button_url": ("buttonUrl", "button_url", "ctaUrl", "link", "url"),
    # pages
    "title": ("title",),
    "slug": ("slug",),
    "excerpt": ("subtitle", "excerpt", "summary"),
    "published_date": ("publishedDate", "publishDate", "published_date"),
    "featured_image": ("featuredImage", "featured_image"),
    "seo": ("seoFields", "seo"),
    "author": ("author",),
    "content_blocks": ("contentBlocks", "content_blocks"),
    # SEO component
    "seo_title": ("pageTitle", "title", "seoTitle"),
    "seo_description": ("pageDescription", "description", "seoDescription"),
    "canonical_url": ("canonicalUrl", "canonical_url"),
    "noindex": ("noindex", "noIndex"),
    "nofollow": ("nofollow", "noFollow"),
    "share_images": ("shareImages", "share_images"),
    # author
    "author_name": ("name",),
    "author_avatar": ("avatar", "photo", "image"),
    "author_bio": ("bio", "biography"),
    "author_role": ("roleCompany", "role_company", "role"),
    # case study
    "client": ("clientName", "client"),
    "killer_metric": ("killerMetric", "killer_metric"),
    "challenge": ("challenge",),
    "strategy": ("strategy",),
    "results": ("results",),
    "result_blocks": ("resultBlocks", "result_blocks"),
    "why_ai_cites": ("whyAICites", "whyAiCites", "why_ai_cites"),
    # result block
    "metric_label": ("metricLabel", "metric_label"),
    "metric_value": ("metricValue", "metric_value"),
    "metric_description": ("description",),
    "graph_image": ("graphImage", "graph_image"),
}


def unwrap(value: Any) -> Any:
    """Return the single value behind a possibly locale-wrapped field value.

    ``None`` stays ``None``.  A plain dict that is not a structural value is a
    locale map and yields its first value (``None`` when empty).  Everything
    else, including lists, link stubs and rich-text documents, is returned
    unchanged, so ``unwrap`` is idempotent on already-unwrapped values.
    """
    if value is None:
        return None
    if isinstance(value, dict) and not _STRUCTURAL_KEYS.intersection(value):
        for first in value.values():
            return first
        return None
    return value


def fields_of(entity: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    if not entity:
        return {}
    fields = entity.get("fields")
    return fields if isinstance(fields, dict) else {}


def get_field(fields: Mapping[str, Any], logical_name: str) -> Any:
    """Return the first non-empty unwrapped value among *logical_name*'s aliases."""
    return first_of(fields, FIELD_ALIASES.get(logical_name, (logical_name,)))


def first_of(fields: Mapping[str, Any], field_ids: Iterable[str]) -> Any:
    for field_id in field_ids:
        value = unwrap(fields.get(field_id))
        # Blank strings count as missing so the next alias is tried
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        return value
    return None


def get_text(fields: Mapping[str, Any], logical_name: str) -> str:
    value = get_field(fields, logical_name)
    return value.strip() if isinstance(value, str) else ""


def entity_id(entity: Optional[Mapping[str, Any]]) -> Optional[str]:
    if not isinstance(entity, dict):
        return None
    sys = entity.get("sys")
    if isinstance(sys, dict) and sys.get("id"):
        return str(sys["id"])
    return None


def content_type_of(entity: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Return the content type ID of an entry (``sys.contentType.sys.id``)."""
    if not isinstance(entity, dict):
        return None
    content_type = (entity.get("sys") or {}).get("contentType")
    if isinstance(content_type, dict):
        ct_id = (content_type.get("sys") or {}).get("id")
        return str(ct_id) if ct_id else None
    return None


def link_id(ref: Any) -> Optional[str]:
    """Return the target ID of a link stub (or inlined entity), unwrapping first."""
    return entity_id(unwrap(ref))


def is_inlined(ref: Any) -> bool:
    """True when *ref* is a fully-populated record rather than a bare link stub."""
    return isinstance(ref, dict) and isinstance(ref.get("fields"), dict)


def resolve_entry(
    id: Optional[str],
    includes: Optional[Includes],
    items: Optional[Sequence[Entity]] = None,
) -> Optional[Entity]:
    """Find the entry with *id*, searching *items* before ``includes["Entry"]``."""
    if not id:
        return None
    candidates: List[Entity] = list(items or [])
    candidates.extend((includes or {}).get("Entry") or [])
    for candidate in candidates:
        if entity_id(candidate) == id:
            return candidate
    logger.debug("Unresolved entry link %s", id)
    return None


def resolve_asset(id: Optional[str], includes: Optional[Includes]) -> Optional[Entity]:
    if not id:
        return None
    for candidate in (includes or {}).get("Asset") or []:
        if entity_id(candidate) == id:
            return candidate
    logger.debug("Unresolved asset link %s", id)
    return None


def resolve_link(
    ref: Any,
    includes: Optional[Includes],
    items: Optional[Sequence[Entity]] = None,
) -> Optional[Entity]:
    """Resolve a link stub to its entry or asset; inlined records pass through."""
    ref = unwrap(ref)
    if is_inlined(ref):
        return ref
    if not isinstance(ref, dict):
        return None
    sys = ref.get("sys") or {}
    if sys.get("linkType") == "Asset" or sys.get("type") == "Asset":
        return resolve_asset(sys.get("id"), includes)
    return resolve_entry(sys.get("id"), includes, items)


def resolve_links(
    refs: Any,
    includes: Optional[Includes],
    items: Optional[Sequence[Entity]] = None,
) -> List[Entity]:
    """Resolve each element of a link array, silently skipping unresolved ones."""
    refs = unwrap(refs)
    if not isinstance(refs, list):
        return []
    resolved = []
    for ref in refs:
        entity = resolve_link(ref, includes, items)
        if entity is not None:
            resolved.append(entity)
    return resolved


def normalize_url(url: Optional[str]) -> str:
    """Turn a protocol-relative URL (``//host/path``) into an explicit https URL."""
    if not url:
        return ""
    url = str(url).strip()
    return "https:" + url if url.startswith("//") else url


def asset_url(asset: Optional[Mapping[str, Any]]) -> str:
    """Return the public file URL of a resolved asset, or ``""``."""
    file_info = unwrap(fields_of(asset).get("file"))
    if not isinstance(file_info, dict):
        return ""
    return normalize_url(file_info.get("url"))


def asset_url_for(ref: Any, includes: Optional[Includes]) -> str:
    """Resolve an asset link (or inlined asset) and return its URL, or ``""``."""
    ref = unwrap(ref)
    if is_inlined(ref):
        return asset_url(ref)
    return asset_url(resolve_asset(link_id(ref), includes))

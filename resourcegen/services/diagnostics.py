"""Field inspection for a single fetched entry.

Used by ``resourcegen debug <slug>`` to check which fields an entry actually
carries and whether the configured body field holds rich text.
"""

from typing import Any, List, Optional

import httpx

from resourcegen.config import Settings
from resourcegen.services.contentful import build_entries_query, fetch_entries
from resourcegen.services.resolver import Entity, entity_id, fields_of, unwrap

_PREVIEW_CHARS = 60


def describe_value(value: Any) -> str:
    """Short human-readable preview of a field value."""
    value = unwrap(value)
    if isinstance(value, dict) and isinstance(value.get("content"), list):
        return f" [Rich text: {len(value['content'])} block(s)]"
    if isinstance(value, str):
        return f' "{value[:_PREVIEW_CHARS]}..."'
    if isinstance(value, dict) and entity_id(value):
        return f" [Link: {entity_id(value)}]"
    if isinstance(value, list):
        return f" [List: {len(value)} item(s)]"
    return ""


def content_field_status(entry: Entity, field_id: str) -> str:
    raw = fields_of(entry).get(field_id)
    if raw is None:
        return "not found"
    value = unwrap(raw)
    if isinstance(value, dict) and isinstance(value.get("content"), list) and value["content"]:
        return f"OK ({len(value['content'])} blocks)"
    return "exists but empty or invalid"


def describe_entry(entry: Entity, settings: Settings) -> List[str]:
    fields = fields_of(entry)
    lines = [
        "=== Contentful Debug: Blog Entry ===",
        f"Entry ID: {entity_id(entry)}",
        f"Fields on entry: {', '.join(fields)}",
        "",
    ]
    lines.extend(f"  - {name}:{describe_value(value)}" for name, value in fields.items())
    lines.append("")
    lines.append("--- Content field check ---")
    lines.extend(
        f"  {field_id}: {content_field_status(entry, field_id)}"
        for field_id in settings.content_fields
    )
    return lines


async def fetch_debug_entry(
    settings: Settings, slug: str, client: Optional[httpx.AsyncClient] = None
) -> Optional[Entity]:
    params = build_entries_query(settings.blog_content_type, include=2, locale="*", slug=slug)
    data = await fetch_entries(settings, params, client=client)
    items = data.get("items") or []
    return items[0] if items else None

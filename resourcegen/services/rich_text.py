"""Rich-text document rendering.

Contentful rich text is a JSON tree of ``nodeType``-tagged nodes.  Standard
markup is rendered by Contentful's ``rich_text_renderer`` package; this module
only overrides the node types whose output depends on the fetched entry pools
or needs escaping:

- embedded entries (block and inline) are resolved and handed to
  :func:`resourcegen.services.blocks.render_block`, which may recurse back into
  :func:`rich_text_to_html` for nested content
- embedded assets and asset hyperlinks are resolved against ``includes``
- text runs and hyperlink targets are HTML-escaped
- unknown node types render ``""`` instead of raising

Nested rendering is bounded by ``Settings.max_render_depth``.  A block that
embeds itself is re-rendered from the same snapshot pool until that depth is
reached and then dropped.
"""

import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from rich_text_renderer import RichTextRenderer
from rich_text_renderer.base_node_renderer import BaseNodeRenderer
from rich_text_renderer.block_renderers import BaseBlockRenderer, HyperlinkRenderer
from rich_text_renderer.document_renderers import DocumentRenderer
from rich_text_renderer.text_renderers import BaseInlineRenderer, TextRenderer

from resourcegen.config import Settings
from resourcegen.services.markup import escape_attr, img_tag
from resourcegen.services.resolver import (
    Entity,
    Includes,
    asset_url,
    fields_of,
    is_inlined,
    link_id,
    resolve_asset,
    resolve_link,
    unwrap,
)

logger = logging.getLogger(__name__)

# Nodes whose children are inline runs and are concatenated without a separator
_INLINE_CONTAINERS = frozenset(
    {"paragraph", "hyperlink", "entry-hyperlink", "asset-hyperlink"}
    | {f"heading-{level}" for level in range(1, 7)}
)


class MalformedDocumentError(ValueError):
    """Raised when a rich-text node does not have the expected shape."""


def is_document(value: Any) -> bool:
    return isinstance(value, dict) and isinstance(value.get("content"), list)


def first_document(fields: Mapping[str, Any], field_ids: Iterable[str]) -> Optional[dict]:
    """Return the first rich-text document found among *field_ids*."""
    for field_id in field_ids:
        value = unwrap(fields.get(field_id))
        if is_document(value):
            return value
    return None


@dataclass(frozen=True)
class RenderContext:
    includes: Includes
    items: Sequence[Entity]
    settings: Settings
    depth: int = 0


# ---------------------------------------------------------------------------
# Node renderers
# ---------------------------------------------------------------------------


class _DocumentRenderer(DocumentRenderer):
    """Top-level nodes joined by newlines; nodes that rendered nothing are left out."""

    def render(self, document):
        parts = []
        for node in document["content"]:
            renderer = self._find_renderer(node)
            html = renderer.render(node) if renderer is not None else ""
            if html:
                parts.append(html)
        return "\n".join(parts)


class _TextRenderer(TextRenderer):
    def render(self, node):
        value = node.get("value", "")
        if not isinstance(value, str):
            raise MalformedDocumentError("Text node value must be a string")
        marks = [
            mark for mark in node.get("marks") or [] if isinstance(mark, dict) and mark.get("type")
        ]
        html = "<br/>".join(escape_attr(line) for line in value.split("\n"))
        return super().render({"value": html, "marks": marks})


class _StrikethroughRenderer(BaseInlineRenderer):
    @property
    def _render_tag(self):
        return "s"


class _HyperlinkRenderer(HyperlinkRenderer):
    def render(self, node):
        uri = (node.get("data") or {}).get("uri", "")
        return f'<a href="{escape_attr(uri)}">{self._render_content(node)}</a>'


class _ChildrenRenderer(BaseBlockRenderer):
    """Links to entries or external resources keep their text only."""

    def render(self, node):
        return self._render_content(node)


class _UntypedNodeRenderer(BaseNodeRenderer):
    """Nodes with no ``nodeType``. Unmapped types are skipped by the library itself."""

    def render(self, node):
        logger.debug("Skipping rich text node without a nodeType: %r", sorted(node))
        return ""


class _ContextRenderer(BaseBlockRenderer):
    def __init__(self, mappings=None, context: Optional[RenderContext] = None):
        super().__init__(mappings)
        self.context = context

    def _target_asset(self, node) -> Optional[Entity]:
        target = unwrap((node.get("data") or {}).get("target"))
        if is_inlined(target):
            return target
        return resolve_asset(link_id(target), self.context.includes)


class _EmbeddedEntryRenderer(_ContextRenderer):
    def render(self, node):
        from resourcegen.services.blocks import render_block

        ctx = self.context
        target = (node.get("data") or {}).get("target")
        entity = resolve_link(target, ctx.includes, ctx.items)
        if entity is None:
            return ""
        return render_block(entity, ctx.includes, ctx.items, ctx.settings, ctx.depth)


class _EmbeddedAssetRenderer(_ContextRenderer):
    def render(self, node):
        asset = self._target_asset(node)
        url = asset_url(asset)
        if not url:
            return ""
        fields = fields_of(asset)
        alt = unwrap(fields.get("title")) or unwrap(fields.get("description")) or ""
        return img_tag(url, alt)


class _AssetHyperlinkRenderer(_ContextRenderer):
    def render(self, node):
        text = self._render_content(node)
        url = asset_url(self._target_asset(node))
        return f'<a href="{escape_attr(url)}">{text}</a>' if url else text


def _mappings(context: RenderContext) -> Dict[Any, Any]:
    """Renderer overrides layered over the library defaults for one render pass."""
    entry_renderer = partial(_EmbeddedEntryRenderer, context=context)
    return {
        "document": _DocumentRenderer,
        "text": _TextRenderer,
        "strikethrough": _StrikethroughRenderer,
        "hyperlink": _HyperlinkRenderer,
        "entry-hyperlink": _ChildrenRenderer,
        "resource-hyperlink": _ChildrenRenderer,
        "asset-hyperlink": partial(_AssetHyperlinkRenderer, context=context),
        "embedded-entry-block": entry_renderer,
        "embedded-entry-inline": entry_renderer,
        "embedded-asset-block": partial(_EmbeddedAssetRenderer, context=context),
        None: _UntypedNodeRenderer,
    }


def rich_text_to_html(
    document: Any,
    includes: Optional[Includes] = None,
    items: Optional[Sequence[Entity]] = None,
    settings: Optional[Settings] = None,
    depth: int = 0,
) -> str:
    """Render a rich-text *document* to HTML.

    Returns ``""`` for a missing or malformed document instead of raising, so
    one bad field never aborts the surrounding page.
    """
    if not is_document(document):
        return ""
    settings = settings or Settings()
    if depth > settings.max_render_depth:
        logger.debug("Rich text nesting deeper than %d levels dropped", settings.max_render_depth)
        return ""
    context = RenderContext(includes or {}, items or [], settings, depth)
    try:
        return RichTextRenderer(_mappings(context)).render(document)
    except Exception as exc:
        logger.warning("Failed to render rich text document: %s", exc)
        return ""


def flatten_text(node: Any) -> str:
    """Return the plain text of a node, with whitespace collapsed."""
    return " ".join(_flatten(node).split())


def _flatten(node: Any) -> str:
    if not isinstance(node, dict):
        return ""
    node_type = node.get("nodeType")
    if node_type == "text":
        value = node.get("value")
        return value if isinstance(value, str) else ""
    content = node.get("content")
    if not isinstance(content, list):
        return ""
    separator = "" if node_type in _INLINE_CONTAINERS else " "
    return separator.join(_flatten(child) for child in content)

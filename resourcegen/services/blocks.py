"""Content block classification and rendering.

An entry referenced from a page body (or embedded in rich text) is first
classified into one of the closed set of block variants in
:mod:`resourcegen.models.block`, then rendered by the matching function.
Entries of any other content type render to ``""``.
"""

import logging
from typing import Any, Optional, Sequence

from resourcegen.config import Settings
from resourcegen.models.block import Block, CtaBlock, RichContentBlock, UnknownBlock
from resourcegen.services.markup import escape_attr, escape_html, img_tag
from resourcegen.services.normalizer import kebab_case
from resourcegen.services.resolver import (
    FIELD_ALIASES,
    Entity,
    Includes,
    asset_url,
    asset_url_for,
    content_type_of,
    entity_id,
    fields_of,
    get_field,
    get_text,
    normalize_url,
    resolve_link,
    resolve_links,
    unwrap,
)
from resourcegen.services.rich_text import first_document, rich_text_to_html

logger = logging.getLogger(__name__)

BLOCK_STYLES = ("text", "image", "quote", "list", "code", "cta")
DEFAULT_BLOCK_STYLE = "text"


def block_style_class(block_type: Any) -> str:
    """Normalize a free-form block style tag to one of :data:`BLOCK_STYLES`."""
    if not isinstance(block_type, str):
        return DEFAULT_BLOCK_STYLE
    style = kebab_case(block_type)
    return style if style in BLOCK_STYLES else DEFAULT_BLOCK_STYLE


def _button_url(
    value: Any, includes: Optional[Includes], items: Optional[Sequence[Entity]] = None
) -> str:
    value = unwrap(value)
    if isinstance(value, str):
        return normalize_url(value)
    # Linked asset (e.g. a downloadable PDF) or linked entry carrying a url field
    target = resolve_link(value, includes, items)
    if target is None:
        return ""
    return asset_url(target) or normalize_url(get_text(fields_of(target), "cta_button_url"))


def classify_block(
    entity: Optional[Entity],
    settings: Settings,
    includes: Optional[Includes] = None,
    items: Optional[Sequence[Entity]] = None,
) -> Block:
    """Map a resolved entry onto its block variant by content type (case-insensitive)."""
    content_type = content_type_of(entity)
    fields = fields_of(entity)
    block_id = entity_id(entity)
    if not fields or not content_type:
        return UnknownBlock(id=block_id, content_type=content_type)

    normalized = content_type.lower()
    if normalized == settings.cta_block_type.lower():
        return CtaBlock(
            id=block_id,
            heading=get_text(fields, "cta_heading"),
            description=get_text(fields, "cta_description"),
            button_label=get_text(fields, "cta_button_label"),
            button_url=_button_url(get_field(fields, "cta_button_url"), includes, items),
        )
    if normalized == settings.content_block_type.lower():
        return RichContentBlock(
            id=block_id,
            rich_text=first_document(fields, FIELD_ALIASES["rich_text"]),
            image=get_field(fields, "image"),
            caption=get_text(fields, "caption"),
            full_width=bool(get_field(fields, "full_width")),
            style=block_style_class(get_field(fields, "block_style")),
        )
    return UnknownBlock(id=block_id, content_type=content_type)


def render_cta_block(block: CtaBlock) -> str:
    parts = []
    if block.heading:
        parts.append(f'<h3 class="cta-block-heading">{escape_html(block.heading)}</h3>')
    if block.description:
        parts.append(f'<p class="cta-block-description">{escape_html(block.description)}</p>')
    if block.button_url and block.button_label:
        parts.append(
            f'<a class="cta-block-button" href="{escape_attr(block.button_url)}">'
            f"{escape_html(block.button_label)}</a>"
        )
    # No content, no wrapper
    if not parts:
        return ""
    return f'<div class="cta-block">{"".join(parts)}</div>'


def render_rich_content_block(
    block: RichContentBlock,
    includes: Optional[Includes],
    items: Optional[Sequence[Entity]],
    settings: Settings,
    depth: int = 0,
) -> str:
    html = ""
    if block.rich_text:
        html = rich_text_to_html(block.rich_text, includes, items, settings, depth + 1)

    if block.image is not None:
        url = asset_url_for(block.image, includes)
        if url:
            caption = f"<figcaption>{escape_html(block.caption)}</figcaption>" if block.caption else ""
            html += f'<figure class="content-block-figure">{img_tag(url, block.caption)}{caption}</figure>'

    if not html:
        return ""
    classes = f"content-block content-block--{block.style}"
    if block.full_width:
        classes += " content-block--full"
    return f'<div class="{classes}">{html}</div>'


def render_block(
    entity: Optional[Entity],
    includes: Optional[Includes],
    items: Optional[Sequence[Entity]] = None,
    settings: Optional[Settings] = None,
    depth: int = 0,
) -> str:
    """Render one resolved entry as a self-contained HTML fragment (possibly ``""``)."""
    settings = settings or Settings()
    block = classify_block(entity, settings, includes, items)
    if isinstance(block, CtaBlock):
        return render_cta_block(block)
    if isinstance(block, RichContentBlock):
        return render_rich_content_block(block, includes, items, settings, depth)
    logger.debug(
        "Skipping block %s with unrecognized content type %r", block.id, block.content_type
    )
    return ""


def render_content_blocks(
    refs: Any,
    includes: Optional[Includes],
    items: Optional[Sequence[Entity]] = None,
    settings: Optional[Settings] = None,
) -> str:
    """Render an array of content block links, skipping unresolved and empty blocks."""
    parts = []
    for entity in resolve_links(refs, includes, items):
        html = render_block(entity, includes, items, settings)
        if html:
            parts.append(html)
    return "\n".join(parts)

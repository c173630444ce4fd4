import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from resourcegen.config import Settings, get_settings
from resourcegen.models.page import BlogPost
from resourcegen.models.preview import ErrorResponse, PreviewPost, PreviewResponse
from resourcegen.services.contentful import ContentfulError, fetch_preview_entry
from resourcegen.services.pages import build_blog_post
from resourcegen.services.resolver import fields_of

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(prefix="/api")


@router.get(
    "/preview",
    response_model=PreviewResponse,
    summary="Render an unpublished blog post",
    description=(
        "Fetches one blog post from the Contentful Preview API by `slug` or `id` "
        "(`id` wins when both are given) and returns it rendered exactly as the "
        "static generator would."
    ),
)
@limiter.limit("30/minute")
async def preview(
    request: Request,
    slug: str = Query(default="", description="Value of the entry's slug field."),
    id: str = Query(default="", description="Contentful entry ID."),
    settings: Settings = Depends(get_settings),
):
    if not settings.preview_configured:
        return _error(
            500, "Preview API not configured (CONTENTFUL_SPACE_ID / CONTENTFUL_PREVIEW_TOKEN)."
        )

    slug, entry_id = slug.strip(), id.strip()
    if not slug and not entry_id:
        return _error(400, "Provide ?slug=... or ?id=...")

    logger.info("Preview request received", extra={"slug": slug, "entry_id": entry_id})

    try:
        data = await fetch_preview_entry(settings, slug=slug or None, entry_id=entry_id or None)
        items = data.get("items") or []
        entry = items[0] if items else None
        if not fields_of(entry):
            return _error(404, "Entry not found")
        post = build_blog_post(entry, data.get("includes") or {}, items, settings)
    except ContentfulError as exc:
        logger.error("Preview upstream error for %s: %s", slug or entry_id, exc)
        return _error(exc.status_code, str(exc), exc.details)
    except Exception as exc:
        logger.exception("Preview API error for %s", slug or entry_id)
        return _error(500, str(exc) or "Preview fetch failed")

    return PreviewResponse(post=to_preview_post(post))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def to_preview_post(post: BlogPost) -> PreviewPost:
    return PreviewPost(
        id=post.id,
        title=post.title,
        slug=post.slug,
        excerpt=post.excerpt,
        body=post.body,
        seo_title=post.seo_title,
        seo_description=post.seo_description,
        canonical_url=post.canonical_url,
        noindex=bool(post.seo.noindex),
        nofollow=bool(post.seo.nofollow),
        share_images=post.seo.share_images,
        publish_date=post.publish_date,
        published_date_formatted=post.published_date_formatted,
        featured_image_url=post.featured_image_url,
        faqs_html=post.faqs_html,
        author_html=post.author_html,
        json_ld=post.json_ld,
    )


def _error(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details or None)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))

"""Contentful Content Delivery / Preview API client."""

import logging
from typing import Any, Dict, Optional

import httpx

from resourcegen.config import Settings

logger = logging.getLogger(__name__)

CDN_BASE = "https://cdn.contentful.com"
PREVIEW_BASE = "https://preview.contentful.com"

_API_TIMEOUT = 15
_MAX_ERROR_DETAILS = 500


class ContentfulError(RuntimeError):
    """Raised when the API answers with a non-success status."""

    def __init__(self, message: str, status_code: int, details: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


def build_entries_query(
    content_type: str,
    *,
    order: Optional[str] = None,
    include: Optional[int] = None,
    locale: Optional[str] = None,
    limit: Optional[int] = None,
    slug: Optional[str] = None,
    entry_id: Optional[str] = None,
) -> Dict[str, str]:
    """Return the query parameters for an ``/entries`` list request."""
    params = {"content_type": content_type}
    if order:
        params["order"] = order
    if include is not None:
        params["include"] = str(include)
    if locale:
        params["locale"] = locale
    if limit is not None:
        params["limit"] = str(limit)
    # An explicit ID wins over a slug lookup
    if entry_id:
        params["sys.id"] = entry_id
    elif slug:
        params["fields.slug"] = slug
    return params


def entries_url(settings: Settings, preview: bool = False) -> str:
    base = PREVIEW_BASE if preview else CDN_BASE
    return f"{base}/spaces/{settings.space_id}/environments/{settings.environment}/entries"


async def fetch_entries(
    settings: Settings,
    params: Dict[str, str],
    *,
    preview: bool = False,
    client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    """GET ``/entries`` and return the decoded response (``items`` + ``includes``).

    Raises:
        ContentfulError: on any non-2xx response.
        httpx.HTTPError: on network errors.
    """
    token = settings.preview_token if preview else settings.access_token
    url = entries_url(settings, preview)
    headers = {"Authorization": f"Bearer {token}"}

    if client is None:
        async with httpx.AsyncClient(timeout=_API_TIMEOUT) as own_client:
            resp = await own_client.get(url, params=params, headers=headers)
    else:
        resp = await client.get(url, params=params, headers=headers)

    if not resp.is_success:
        raise ContentfulError(
            f"Contentful {'Preview' if preview else 'Delivery'} API error: {resp.status_code}",
            status_code=resp.status_code,
            details=resp.text[:_MAX_ERROR_DETAILS],
        )

    data = resp.json()
    data.setdefault("items", [])
    data.setdefault("includes", {})
    return data


async def fetch_blog_posts(
    settings: Settings, client: Optional[httpx.AsyncClient] = None
) -> Dict[str, Any]:
    params = build_entries_query(
        settings.blog_content_type,
        order=settings.order,
        include=settings.include_depth,
        locale=settings.locale,
    )
    return await fetch_entries(settings, params, client=client)


async def fetch_case_studies(
    settings: Settings, client: Optional[httpx.AsyncClient] = None
) -> Dict[str, Any]:
    """Fetch case studies; any failure degrades to an empty result set."""
    params = build_entries_query(
        settings.case_study_content_type,
        order=settings.order,
        include=settings.include_depth,
        locale=settings.locale,
    )
    try:
        return await fetch_entries(settings, params, client=client)
    except (ContentfulError, httpx.HTTPError, ValueError) as exc:
        logger.warning("Case study query failed, continuing without case studies: %s", exc)
        return {"items": [], "includes": {}}


async def fetch_preview_entry(
    settings: Settings,
    *,
    slug: Optional[str] = None,
    entry_id: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    """Fetch one (possibly unpublished) blog entry from the Preview API."""
    params = build_entries_query(
        settings.blog_content_type,
        include=settings.include_depth,
        locale=settings.locale,
        limit=1,
        slug=slug,
        entry_id=entry_id,
    )
    return await fetch_entries(settings, params, preview=True, client=client)

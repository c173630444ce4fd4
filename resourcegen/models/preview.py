from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PreviewPost(BaseModel):
    """Draft blog post as returned by ``GET /api/preview`` (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[str] = None
    title: str
    slug: str
    excerpt: str = ""
    body: str = ""
    seo_title: str
    seo_description: str = ""
    canonical_url: str
    noindex: bool = False
    nofollow: bool = False
    share_images: List[str] = []
    publish_date: str = ""
    published_date_formatted: str = ""
    featured_image_url: str = ""
    faqs_html: str = ""
    author_html: str = ""
    json_ld: Dict[str, Any] = {}


class PreviewResponse(BaseModel):
    ok: Literal[True] = True
    post: PreviewPost


class ErrorResponse(BaseModel):
    ok: Literal[False] = False
    error: str
    details: Optional[str] = None

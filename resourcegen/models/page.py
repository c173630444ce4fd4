from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from resourcegen.models.metadata import AuthorProfile, FaqPair, SeoMetadata


class BlogPost(BaseModel):
    """Fully resolved and rendered blog post, ready for a template or the preview API."""

    id: Optional[str] = None
    title: str
    slug: str
    excerpt: str = ""
    body: str = ""
    seo: SeoMetadata = SeoMetadata()
    seo_title: str
    seo_description: str = ""
    canonical_url: str
    publish_date: str = ""
    published_date_formatted: str = ""
    featured_image_url: str = ""
    author: Optional[AuthorProfile] = None
    author_html: str = ""
    faq_pairs: List[FaqPair] = []
    faqs_html: str = ""
    json_ld: Dict[str, Any] = {}


class CaseStudy(BaseModel):
    """Fully resolved and rendered case study page."""

    id: Optional[str] = None
    title: str
    slug: str
    client: str = ""
    killer_metric: str = ""
    challenge_html: str = ""
    strategy_html: str = ""
    results_html: str = ""
    why_ai_cites_html: str = ""
    graph_image_urls: List[str] = []
    seo: SeoMetadata = SeoMetadata()
    seo_title: str
    seo_description: str = ""
    canonical_url: str
    featured_image_url: str = ""
    json_ld: Dict[str, Any] = {}

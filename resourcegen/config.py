"""Runtime configuration for the resources generator and preview API.

Every value can be overridden through the environment (or a ``.env`` file in
the working directory).  The resulting :class:`Settings` record is built once
at process start and then passed explicitly to the services that need it.
"""

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
DEFAULT_BLOG_CONTENT_TYPE = "pageBlogPost"
DEFAULT_CASE_STUDY_CONTENT_TYPE = "caseStudy"
DEFAULT_CONTENT_BLOCK_TYPE = "richContentBlock"
DEFAULT_CTA_BLOCK_TYPE = "ctaBlock"
DEFAULT_CONTENT_FIELDS = ("content", "body", "mainContent", "main_content")
DEFAULT_FAQ_FIELDS = ("faqs",)
DEFAULT_BASE_URL = "https://theseopilot.pro"
DEFAULT_INCLUDE_DEPTH = 10
DEFAULT_PORT = 3456

# Contentful rejects include depths above 10
MAX_INCLUDE_DEPTH = 10

# Nested rich text inside content blocks is rendered at most this deep
MAX_RENDER_DEPTH = 5

ALLOWED_ORIGINS = (
    "https://theseopilot.pro",
    "https://www.theseopilot.pro",
)

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    space_id: str = ""
    access_token: str = ""
    preview_token: str = ""
    environment: str = "master"
    blog_content_type: str = DEFAULT_BLOG_CONTENT_TYPE
    case_study_content_type: str = DEFAULT_CASE_STUDY_CONTENT_TYPE
    content_block_type: str = DEFAULT_CONTENT_BLOCK_TYPE
    cta_block_type: str = DEFAULT_CTA_BLOCK_TYPE
    content_fields: Tuple[str, ...] = DEFAULT_CONTENT_FIELDS
    faq_fields: Tuple[str, ...] = DEFAULT_FAQ_FIELDS
    include_depth: int = DEFAULT_INCLUDE_DEPTH
    locale: str = "*"
    order: str = "-fields.publishedDate"
    debug: bool = False
    base_url: str = DEFAULT_BASE_URL
    output_dir: Path = field(default_factory=lambda: Path("."))
    port: int = DEFAULT_PORT
    max_render_depth: int = MAX_RENDER_DEPTH
    allowed_origins: Tuple[str, ...] = ALLOWED_ORIGINS

    @property
    def delivery_configured(self) -> bool:
        """True when the published-content (CDN) API can be queried."""
        return bool(self.space_id and self.access_token)

    @property
    def preview_configured(self) -> bool:
        """True when the draft (preview) API can be queried."""
        return bool(self.space_id and self.preview_token)


def _split_list(raw: Optional[str], default: Tuple[str, ...]) -> Tuple[str, ...]:
    if not raw:
        return default
    values = tuple(part.strip() for part in raw.split(",") if part.strip())
    return values or default


def _parse_int(name: str, raw: Optional[str], default: int) -> int:
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
        return default


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from *env* (defaults to ``os.environ`` after loading ``.env``)."""
    if env is None:
        load_dotenv()
        env = os.environ

    include_depth = _parse_int(
        "CONTENTFUL_INCLUDE_DEPTH", env.get("CONTENTFUL_INCLUDE_DEPTH"), DEFAULT_INCLUDE_DEPTH
    )
    include_depth = max(0, min(include_depth, MAX_INCLUDE_DEPTH))

    return Settings(
        space_id=env.get("CONTENTFUL_SPACE_ID", "").strip(),
        access_token=env.get("CONTENTFUL_ACCESS_TOKEN", "").strip(),
        preview_token=env.get("CONTENTFUL_PREVIEW_TOKEN", "").strip(),
        environment=env.get("CONTENTFUL_ENVIRONMENT", "").strip() or "master",
        blog_content_type=env.get("CONTENTFUL_BLOG_CONTENT_TYPE", "").strip()
        or DEFAULT_BLOG_CONTENT_TYPE,
        case_study_content_type=env.get("CONTENTFUL_CASE_STUDY_CONTENT_TYPE", "").strip()
        or DEFAULT_CASE_STUDY_CONTENT_TYPE,
        content_block_type=env.get("CONTENTFUL_RICH_CONTENT_BLOCK_TYPE", "").strip()
        or DEFAULT_CONTENT_BLOCK_TYPE,
        cta_block_type=env.get("CONTENTFUL_CTA_BLOCK_TYPE", "").strip() or DEFAULT_CTA_BLOCK_TYPE,
        content_fields=_split_list(env.get("CONTENTFUL_CONTENT_FIELD"), DEFAULT_CONTENT_FIELDS),
        faq_fields=_split_list(env.get("CONTENTFUL_FAQS_FIELD"), DEFAULT_FAQ_FIELDS),
        include_depth=include_depth,
        locale=env.get("CONTENTFUL_LOCALE", "").strip() or "*",
        order=env.get("CONTENTFUL_ORDER", "").strip() or "-fields.publishedDate",
        debug=env.get("CONTENTFUL_DEBUG", "").strip().lower() in _TRUTHY,
        base_url=(env.get("SITE_BASE_URL", "").strip() or DEFAULT_BASE_URL).rstrip("/"),
        output_dir=Path(env.get("OUTPUT_DIR", "").strip() or "."),
        port=_parse_int("PORT", env.get("PORT"), DEFAULT_PORT),
    )


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, loaded on first use."""
    return load_settings()

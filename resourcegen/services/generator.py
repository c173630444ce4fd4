"""Static generation of the /resources/ page tree.

One run re-fetches every blog post and case study and rewrites their pages:

- ``resources/blog/index.html`` and ``resources/blog/<slug>/index.html``
- ``resources/case-studies/index.html`` and ``resources/case-studies/<slug>/index.html``

Pages for entries that disappeared from the CMS are left in place.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx
from jinja2 import Environment, FileSystemLoader, select_autoescape

from resourcegen.config import Settings
from resourcegen.models.metadata import SeoMetadata
from resourcegen.models.page import BlogPost, CaseStudy
from resourcegen.services.contentful import ContentfulError, fetch_blog_posts, fetch_case_studies
from resourcegen.services.pages import (
    BLOG_PATH,
    CASE_STUDIES_PATH,
    RESOURCES_PATH,
    SITE_NAME,
    build_blog_post,
    build_case_study,
    page_url,
)
from resourcegen.services.resolver import fields_of
from resourcegen.services.structured_data import build_collection_graph, json_ld_script

logger = logging.getLogger(__name__)

BLOG_INDEX_TITLE = f"Blog | SEO & GEO Insights | {SITE_NAME}"
BLOG_INDEX_DESCRIPTION = (
    "SEO and Generative Engine Optimization insights. How to rank, get cited by AI, "
    "and grow organic visibility."
)
CASE_STUDY_INDEX_TITLE = f"Case Studies | {SITE_NAME}"
CASE_STUDY_INDEX_DESCRIPTION = (
    "Real SEO and GEO results. Traffic growth, rankings, and why AI started citing our clients."
)


@dataclass
class GenerationReport:
    blog_posts: int = 0
    case_studies: int = 0
    written: List[Path] = field(default_factory=list)


def robots_directive(seo: SeoMetadata) -> str:
    directives = []
    if seo.noindex:
        directives.append("noindex")
    if seo.nofollow:
        directives.append("nofollow")
    return ", ".join(directives)


class PageRenderer:
    """Renders page views into complete HTML documents with the site chrome."""

    def __init__(self, settings: Settings, *, templates_dir: Optional[Path] = None) -> None:
        self.settings = settings
        self.templates_dir = templates_dir or Path(__file__).resolve().parent.parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(self.templates_dir),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.globals.update(
            site_name=SITE_NAME,
            year=datetime.now().year,
            post_href=lambda slug: page_url(settings, BLOG_PATH, slug),
            study_href=lambda slug: page_url(settings, CASE_STUDIES_PATH, slug),
        )

    def _crumbs(self, section: Tuple[str, str], leaf: Optional[str] = None) -> List[Tuple[str, str]]:
        crumbs = [
            ("Home", page_url(self.settings, "/")),
            ("Resources", page_url(self.settings, RESOURCES_PATH)),
            (section[0], page_url(self.settings, section[1])),
        ]
        if leaf:
            crumbs.append((leaf, ""))
        return crumbs

    def _render(self, template_name: str, **context: Any) -> str:
        html = self.env.get_template(template_name).render(**context)
        return html if html.endswith("\n") else html + "\n"

    def render_blog_index(self, posts: Sequence[BlogPost]) -> str:
        canonical = page_url(self.settings, BLOG_PATH)
        crumbs = self._crumbs(("Blog", BLOG_PATH))
        return self._render(
            "blog_index.html",
            page_title=BLOG_INDEX_TITLE,
            description=BLOG_INDEX_DESCRIPTION,
            canonical=canonical,
            breadcrumbs=crumbs,
            json_ld=json_ld_script(
                build_collection_graph("Blog", canonical, BLOG_INDEX_DESCRIPTION, crumbs)
            ),
            posts=posts,
        )

    def render_blog_post(self, post: BlogPost) -> str:
        return self._render(
            "blog_post.html",
            page_title=f"{post.seo_title} | {SITE_NAME}",
            description=post.seo_description,
            canonical=post.canonical_url,
            robots=robots_directive(post.seo),
            og_image=post.featured_image_url or next(iter(post.seo.share_images), ""),
            breadcrumbs=self._crumbs(("Blog", BLOG_PATH), post.title),
            json_ld=json_ld_script(post.json_ld),
            post=post,
        )

    def render_case_study_index(self, studies: Sequence[CaseStudy]) -> str:
        canonical = page_url(self.settings, CASE_STUDIES_PATH)
        crumbs = self._crumbs(("Case Studies", CASE_STUDIES_PATH))
        return self._render(
            "case_study_index.html",
            page_title=CASE_STUDY_INDEX_TITLE,
            description=CASE_STUDY_INDEX_DESCRIPTION,
            canonical=canonical,
            breadcrumbs=crumbs,
            json_ld=json_ld_script(
                build_collection_graph(
                    "Case Studies", canonical, CASE_STUDY_INDEX_DESCRIPTION, crumbs
                )
            ),
            studies=studies,
        )

    def render_case_study(self, study: CaseStudy) -> str:
        return self._render(
            "case_study.html",
            page_title=f"{study.seo_title} | {SITE_NAME}",
            description=study.seo_description,
            canonical=study.canonical_url,
            robots=robots_directive(study.seo),
            og_image=study.featured_image_url or next(iter(study.seo.share_images), ""),
            breadcrumbs=self._crumbs(("Case Studies", CASE_STUDIES_PATH), study.title),
            json_ld=json_ld_script(study.json_ld),
            study=study,
        )


def write_page(path: Path, html: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(html, encoding="utf-8")
    return path


def _entries(data: Dict[str, Any]) -> Tuple[List[dict], Dict[str, Any]]:
    items = [item for item in data.get("items") or [] if fields_of(item)]
    return items, data.get("includes") or {}


async def generate_site(
    settings: Settings,
    *,
    client: Optional[httpx.AsyncClient] = None,
    renderer: Optional[PageRenderer] = None,
) -> GenerationReport:
    """Fetch all content and (re)write the resources page tree under ``settings.output_dir``.

    Raises:
        ContentfulError / httpx.HTTPError: when the blog query fails.
    """
    blog_data, case_data = await asyncio.gather(
        fetch_blog_posts(settings, client), fetch_case_studies(settings, client)
    )
    renderer = renderer or PageRenderer(settings)
    report = GenerationReport()
    root = Path(settings.output_dir)

    blog_items, blog_includes = _entries(blog_data)
    posts = [build_blog_post(item, blog_includes, blog_items, settings) for item in blog_items]
    blog_dir = root / "resources" / "blog"
    report.written.append(write_page(blog_dir / "index.html", renderer.render_blog_index(posts)))
    for post in posts:
        report.written.append(
            write_page(blog_dir / post.slug / "index.html", renderer.render_blog_post(post))
        )
    report.blog_posts = len(posts)

    case_items, case_includes = _entries(case_data)
    studies = [build_case_study(item, case_includes, case_items, settings) for item in case_items]
    studies_dir = root / "resources" / "case-studies"
    report.written.append(
        write_page(studies_dir / "index.html", renderer.render_case_study_index(studies))
    )
    for study in studies:
        report.written.append(
            write_page(studies_dir / study.slug / "index.html", renderer.render_case_study(study))
        )
    report.case_studies = len(studies)

    return report


def run_generation(settings: Settings) -> int:
    """Run one generation pass and return a process exit code."""
    if not settings.delivery_configured:
        logger.info(
            "Contentful not configured (CONTENTFUL_SPACE_ID / CONTENTFUL_ACCESS_TOKEN). Skipping generation."
        )
        return 0

    try:
        report = asyncio.run(generate_site(settings))
    except (ContentfulError, httpx.HTTPError, ValueError) as exc:
        logger.error("Generate failed: %s", exc)
        return 1

    logger.info(
        "Generated resources from Contentful: %d blog posts, %d case studies, %d files",
        report.blog_posts,
        report.case_studies,
        len(report.written),
    )
    return 0

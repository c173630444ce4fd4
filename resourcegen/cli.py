"""Command-line entry point.

    resourcegen generate          rebuild resources/blog and resources/case-studies
    resourcegen serve             run the preview API
    resourcegen debug <slug>      list the fields a blog entry carries
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import httpx
import uvicorn

from resourcegen.config import Settings, load_settings
from resourcegen.log import configure_logging
from resourcegen.services.contentful import ContentfulError
from resourcegen.services.diagnostics import describe_entry, fetch_debug_entry
from resourcegen.services.generator import run_generation

logger = logging.getLogger(__name__)


def _generate(args: argparse.Namespace, settings: Settings) -> int:
    return run_generation(settings)


def _serve(args: argparse.Namespace, settings: Settings) -> int:
    uvicorn.run(
        "resourcegen.main:app",
        host=args.host,
        port=args.port or settings.port,
        log_config=None,
    )
    return 0


def _debug(args: argparse.Namespace, settings: Settings) -> int:
    if not settings.delivery_configured:
        print("Set CONTENTFUL_SPACE_ID and CONTENTFUL_ACCESS_TOKEN in .env", file=sys.stderr)
        return 1
    try:
        entry = asyncio.run(fetch_debug_entry(settings, args.slug))
    except (ContentfulError, httpx.HTTPError) as exc:
        logger.error("Debug fetch failed: %s", exc)
        return 1
    if entry is None:
        print(f"No blog entry found with slug: {args.slug}", file=sys.stderr)
        return 1
    print("\n".join(describe_entry(entry, settings)))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resourcegen",
        description="Generate the /resources/ pages from Contentful and serve draft previews.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    generate = sub.add_parser("generate", help="Fetch all content and rewrite the resource pages.")
    generate.set_defaults(handler=_generate)

    serve = sub.add_parser("serve", help="Run the preview API.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=None, help="Defaults to $PORT or 3456.")
    serve.set_defaults(handler=_serve)

    debug = sub.add_parser("debug", help="Inspect the fields of one blog entry.")
    debug.add_argument("slug")
    debug.set_defaults(handler=_debug)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    configure_logging(settings.debug)
    return args.handler(args, settings)


if __name__ == "__main__":
    sys.exit(main())

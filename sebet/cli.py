"""``sebet-prerender``: run after ``vite build`` to write OG-ready article pages."""

import argparse
import asyncio
import logging
import os

from sebet.config import DEFAULT_SITE_URL, ContentApiConfig
from sebet.logging_setup import configure_logging
from sebet.models.prerender import PrerenderOptions
from sebet.services.prerender import prerender_og_pages

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate static blog pages with Open Graph metadata for social crawlers"
    )
    parser.add_argument(
        "--site-url",
        default=os.environ.get("SITE_URL", DEFAULT_SITE_URL),
        help="Absolute site URL (default: $SITE_URL or %(default)s)",
    )
    parser.add_argument(
        "--default-og-image",
        default=os.environ.get("DEFAULT_OG_IMAGE"),
        help="Share image for articles without one (default: <site-url>/og-images/default.jpg)",
    )
    parser.add_argument(
        "--out-dir",
        default="dist",
        help="Directory holding the built site (default: %(default)s)",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: %(default)s)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    site_url = args.site_url.rstrip("/")
    options = PrerenderOptions(
        site_url=site_url,
        default_og_image=args.default_og_image or f"{site_url}/og-images/default.jpg",
        out_dir=args.out_dir,
    )

    count = asyncio.run(prerender_og_pages(options, ContentApiConfig.from_env()))
    logger.info("Prerender finished: %d pages", count)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Build-time generation of crawler-friendly article pages.

Runs after the front-end bundle is written.  For every published article a
copy of the built ``index.html`` is written to ``<out_dir>/blog/<slug>/``
with that article's title, description and share image in the ``<head>``.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from sebet.config import ContentApiConfig
from sebet.models.article import ArticleSummary
from sebet.models.prerender import PrerenderOptions
from sebet.services.content_api import fetch_published_articles
from sebet.services.head import (
    build_head_spec,
    inject_head_block,
    render_head_block,
    strip_head_tags,
)

logger = logging.getLogger(__name__)


def read_template(out_dir: Path) -> Optional[str]:
    """Return the built ``index.html`` from *out_dir*, or *None* if it cannot be read."""
    template_path = out_dir / "index.html"
    try:
        return template_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read %s (%s); skipping OG prerender.", template_path, exc)
        return None


def render_article_page(
    template: str, article: ArticleSummary, options: PrerenderOptions
) -> str:
    """Return *template* (already stripped of head metadata) customised for *article*."""
    spec = build_head_spec(article, options)
    return inject_head_block(template, render_head_block(spec, options.site_name))


def _write_page(blog_root: Path, slug: str, html: str) -> Path:
    out_path = blog_root / slug / "index.html"
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(html, encoding="utf-8")
    return out_path


async def prerender_og_pages(
    options: PrerenderOptions,
    api_config: Optional[ContentApiConfig],
) -> int:
    """Write one prerendered page per published article and return how many were written.

    A missing template or an unavailable content API turn the run into a
    logged no-op (returning 0).  Errors writing the output tree propagate.
    """
    out_dir = Path(options.out_dir)
    template = read_template(out_dir)
    if template is None:
        return 0

    articles = await fetch_published_articles(api_config)
    if not articles:
        logger.info("No published articles found; nothing to prerender.")
        return 0

    cleaned = strip_head_tags(template)
    blog_root = out_dir / "blog"

    await asyncio.gather(
        *(
            asyncio.to_thread(
                _write_page, blog_root, article.slug, render_article_page(cleaned, article, options)
            )
            for article in articles
        )
    )

    logger.info("Generated %d OG-ready blog pages.", len(articles))
    return len(articles)

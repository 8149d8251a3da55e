"""Open Graph / Twitter Card ``<head>`` metadata for prerendered article pages.

Social crawlers do not execute JavaScript, so the single-page app's runtime
meta tags are invisible to them.  The helpers here remove whatever metadata
the built ``index.html`` template ships with and inject a per-article set.
"""

import re

from sebet.models.article import ArticleSummary
from sebet.models.head import HeadBlockSpec
from sebet.models.prerender import PrerenderOptions

# Hardcoded regardless of the real image; crawlers only use them as hints.
OG_IMAGE_WIDTH = 1200
OG_IMAGE_HEIGHT = 630
OG_IMAGE_TYPE = "image/jpeg"

# Each pattern matches a whole element plus the whitespace that follows it.
_HEAD_TAG_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE | re.DOTALL)
    for pattern in (
        r"<title\b[^>]*>.*?</title>\s*",
        r"<meta\b[^>]*name=[\"']description[\"'][^>]*>\s*",
        r"<link\b[^>]*rel=[\"']canonical[\"'][^>]*>\s*",
        r"<meta\b[^>]*property=[\"']og:[^\"']+[\"'][^>]*>\s*",
        r"<meta\b[^>]*name=[\"']twitter:[^\"']+[\"'][^>]*>\s*",
    )
)

_HEAD_CLOSE_RE = re.compile(r"</head>", re.IGNORECASE)


def escape_html_attr(value: str) -> str:
    """Escape *value* for use inside a double-quoted HTML attribute."""
    return (
        value.replace("&", "&amp;")
        .replace('"', "&quot;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


def strip_head_tags(html: str) -> str:
    """Remove title, description, canonical, ``og:*`` and ``twitter:*`` tags from *html*."""
    for pattern in _HEAD_TAG_PATTERNS:
        html = pattern.sub("", html)
    return html


def pick_og_image(
    site_url: str,
    default_og_image: str,
    og_image: str | None,
    cover_image: str | None,
) -> str:
    """Return the absolute share image URL for an article.

    ``og_image`` wins over ``cover_image``; with neither, *default_og_image*
    is used.  Root-relative and bare paths are resolved against *site_url*.
    """
    raw = ((og_image or "").strip() or (cover_image or "").strip())
    if not raw:
        return default_og_image
    if raw.startswith(("http://", "https://")):
        return raw
    separator = "" if raw.startswith("/") else "/"
    return f"{site_url}{separator}{raw}"


def canonical_url(site_url: str, slug: str) -> str:
    # The trailing slash is part of the canonical form.
    return f"{site_url}/blog/{slug}/"


def build_head_spec(article: ArticleSummary, options: PrerenderOptions) -> HeadBlockSpec:
    url = canonical_url(options.site_url, article.slug)
    return HeadBlockSpec(
        title=f"{article.title} - {options.site_name}",
        description=(article.excerpt or "").strip() or options.default_description,
        canonical_url=url,
        og_type="article",
        og_image=pick_og_image(
            options.site_url, options.default_og_image, article.og_image, article.cover_image
        ),
        og_url=url,
    )


def render_head_block(spec: HeadBlockSpec, site_name: str) -> str:
    """Render *spec* as the block of tags injected before ``</head>``."""
    title = escape_html_attr(spec.title)
    description = escape_html_attr(spec.description)
    canonical = escape_html_attr(spec.canonical_url)
    og_image = escape_html_attr(spec.og_image)
    og_url = escape_html_attr(spec.og_url)

    return f"""
    <title>{title}</title>
    <meta name="description" content="{description}" />
    <link rel="canonical" href="{canonical}" />

    <meta property="og:type" content="{spec.og_type}" />
    <meta property="og:site_name" content="{escape_html_attr(site_name)}" />
    <meta property="og:title" content="{title}" />
    <meta property="og:description" content="{description}" />
    <meta property="og:image" content="{og_image}" />
    <meta property="og:image:secure_url" content="{og_image}" />
    <meta property="og:image:type" content="{OG_IMAGE_TYPE}" />
    <meta property="og:image:width" content="{OG_IMAGE_WIDTH}" />
    <meta property="og:image:height" content="{OG_IMAGE_HEIGHT}" />
    <meta property="og:image:alt" content="{title}" />
    <meta property="og:url" content="{og_url}" />

    <meta name="twitter:card" content="summary_large_image" />
    <meta name="twitter:title" content="{title}" />
    <meta name="twitter:description" content="{description}" />
    <meta name="twitter:image" content="{og_image}" />
  """


def inject_head_block(html: str, block: str) -> str:
    """Insert *block* right before the first ``</head>``; no-op when there is none."""
    return _HEAD_CLOSE_RE.sub(lambda _m: f"{block}\n  </head>", html, count=1)

"""Client for the hosted content REST API (PostgREST-style query syntax)."""

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from sebet.config import ContentApiConfig
from sebet.models.article import ArticleSummary

logger = logging.getLogger(__name__)

_ARTICLE_FIELDS = "slug,title,excerpt,og_image,cover_image"
_ARTICLE_LIMIT = 1000


async def fetch_published_articles(
    config: Optional[ContentApiConfig],
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[ArticleSummary]:
    """Return all published articles, or an empty list if they cannot be fetched.

    Missing credentials, network failures, non-2xx responses and malformed
    bodies are logged and reported as "no articles" so that callers running
    inside a build never fail because of the remote API.
    """
    if config is None:
        logger.warning("Content API credentials are not configured; skipping article fetch.")
        return []

    url = f"{config.base_url.rstrip('/')}/articles"
    params = {"select": _ARTICLE_FIELDS, "status": "eq.published", "limit": str(_ARTICLE_LIMIT)}
    headers = {
        "apikey": config.api_key,
        "Authorization": f"Bearer {config.api_key}",
        "Accept": "application/json",
    }

    try:
        async with httpx.AsyncClient(timeout=config.timeout, transport=transport) as client:
            resp = await client.get(url, params=params, headers=headers)
            resp.raise_for_status()
            rows = resp.json()
    except httpx.HTTPStatusError as exc:
        logger.warning(
            "Failed to fetch articles: %s %s",
            exc.response.status_code,
            exc.response.reason_phrase,
        )
        return []
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Failed to fetch articles: %s", exc)
        return []

    if not isinstance(rows, list):
        logger.warning("Unexpected articles payload of type %s; ignoring it.", type(rows).__name__)
        return []

    articles: List[ArticleSummary] = []
    seen_slugs: set = set()
    for row in rows:
        if not isinstance(row, dict) or not row.get("slug"):
            continue
        try:
            article = ArticleSummary.model_validate(row)
        except ValidationError as exc:
            logger.warning("Skipping article %r: %s", row.get("slug"), exc.errors()[0]["msg"])
            continue
        # Two rows with one slug would race for the same output file.
        if article.slug in seen_slugs:
            logger.warning("Skipping duplicate article slug %r", article.slug)
            continue
        seen_slugs.add(article.slug)
        articles.append(article)
    return articles

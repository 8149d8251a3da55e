from typing import Optional

from pydantic import BaseModel, field_validator


class ArticleSummary(BaseModel):
    """One published article as returned by the content API."""

    slug: str
    title: str
    excerpt: Optional[str] = None
    og_image: Optional[str] = None
    cover_image: Optional[str] = None

    @field_validator("slug")
    @classmethod
    def _slug_is_path_safe(cls, value: str) -> str:
        # The slug becomes a directory name under the output tree.
        value = value.strip()
        if not value or value in (".", "..") or "/" in value or "\\" in value:
            raise ValueError(f"unusable slug {value!r}")
        return value

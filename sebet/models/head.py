from typing import Literal

from pydantic import BaseModel, ConfigDict


class HeadBlockSpec(BaseModel):
    """Values rendered into one page's ``<head>`` metadata block (unescaped)."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    canonical_url: str
    og_type: Literal["website", "article"]
    og_image: str
    og_url: str

from pathlib import Path
from typing import Union

from pydantic import BaseModel

SITE_NAME = "Selo Šebet"
DEFAULT_DESCRIPTION = "Priče, fotografije i istorija sela Šebet."


class PrerenderOptions(BaseModel):
    """Build-hook configuration.

    ``site_url`` must already be normalised (no trailing slash).
    """

    site_url: str
    default_og_image: str
    out_dir: Union[str, Path] = "dist"
    site_name: str = SITE_NAME
    default_description: str = DEFAULT_DESCRIPTION

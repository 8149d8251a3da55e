"""Runtime configuration read from the environment (and an optional ``.env`` file).

Services never read environment variables themselves; they receive one of
the dataclasses below so tests and callers can inject their own values.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_SITE_URL = "https://schebet-moj.lovable.app"

# Checked in order; the first non-blank value wins.
_SUPABASE_URL_VARS = ("SUPABASE_URL", "VITE_SUPABASE_URL", "VITE_PUBLIC_SUPABASE_URL")
_SUPABASE_KEY_VARS = (
    "SUPABASE_SERVICE_ROLE_KEY",
    "SUPABASE_ANON_KEY",
    "VITE_SUPABASE_ANON_KEY",
    "VITE_SUPABASE_PUBLISHABLE_KEY",
)


def _first_env(names) -> Optional[str]:
    for name in names:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return None


@dataclass(frozen=True)
class ContentApiConfig:
    """Connection details for the hosted content REST API."""

    base_url: str  # REST root, e.g. https://<project>.supabase.co/rest/v1
    api_key: str
    timeout: float = 15.0

    @classmethod
    def from_env(cls) -> Optional["ContentApiConfig"]:
        """Return a config built from the environment, or *None* when incomplete."""
        supabase_url = _first_env(_SUPABASE_URL_VARS)
        api_key = _first_env(_SUPABASE_KEY_VARS)
        if not supabase_url or not api_key:
            return None
        return cls(base_url=f"{supabase_url.rstrip('/')}/rest/v1", api_key=api_key)


@dataclass(frozen=True)
class IdentityConfig:
    """Credentials used to ask the hosted backend who a caller is."""

    supabase_url: str
    service_role_key: str
    timeout: float = 10.0

    @classmethod
    def from_env(cls) -> Optional["IdentityConfig"]:
        supabase_url = os.environ.get("SUPABASE_URL", "").strip()
        service_role_key = os.environ.get("SUPABASE_SERVICE_ROLE_KEY", "").strip()
        if not supabase_url or not service_role_key:
            return None
        return cls(supabase_url=supabase_url.rstrip("/"), service_role_key=service_role_key)


@dataclass
class Settings:
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.environ.get("CORS_ALLOW_ORIGINS", "*")
        return cls(
            cors_allow_origins=[o.strip() for o in origins.split(",") if o.strip()] or ["*"],
        )

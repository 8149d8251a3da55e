"""Thin client for the hosted backend's identity and role checks.

The backend owns users and roles; this module only asks it who a bearer
token belongs to and whether that user holds a role.
"""

import logging
from typing import Optional

import httpx

from sebet.config import IdentityConfig

logger = logging.getLogger(__name__)


class IdentityUnavailableError(RuntimeError):
    """Raised when the identity backend is not configured."""


def _require(config: Optional[IdentityConfig]) -> IdentityConfig:
    if config is None:
        raise IdentityUnavailableError("SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY are not configured.")
    return config


async def get_user_id(
    config: Optional[IdentityConfig],
    token: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[str]:
    """Return the id of the user owning *token*, or *None* if the token is not valid.

    Raises:
        IdentityUnavailableError: when the backend is not configured.
        httpx.RequestError: on network errors.
    """
    config = _require(config)
    async with httpx.AsyncClient(timeout=config.timeout, transport=transport) as client:
        resp = await client.get(
            f"{config.supabase_url}/auth/v1/user",
            headers={"apikey": config.service_role_key, "Authorization": f"Bearer {token}"},
        )
    if resp.status_code != 200:
        logger.warning("Authentication failed: HTTP %d", resp.status_code)
        return None
    try:
        user_id = resp.json().get("id")
    except (ValueError, AttributeError):
        return None
    return str(user_id) if user_id else None


async def has_role(
    config: Optional[IdentityConfig],
    user_id: str,
    role: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> bool:
    """Return *True* when the backend's ``has_role`` function confirms *role* for *user_id*."""
    config = _require(config)
    async with httpx.AsyncClient(timeout=config.timeout, transport=transport) as client:
        resp = await client.post(
            f"{config.supabase_url}/rest/v1/rpc/has_role",
            json={"_user_id": user_id, "_role": role},
            headers={
                "apikey": config.service_role_key,
                "Authorization": f"Bearer {config.service_role_key}",
            },
        )
    if resp.status_code != 200:
        logger.warning("Role check for %s failed: HTTP %d", role, resp.status_code)
        return False
    try:
        return resp.json() is True
    except ValueError:
        return False

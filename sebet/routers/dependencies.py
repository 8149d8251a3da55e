"""Request dependencies shared by the routers."""

import logging
from typing import Optional

import httpx
from fastapi import Header, HTTPException

from sebet.config import IdentityConfig
from sebet.services.identity import IdentityUnavailableError, get_user_id, has_role

logger = logging.getLogger(__name__)

EDITOR_ROLES = ("author", "admin")


def get_identity_config() -> Optional[IdentityConfig]:
    return IdentityConfig.from_env()


async def require_editor(authorization: Optional[str] = Header(default=None)) -> str:
    """Resolve the caller to a user id holding an editor role, or reject the request."""
    if not authorization:
        logger.warning("No authorization header provided")
        raise HTTPException(status_code=401, detail="Niste prijavljeni")

    token = authorization.removeprefix("Bearer ").strip()
    config = get_identity_config()

    try:
        user_id = await get_user_id(config, token)
        if user_id is None:
            raise HTTPException(status_code=401, detail="Neovlašćen pristup")

        for role in EDITOR_ROLES:
            if await has_role(config, user_id, role):
                return user_id
    except IdentityUnavailableError as exc:
        logger.error("Identity backend unavailable: %s", exc)
        raise HTTPException(status_code=503, detail="Servis za autentifikaciju nije dostupan")
    except httpx.RequestError as exc:
        logger.error("Identity backend request failed: %s", exc)
        raise HTTPException(status_code=502, detail="Servis za autentifikaciju nije dostupan")

    raise HTTPException(status_code=403, detail="Nemate dozvolu za ovu akciju")

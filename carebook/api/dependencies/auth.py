# carebook/api/dependencies/auth.py
"""
Caller identity dependencies.

Authentication happens upstream. The gateway forwards the verified caller as
``X-User-Id``, ``X-User-Role`` and, for providers, ``X-Provider-Id``; this
module only turns those headers into an ``Actor``.
"""

import logging
from typing import Optional

from fastapi import Header, HTTPException, status

from ...core.constants import ACTOR_ID_HEADER, ACTOR_PROVIDER_HEADER, ACTOR_ROLE_HEADER
from ...core.enums import UserRole
from ...principal import Actor

logger = logging.getLogger(__name__)


def get_current_actor(
    x_user_id: Optional[str] = Header(None, alias=ACTOR_ID_HEADER),
    x_user_role: Optional[str] = Header(None, alias=ACTOR_ROLE_HEADER),
    x_provider_id: Optional[str] = Header(None, alias=ACTOR_PROVIDER_HEADER),
) -> Actor:
    if not x_user_id or not x_user_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing caller identity",
        )
    try:
        role = UserRole(x_user_role.strip().upper())
    except ValueError:
        logger.warning("Rejected request with unknown role %r", x_user_role)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Unknown role: {x_user_role}",
        )

    provider_id = x_provider_id if role == UserRole.PROVIDER else None
    return Actor(user_id=x_user_id, role=role, provider_id=provider_id)

"""Shared helpers for tests."""

from datetime import datetime

from carebook.core.timezone_utils import get_platform_timezone
from carebook.principal import Actor


def actor_headers(actor: Actor) -> dict:
    """Identity headers the upstream gateway would forward for ``actor``."""
    headers = {"X-User-Id": actor.user_id, "X-User-Role": actor.role.value}
    if actor.provider_id:
        headers["X-Provider-Id"] = actor.provider_id
    return headers


def aware(dt: datetime) -> datetime:
    """Localize a naive wall-clock datetime to the platform timezone."""
    return get_platform_timezone().localize(dt)

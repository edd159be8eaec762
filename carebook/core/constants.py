"""Application-wide constants for the CareBook platform."""

from __future__ import annotations

BRAND_NAME = "CareBook"

API_TITLE = f"{BRAND_NAME} API"
API_DESCRIPTION = (
    f"Backend API for {BRAND_NAME} - a marketplace connecting patients with "
    "home healthcare providers"
)
API_VERSION = "1.0.0"

# Text constraints
MAX_NOTES_LENGTH = 1000
MAX_REASON_LENGTH = 1000

# Query limits
DEFAULT_QUERY_LIMIT = 100
MAX_QUERY_LIMIT = 1000

# Caller identity headers set by the upstream auth gateway
ACTOR_ID_HEADER = "X-User-Id"
ACTOR_ROLE_HEADER = "X-User-Role"
ACTOR_PROVIDER_HEADER = "X-Provider-Id"

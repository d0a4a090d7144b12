"""
mediagate/core/constants.py

Application-wide fixed constants.

These are business rules that are part of the system's contract and are
NOT configurable via environment variables.
"""

from typing import Any, Dict, FrozenSet, Mapping

# ── Accepted media ─────────────────────────────────────────────────────────────

#: MIME types the upload gateway accepts by default (order kept for messages).
ALLOWED_IMAGE_TYPES: tuple = ("image/jpeg", "image/png", "image/gif", "image/webp")

#: MIME types the avatar picker accepts; browsers still emit image/jpg.
AVATAR_IMAGE_TYPES: FrozenSet[str] = frozenset(
    {"image/jpeg", "image/png", "image/jpg", "image/gif", "image/webp"}
)

BYTES_PER_MB: int = 1024 * 1024

# ── Provider defaults ──────────────────────────────────────────────────────────

#: Options applied to every upload unless the caller overrides the key.
DEFAULT_UPLOAD_OPTIONS: Mapping[str, Any] = {
    "resource_type": "auto",
    "quality": "auto",
    "fetch_format": "auto",
    "transformation": [
        {"width": 1920, "crop": "limit"},
        {"quality": "auto:good"},
    ],
}

#: Folder and transformation used for profile pictures.
AVATAR_FOLDER: str = "profile_pictures"
AVATAR_TRANSFORMATION: list = [
    {"width": 500, "height": 500, "crop": "fill", "gravity": "face"},
]

#: HTTP status the provider uses for an oversized request body.
PAYLOAD_TOO_LARGE_STATUS: int = 413

# ── Client session storage ─────────────────────────────────────────────────────

ACCESS_TOKEN_KEY: str = "authToken"
REFRESH_TOKEN_KEY: str = "refreshToken"

# ── API endpoints & navigation targets ─────────────────────────────────────────

REFRESH_ENDPOINT: str = "/auth/refresh"
UPDATE_PROFILE_ENDPOINT: str = "/auth/update-profile"

SESSION_EXPIRED_ROUTE: str = "/login?session_expired=true"

#: Where the UI is sent for error statuses the client does not recover from.
ERROR_ROUTES: Dict[int, str] = {
    403: "/forbidden",
    404: "/not-found",
    500: "/server-error",
}

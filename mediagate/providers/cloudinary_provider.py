"""
mediagate/providers/cloudinary_provider.py

Cloudinary implementation of the MediaProvider interface.

The SDK is configured once per process from settings; passing explicit
credentials re-configures it (useful for scripts and tests).
"""

from __future__ import annotations

import re
from typing import Any, Dict, Optional

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader

from mediagate.core.config import settings
from mediagate.core.exceptions import ProviderError
from mediagate.core.logger import get_logger
from mediagate.providers.base import MediaProvider, UploadSource

logger = get_logger(__name__)

# The SDK only carries the HTTP status inside the message for unexpected codes
# ("Server returned unexpected status code - 413 - ...").
_UNEXPECTED_STATUS = re.compile(r"status code - (\d{3})")

_STATUS_BY_ERROR = {
    cloudinary.exceptions.BadRequest: 400,
    cloudinary.exceptions.AuthorizationRequired: 401,
    cloudinary.exceptions.NotAllowed: 403,
    cloudinary.exceptions.NotFound: 404,
    cloudinary.exceptions.AlreadyExists: 409,
    cloudinary.exceptions.RateLimited: 420,
}


def _status_of(exc: Exception) -> Optional[int]:
    code = getattr(exc, "http_code", None)
    if code:
        return int(code)
    for error_cls, status in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_cls):
            return status
    match = _UNEXPECTED_STATUS.search(str(exc))
    return int(match.group(1)) if match else None


class CloudinaryProvider(MediaProvider):
    """MediaProvider backed by the official ``cloudinary`` SDK."""

    def __init__(
        self,
        cloud_name: str | None = None,
        api_key: str | None = None,
        api_secret: str | None = None,
    ) -> None:
        cloudinary.config(
            cloud_name=cloud_name or settings.cloudinary_cloud_name,
            api_key=api_key or settings.cloudinary_api_key,
            api_secret=api_secret or settings.cloudinary_api_secret,
            secure=True,   # always hand out HTTPS URLs
        )

    # ── MediaProvider interface ────────────────────────────────────────────────

    def upload(self, source: UploadSource, options: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return cloudinary.uploader.upload(source, **options)
        except cloudinary.exceptions.Error as exc:
            raise ProviderError(str(exc), status_code=_status_of(exc)) from exc

    def upload_large(self, source: UploadSource, options: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return cloudinary.uploader.upload_large(source, **options)
        except cloudinary.exceptions.Error as exc:
            raise ProviderError(str(exc), status_code=_status_of(exc)) from exc

    def destroy(self, public_id: str, resource_type: str = "image") -> None:
        try:
            response = cloudinary.uploader.destroy(public_id, resource_type=resource_type)
        except cloudinary.exceptions.Error as exc:
            raise ProviderError(str(exc), status_code=_status_of(exc)) from exc

        # destroy() reports a missing asset in the body, not as an error.
        outcome = response.get("result")
        if outcome != "ok":
            logger.info("Delete of '%s' reported '%s'.", public_id, outcome)
            status = 404 if outcome == "not found" else None
            raise ProviderError(f"Delete failed: {outcome}", status_code=status)

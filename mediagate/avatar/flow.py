"""
mediagate/avatar/flow.py

Profile picture upload, from file selection to the stored profile URL:

    Idle ─► Validating ─► Uploading (preview shown) ─► Succeeded | Failed ─► Idle

Client-side checks run before any preview is made, so a rejected file is
never rendered and never uploaded.
"""

from __future__ import annotations

import base64
from enum import Enum
from pathlib import Path
from typing import Optional

from mediagate.client.api_client import ApiClient
from mediagate.core.constants import (
    AVATAR_FOLDER,
    AVATAR_IMAGE_TYPES,
    AVATAR_TRANSFORMATION,
    BYTES_PER_MB,
    UPDATE_PROFILE_ENDPOINT,
)
from mediagate.core.exceptions import ApiError
from mediagate.core.logger import get_logger
from mediagate.models.upload_models import MediaFile
from mediagate.services.upload_service import UploadService

logger = get_logger(__name__)

INVALID_TYPE_ERROR = "Please upload a valid image (JPEG, PNG, JPG, GIF, or WEBP)"
MISSING_SOURCE_ERROR = "Selected file has no content"


class AvatarState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    UPLOADING = "uploading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def make_preview(file: MediaFile) -> str:
    """Return a ``data:`` URL for ``file``; no network involved."""
    raw = file.content if file.content is not None else Path(file.path).read_bytes()
    return f"data:{file.content_type};base64,{base64.b64encode(raw).decode('ascii')}"


class AvatarUploadFlow:
    """
    State holder for one avatar upload at a time.

    Attributes read by the UI:
        state       : Current AvatarState.
        preview     : Local data URL of the selected image, or None.
        progress    : Upload progress in whole percent (0 when idle).
        error       : Message to show, or None.
        profile_pic : URL currently stored on the profile.
    """

    def __init__(
        self,
        uploader: UploadService,
        api_client: ApiClient,
        max_size_mb: int = 10,
        profile_pic: Optional[str] = None,
    ) -> None:
        self._uploader = uploader
        self._api = api_client
        self._max_size_mb = max_size_mb

        self.state: AvatarState = AvatarState.IDLE
        self.preview: Optional[str] = None
        self.progress: int = 0
        self.error: Optional[str] = None
        self.profile_pic: Optional[str] = profile_pic

    # ── Public API ─────────────────────────────────────────────────────────────

    async def handle(self, file: Optional[MediaFile]) -> AvatarState:
        """Run the full flow for a newly selected file and return the final state."""
        if file is None:
            return self.state
        if self.state is AvatarState.UPLOADING:
            logger.warning("Ignoring '%s' - an upload is already in progress.", file.filename)
            return self.state

        self.error = None
        self.progress = 0
        self.state = AvatarState.VALIDATING

        problem = self._check(file)
        if problem:
            return self._fail(problem)

        try:
            self.preview = make_preview(file)
        except OSError as exc:
            logger.error("Could not read '%s' for preview: %s", file.filename, exc)
            return self._fail(f"Could not read the selected file: {exc.strerror or exc}")

        self.state = AvatarState.UPLOADING

        try:
            result = await self._uploader.upload(
                file,
                {"folder": AVATAR_FOLDER, "transformation": AVATAR_TRANSFORMATION},
                on_progress=self._track,
            )
            if not result.success:
                return self._fail(result.error or "Upload failed")

            await self._api.put(UPDATE_PROFILE_ENDPOINT, json={"profilePic": result.url})
        except ApiError as exc:
            logger.error("Profile update failed: %s", exc)
            return self._fail(str(exc) or "Failed to upload image")
        finally:
            self.progress = 0

        self.profile_pic = result.url
        self.state = AvatarState.SUCCEEDED
        logger.info("Profile picture updated → %s", result.url)
        return self.state

    def remove_image(self) -> None:
        self.preview = None
        self.error = None

    def reset(self) -> None:
        self.remove_image()
        self.progress = 0
        self.state = AvatarState.IDLE

    # ── Internals ──────────────────────────────────────────────────────────────

    def _check(self, file: MediaFile) -> Optional[str]:
        if file.content_type not in AVATAR_IMAGE_TYPES:
            return INVALID_TYPE_ERROR
        if file.content is None and not file.path:
            return MISSING_SOURCE_ERROR
        if file.size > self._max_size_mb * BYTES_PER_MB:
            return f"Image exceeds {self._max_size_mb}MB limit. Please choose a smaller file."
        return None

    def _track(self, loaded: int, total: int) -> None:
        self.progress = round(loaded / total * 100) if total else 100

    def _fail(self, message: str) -> AvatarState:
        logger.warning("Avatar upload failed: %s", message)
        self.preview = None
        self.error = message
        self.state = AvatarState.FAILED
        return self.state

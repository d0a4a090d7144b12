"""
mediagate/services/upload_service.py

The media upload gateway:

    MediaFile + caller options
      └─ validate_file()              type / size, no network
           └─ merge_options()         defaults ← caller
                └─ MediaProvider.upload()        size <  threshold
                   MediaProvider.upload_large()  size >= threshold (chunked)
                     └─ Map → UploadSuccess | UploadFailure

Nothing raised inside the pipeline escapes ``upload`` or ``delete``;
every failure comes back as a result object.
"""

from __future__ import annotations

import asyncio
import io
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from mediagate.core.config import settings
from mediagate.core.constants import (
    ALLOWED_IMAGE_TYPES,
    BYTES_PER_MB,
    DEFAULT_UPLOAD_OPTIONS,
    PAYLOAD_TOO_LARGE_STATUS,
)
from mediagate.core.exceptions import ProviderError, UploadValidationError
from mediagate.core.logger import get_logger
from mediagate.models.upload_models import (
    DeleteResult,
    FailureKind,
    MediaFile,
    UploadFailure,
    UploadResult,
    UploadSuccess,
)
from mediagate.providers.base import MediaProvider, UploadSource
from mediagate.providers.cloudinary_provider import CloudinaryProvider
from mediagate.services.options import merge_options
from mediagate.validation.file_validator import validate_file

logger = get_logger(__name__)

#: Called with (loaded_bytes, total_bytes).
ProgressCallback = Callable[[int, int], None]

COMPRESS_SUGGESTION = "Please compress the image before uploading"
TOO_LARGE_ERROR = "Image too large for the media provider"
TOO_LARGE_SUGGESTION = "Try reducing the image size below 10MB or upgrade your media plan"


class UploadService:
    """
    Validates files and forwards them to a media provider.

    Design choices:
    - **Fail fast**: validation runs before the provider is touched, so an
      invalid file never costs a network round-trip.
    - **Results, not exceptions**: callers branch on ``result.success`` and
      ``result.kind`` instead of parsing error messages.
    - **Constructor injection**: the provider and limits are passed in so
      tests can swap in a mock provider.
    """

    def __init__(
        self,
        provider: MediaProvider | None = None,
        max_size_mb: int | None = None,
        allowed_types: Iterable[str] = ALLOWED_IMAGE_TYPES,
        large_file_threshold_mb: int | None = None,
        chunk_size: int | None = None,
    ) -> None:
        self._provider: MediaProvider = provider or CloudinaryProvider()
        self._max_size_mb: int = max_size_mb or settings.upload_max_size_mb
        self._allowed_types = tuple(allowed_types)
        self._large_threshold: int = (
            large_file_threshold_mb or settings.large_file_threshold_mb
        ) * BYTES_PER_MB
        self._chunk_size: int = chunk_size or settings.upload_chunk_size

    # ── Public API ─────────────────────────────────────────────────────────────

    async def upload(
        self,
        file: Optional[MediaFile],
        options: Optional[Mapping[str, Any]] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> UploadResult:
        """
        Validate ``file`` and upload it with the default options overridden
        by ``options`` key-by-key.

        Args:
            file        : The file to upload.
            options     : Caller options (folder, transformation,
                          resource_type, chunk_size, ...).
            on_progress : Optional progress callback, called on the event loop
                          before and after the transfer.

        Returns:
            UploadSuccess, or UploadFailure with ``kind`` set to
            validation / payload_too_large / provider.
        """
        try:
            self._validate(file)
            if on_progress:
                on_progress(0, file.size)
            result = await asyncio.to_thread(self._transfer, file, options or {})
            if on_progress:
                on_progress(file.size, file.size)

        except UploadValidationError as exc:
            logger.warning("Upload rejected before transfer - %s", exc)
            return UploadFailure(
                kind=FailureKind.VALIDATION,
                error=str(exc),
                suggestion=COMPRESS_SUGGESTION if self._is_oversize(file) else None,
            )

        except ProviderError as exc:
            return self._provider_failure(exc)

        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error uploading '%s': %s", getattr(file, "filename", "?"), exc)
            return UploadFailure(kind=FailureKind.PROVIDER, error="Image upload failed", status_code=500)

        logger.info(
            "Uploaded '%s' → %s (%s)", file.filename, result.public_id, result.resource_type
        )
        return result

    async def delete(self, public_id: str, resource_type: str = "image") -> DeleteResult:
        """
        Delete an uploaded asset. A missing asset is reported as a failure,
        not retried.
        """
        try:
            await asyncio.to_thread(self._provider.destroy, public_id, resource_type)
        except ProviderError as exc:
            logger.warning("Delete of '%s' failed - %s", public_id, exc)
            return DeleteResult(success=False, error=str(exc), status_code=exc.status_code)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error deleting '%s': %s", public_id, exc)
            return DeleteResult(success=False, error="Delete failed", status_code=500)

        logger.info("Deleted '%s' (%s)", public_id, resource_type)
        return DeleteResult(success=True)

    # ── Internals ──────────────────────────────────────────────────────────────

    def _validate(self, file: Optional[MediaFile]) -> None:
        check = validate_file(file, max_size_mb=self._max_size_mb, allowed_types=self._allowed_types)
        if not check.valid:
            raise UploadValidationError(check.error)

    def _build_options(self, file: MediaFile, options: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Merge defaults, buffer-derived resource type, then caller options.
        Later sources win; ``chunk_size`` is only kept for chunked transfers.
        """
        derived: Dict[str, Any] = {}
        if file.is_buffer:
            derived["resource_type"] = "video" if file.content_type.startswith("video/") else "image"

        merged = merge_options(DEFAULT_UPLOAD_OPTIONS, derived, options)
        if self._is_large(file):
            merged.setdefault("chunk_size", self._chunk_size)
        else:
            merged.pop("chunk_size", None)
        return merged

    def _is_oversize(self, file: Optional[MediaFile]) -> bool:
        return file is not None and file.size > self._max_size_mb * BYTES_PER_MB

    def _is_large(self, file: MediaFile) -> bool:
        return file.size >= self._large_threshold

    def _transfer(
        self,
        file: MediaFile,
        options: Mapping[str, Any],
    ) -> UploadSuccess:
        """Blocking part of the upload; runs in a worker thread."""
        merged = self._build_options(file, options)
        source = self._source_of(file)

        if self._is_large(file):
            logger.info(
                "'%s' is %d bytes - chunked upload (%d-byte chunks).",
                file.filename, file.size, merged["chunk_size"],
            )
            response = self._provider.upload_large(source, merged)
        else:
            response = self._provider.upload(source, merged)

        return UploadSuccess(
            url=response["secure_url"],
            public_id=response["public_id"],
            resource_type=response["resource_type"],
        )

    def _source_of(self, file: MediaFile) -> UploadSource:
        if file.content is not None:
            # upload_large needs a stream it can read in chunks.
            return io.BytesIO(file.content) if self._is_large(file) else file.content
        return file.path  # type: ignore[return-value]

    @staticmethod
    def _provider_failure(exc: ProviderError) -> UploadFailure:
        if exc.status_code == PAYLOAD_TOO_LARGE_STATUS:
            logger.warning("Provider rejected payload as too large: %s", exc)
            return UploadFailure(
                kind=FailureKind.PAYLOAD_TOO_LARGE,
                error=TOO_LARGE_ERROR,
                suggestion=TOO_LARGE_SUGGESTION,
                status_code=PAYLOAD_TOO_LARGE_STATUS,
            )

        logger.error("Provider upload error: %s", exc)
        return UploadFailure(
            kind=FailureKind.PROVIDER,
            error=str(exc) or "Image upload failed",
            status_code=exc.status_code or 500,
        )


# ── Module-level singleton ─────────────────────────────────────────────────────
# Controllers import this instance.  Tests construct UploadService directly
# with an injected mock provider.

upload_service = UploadService()

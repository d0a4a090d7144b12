"""mediagate/models/__init__.py - shared DTOs."""

from mediagate.models.upload_models import (
    DeleteResult,
    FailureKind,
    MediaFile,
    UploadFailure,
    UploadResult,
    UploadSuccess,
    ValidationResult,
)

__all__ = [
    "MediaFile",
    "ValidationResult",
    "FailureKind",
    "UploadSuccess",
    "UploadFailure",
    "UploadResult",
    "DeleteResult",
]

"""
mediagate/models/upload_models.py

DTOs for the upload flow.

``MediaFile`` is the in-process upload request; the result models are
Pydantic so controllers can return them as JSON unchanged:

    { "success": true,  "url": "...", "public_id": "...", "resource_type": "image" }
    { "success": false, "kind": "validation", "error": "File exceeds 10MB size limit" }
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel


@dataclass
class MediaFile:
    """
    A file on its way to the media provider.

    Attributes:
        content_type : Declared MIME type (e.g. "image/png").
        size         : Size in bytes, as reported by the sender.
        filename     : Original filename, used for logging and the provider.
        content      : In-memory bytes. Takes precedence over ``path``.
        path         : Filesystem path when the file is already on disk.
    """

    content_type: str
    size: int
    filename: str = "upload"
    content: Optional[bytes] = None
    path: Optional[str] = None

    @classmethod
    def from_bytes(cls, content: bytes, content_type: str, filename: str = "upload") -> "MediaFile":
        return cls(content_type=content_type, size=len(content), filename=filename, content=content)

    @property
    def is_buffer(self) -> bool:
        return self.content is not None


class ValidationResult(BaseModel):
    valid: bool
    error: Optional[str] = None


class FailureKind(str, Enum):
    """Why an upload failed - the discriminant callers branch on."""

    VALIDATION = "validation"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    PROVIDER = "provider"


class UploadSuccess(BaseModel):
    success: Literal[True] = True
    url: str
    public_id: str
    resource_type: str


class UploadFailure(BaseModel):
    success: Literal[False] = False
    kind: FailureKind
    error: str
    suggestion: Optional[str] = None
    status_code: Optional[int] = None


UploadResult = Union[UploadSuccess, UploadFailure]


class DeleteResult(BaseModel):
    success: bool
    error: Optional[str] = None
    status_code: Optional[int] = None

"""mediagate/providers/__init__.py - public API of the providers package."""

from mediagate.providers.base import MediaProvider, UploadSource
from mediagate.providers.cloudinary_provider import CloudinaryProvider

__all__ = [
    "MediaProvider",
    "UploadSource",
    "CloudinaryProvider",
]

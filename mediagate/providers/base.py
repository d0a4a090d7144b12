"""
mediagate/providers/base.py

Abstract interface for the external media provider.

Design goals:
  - UploadService depends only on this interface, never on the provider SDK.
  - Adapters translate SDK failures into ProviderError so the gateway has
    one error type to map.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import IO, Any, Dict, Union

#: A path on disk, raw bytes, or a readable binary stream.
UploadSource = Union[str, bytes, IO[bytes]]


class MediaProvider(ABC):
    """
    Contract every media-hosting backend must fulfil.

    All methods are blocking; callers in async code run them in a worker
    thread.
    """

    @abstractmethod
    def upload(self, source: UploadSource, options: Dict[str, Any]) -> Dict[str, Any]:
        """
        Upload ``source`` in a single request.

        Returns:
            The provider's response; must contain ``secure_url``,
            ``public_id`` and ``resource_type``.

        Raises:
            ProviderError: If the provider rejects the upload.
        """

    @abstractmethod
    def upload_large(self, source: UploadSource, options: Dict[str, Any]) -> Dict[str, Any]:
        """
        Upload ``source`` in fixed-size chunks (``options["chunk_size"]``).

        Returns / Raises: same as :meth:`upload`.
        """

    @abstractmethod
    def destroy(self, public_id: str, resource_type: str = "image") -> None:
        """
        Delete a stored asset.

        Raises:
            ProviderError: If the asset does not exist or the call fails.
        """

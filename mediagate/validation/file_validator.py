"""
mediagate/validation/file_validator.py

Pre-flight checks run before anything touches the network.
"""

from __future__ import annotations

from typing import Iterable, Optional

from mediagate.core.constants import ALLOWED_IMAGE_TYPES, BYTES_PER_MB
from mediagate.models.upload_models import MediaFile, ValidationResult


def validate_file(
    file: Optional[MediaFile],
    max_size_mb: int = 10,
    allowed_types: Iterable[str] = ALLOWED_IMAGE_TYPES,
) -> ValidationResult:
    """
    Check presence, MIME type and size of ``file``, in that order.

    Args:
        file          : The candidate upload, or None when nothing was sent.
        max_size_mb   : Size ceiling in megabytes (inclusive).
        allowed_types : Accepted MIME types.

    Returns:
        ValidationResult with ``valid=False`` and a human-readable ``error``
        on the first failed check.
    """
    allowed = list(allowed_types)

    if file is None:
        return ValidationResult(valid=False, error="No file provided")

    if file.content_type not in allowed:
        return ValidationResult(
            valid=False,
            error=f"File type not allowed. Allowed types: {', '.join(allowed)}",
        )

    if file.size > max_size_mb * BYTES_PER_MB:
        return ValidationResult(valid=False, error=f"File exceeds {max_size_mb}MB size limit")

    return ValidationResult(valid=True)

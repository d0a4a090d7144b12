"""
mediagate/api/media_controller.py

Handles incoming requests to /media.

This layer is responsible only for HTTP concerns:
  - Reading the multipart upload into a MediaFile.
  - Delegating validation and the provider call to UploadService.
  - Translating UploadFailure kinds into HTTP status codes.

Responses (POST /media/upload):
  200  Upload succeeded.  Body: { success, url, public_id, resource_type }.
  400  The file was rejected before upload (missing, wrong type, too big).
  413  The media provider rejected the payload as too large.
  502  The media provider failed for any other reason.

Responses (DELETE /media/{public_id}):
  200  Asset deleted.
  404  The asset does not exist on the media provider.
  502  The media provider failed for any other reason.
"""

from typing import Optional

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import JSONResponse

from mediagate.core.logger import get_logger
from mediagate.models.upload_models import DeleteResult, FailureKind, MediaFile, UploadSuccess
from mediagate.services.upload_service import upload_service

logger = get_logger(__name__)

router = APIRouter(prefix="/media", tags=["Media"])

_STATUS_BY_KIND = {
    FailureKind.VALIDATION: 400,
    FailureKind.PAYLOAD_TOO_LARGE: 413,
    FailureKind.PROVIDER: 502,
}


# ── Helpers ────────────────────────────────────────────────────────────────────

async def _to_media_file(upload: Optional[UploadFile]) -> Optional[MediaFile]:
    if upload is None:
        return None
    content = await upload.read()
    return MediaFile(
        content_type=upload.content_type or "application/octet-stream",
        size=len(content),
        filename=upload.filename or "upload",
        content=content,
    )


# ── Endpoints ──────────────────────────────────────────────────────────────────

@router.post("/upload", response_model=UploadSuccess, summary="Upload an image")
async def upload_media(
    file: Optional[UploadFile] = File(default=None),
    folder: Optional[str] = Form(default=None),
) -> JSONResponse:
    """
    Accepts a multipart form with:

      file    (required) - the image to upload (jpeg, png, gif or webp).
      folder  (optional) - destination folder on the media provider.
    """
    media = await _to_media_file(file)
    logger.info(
        "Upload request received - %s",
        f"'{media.filename}' ({media.size} bytes)" if media else "no file",
    )

    result = await upload_service.upload(media, {"folder": folder})

    if result.success:
        return JSONResponse(status_code=200, content=result.model_dump())

    status = _STATUS_BY_KIND[result.kind]
    return JSONResponse(status_code=status, content=result.model_dump(mode="json"))


@router.delete("/{public_id:path}", response_model=DeleteResult, summary="Delete an uploaded asset")
async def delete_media(public_id: str, resource_type: str = "image") -> JSONResponse:
    """Delete ``public_id`` (may contain folder slashes) from the media provider."""
    logger.info("Delete request received - '%s' (%s)", public_id, resource_type)

    result = await upload_service.delete(public_id, resource_type=resource_type)

    if result.success:
        status = 200
    elif result.status_code == 404:
        status = 404
    else:
        status = 502
    return JSONResponse(status_code=status, content=result.model_dump())

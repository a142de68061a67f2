"""
Image upload storage.

Uploaded images are written below ``UPLOAD_DIR`` and served by the static
files mount at ``/uploads``. Stored paths are returned as public URLs such as
``/uploads/profile-pictures/1700000000000-photo.png``.
"""

from __future__ import annotations

import logging
import re
import time
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from travel_buddy.core.exceptions import ValidationFailed
from travel_buddy.server.core.config import settings
from travel_buddy.server.core.constant import UPLOADS_URL_PATH

logger = logging.getLogger(__name__)

PROFILE_PICTURES = "profile-pictures"
MARKETPLACE = "marketplace"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
_CHUNK_SIZE = 64 * 1024


def upload_root() -> Path:
    return Path(settings.upload.directory)


def _safe_name(original: Optional[str]) -> str:
    name = Path(original or "upload").name
    name = _UNSAFE_CHARS.sub("-", name).strip("-.") or "upload"
    return f"{int(time.time() * 1000)}-{name}"


async def save_image(upload: Optional[UploadFile], subdirectory: str) -> str:
    """Validate and store an uploaded image.

    Args:
        upload: The multipart file, may be missing
        subdirectory: Folder below the upload root

    Returns:
        Public URL of the stored file

    Raises:
        ValidationFailed: No file, a non-image content type or a file over
            the size limit
    """
    if upload is None or not upload.filename:
        raise ValidationFailed("Please upload a file")
    if not (upload.content_type or "").startswith("image/"):
        raise ValidationFailed("Only image files are allowed")

    max_bytes = settings.upload.max_bytes
    target_dir = upload_root() / subdirectory
    target_dir.mkdir(parents=True, exist_ok=True)
    filename = _safe_name(upload.filename)
    target = target_dir / filename

    written = 0
    with target.open("wb") as fh:
        while True:
            chunk = await upload.read(_CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if written > max_bytes:
                break
            fh.write(chunk)

    if written > max_bytes:
        target.unlink(missing_ok=True)
        raise ValidationFailed(f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB")

    logger.info(f"Stored upload {subdirectory}/{filename} ({written} bytes)")
    return f"{UPLOADS_URL_PATH}/{subdirectory}/{filename}"


def delete_upload(url: Optional[str]) -> bool:
    """Remove a file previously returned by ``save_image``.

    URLs outside the upload mount are ignored.
    """
    prefix = f"{UPLOADS_URL_PATH}/"
    if not url or not url.startswith(prefix):
        return False
    root = upload_root().resolve()
    path = (root / url[len(prefix) :]).resolve()
    if root not in path.parents:
        logger.warning(f"Refusing to delete upload outside the upload root: {url}")
        return False
    if not path.exists():
        return False
    path.unlink()
    logger.info(f"Deleted upload {url}")
    return True

"""
Temporary storage for multipart image uploads

Uploaded files are written to UPLOAD_TEMP_DIR, handed to the image host and
removed afterwards by the caller (see remove_files).
"""
import os
import time
import logging
import secrets
from typing import Iterable, Optional

from fastapi import UploadFile

from app.core.config import settings
from app.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


async def save_upload(upload: Optional[UploadFile], temp_dir: Optional[str] = None,
                      max_bytes: Optional[int] = None) -> Optional[str]:
    """
    Store an uploaded image in the temp directory

    Returns:
        Path of the stored file, or None when no file was sent

    Raises:
        ValidationError: Not an image, or larger than MAX_UPLOAD_BYTES
    """
    if upload is None or not upload.filename:
        return None

    if not (upload.content_type or "").startswith("image/"):
        raise ValidationError("Only image files are allowed!")

    max_bytes = max_bytes or settings.MAX_UPLOAD_BYTES
    content = await upload.read()
    if len(content) > max_bytes:
        raise ValidationError(f"File too large (max {max_bytes // (1024 * 1024)}MB)")

    temp_dir = temp_dir or settings.UPLOAD_TEMP_DIR
    os.makedirs(temp_dir, exist_ok=True)

    extension = os.path.splitext(upload.filename)[1]
    path = os.path.join(temp_dir, f"temp-{int(time.time() * 1000)}-{secrets.token_hex(4)}{extension}")
    with open(path, 'wb') as f:
        f.write(content)
    return path


def remove_files(paths: Iterable[Optional[str]]) -> None:
    """Delete temp files, ignoring missing ones; errors are logged"""
    for path in paths:
        if not path:
            continue
        try:
            if os.path.exists(path):
                os.remove(path)
        except OSError as e:
            logger.error(f"Error deleting temporary upload {path}: {e}")

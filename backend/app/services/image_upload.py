"""
ImgBB image hosting client

Uploads a local image file and returns the public URL.
"""
import logging
from typing import Optional

import httpx

from app.core.config import settings
from app.core.exceptions import ImageUploadError

logger = logging.getLogger(__name__)


class ImgbbClient:
    """Client for the ImgBB upload API"""

    def __init__(self, api_key: Optional[str] = None, upload_url: Optional[str] = None,
                 timeout: float = 30.0, transport: Optional[httpx.BaseTransport] = None):
        self.api_key = api_key if api_key is not None else settings.IMGBB_API_KEY
        self.upload_url = upload_url or settings.IMGBB_UPLOAD_URL
        self.timeout = timeout
        self._transport = transport

    def upload_image(self, path: str) -> str:
        """
        Upload a local image file

        Returns:
            Direct URL of the hosted image

        Raises:
            ImageUploadError: Missing API key, HTTP failure or rejected upload
        """
        if not self.api_key:
            raise ImageUploadError("Image hosting not configured. Set IMGBB_API_KEY")

        try:
            with open(path, 'rb') as f, httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(self.upload_url, params={'key': self.api_key}, files={'image': f})
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"ImgBB upload error: {e}")
            raise ImageUploadError(f"Failed to upload image: {e}")

        if not data.get('success'):
            logger.error(f"ImgBB rejected upload: {data}")
            raise ImageUploadError("Failed to upload image to ImgBB")

        return data['data']['url']

"""
Banner Service
Storefront banners: public active list and admin management
"""
import logging
from typing import List, Optional

from app.core.exceptions import NotFoundError, ValidationError
from app.core.uploads import remove_files
from app.domain.banner import Banner, parse_active_flag
from app.repositories.banner_repository import BannerRepository
from app.services.image_upload import ImgbbClient

logger = logging.getLogger(__name__)


class BannerService:

    def __init__(self, banners: Optional[BannerRepository] = None, images: Optional[ImgbbClient] = None):
        self.banners = banners or BannerRepository()
        self.images = images or ImgbbClient()

    def list_active(self) -> List[Banner]:
        return self.banners.find_active()

    def list_all(self) -> List[Banner]:
        return self.banners.find_all()

    def get_banner(self, banner_id: int) -> Banner:
        banner = self.banners.find_by_id(banner_id)
        if banner is None:
            raise NotFoundError("Banner not found")
        return banner

    def create_banner(self, image_path: Optional[str], title_fr=None, title_ar=None,
                      subtitle_fr=None, subtitle_ar=None, active=None) -> Banner:
        """Upload the image and insert the banner; the temp file is always removed"""
        try:
            if not image_path:
                raise ValidationError("Please upload an image")

            image = self.images.upload_image(image_path)
            banner = self.banners.insert(image, title_fr, title_ar, subtitle_fr, subtitle_ar,
                                         parse_active_flag(active))
        finally:
            remove_files([image_path])

        logger.info(f"Created banner {banner.id}")
        return banner

    def update_banner(self, banner_id: int, image_path: Optional[str] = None, title_fr=None, title_ar=None,
                      subtitle_fr=None, subtitle_ar=None, active=None) -> Banner:
        """Replace banner fields; the stored image is kept unless a new one is uploaded"""
        try:
            current = self.get_banner(banner_id)
            image = self.images.upload_image(image_path) if image_path else current.image
            banner = self.banners.update(banner_id, image, title_fr, title_ar, subtitle_fr, subtitle_ar,
                                         parse_active_flag(active))
        finally:
            remove_files([image_path])

        if banner is None:
            raise NotFoundError("Banner not found")
        return banner

    def delete_banner(self, banner_id: int) -> None:
        if self.banners.delete(banner_id) == 0:
            raise NotFoundError("Banner not found")
        logger.info(f"Deleted banner {banner_id}")

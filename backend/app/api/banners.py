"""
Banners API Endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.core.auth import TokenAdmin, get_current_admin
from app.core.uploads import save_upload
from app.services.banner_service import BannerService

router = APIRouter()


def get_banner_service() -> BannerService:
    return BannerService()


@router.get("")
async def get_active_banners(service: BannerService = Depends(get_banner_service)):
    """Active banners for the storefront, newest first"""
    return [banner.to_dict() for banner in service.list_active()]


@router.get("/all")
async def get_all_banners(
    admin: TokenAdmin = Depends(get_current_admin),
    service: BannerService = Depends(get_banner_service)
):
    return [banner.to_dict() for banner in service.list_all()]


@router.get("/{banner_id}")
async def get_banner(
    banner_id: int,
    admin: TokenAdmin = Depends(get_current_admin),
    service: BannerService = Depends(get_banner_service)
):
    return service.get_banner(banner_id).to_dict()


@router.post("", status_code=201)
async def create_banner(
    image: Optional[UploadFile] = File(None),
    title_fr: Optional[str] = Form(None),
    title_ar: Optional[str] = Form(None),
    subtitle_fr: Optional[str] = Form(None),
    subtitle_ar: Optional[str] = Form(None),
    active: Optional[str] = Form(None),
    admin: TokenAdmin = Depends(get_current_admin),
    service: BannerService = Depends(get_banner_service)
):
    image_path = await save_upload(image)
    banner = service.create_banner(image_path, title_fr, title_ar, subtitle_fr, subtitle_ar, active)
    return banner.to_dict()


@router.put("/{banner_id}")
async def update_banner(
    banner_id: int,
    image: Optional[UploadFile] = File(None),
    title_fr: Optional[str] = Form(None),
    title_ar: Optional[str] = Form(None),
    subtitle_fr: Optional[str] = Form(None),
    subtitle_ar: Optional[str] = Form(None),
    active: Optional[str] = Form(None),
    admin: TokenAdmin = Depends(get_current_admin),
    service: BannerService = Depends(get_banner_service)
):
    image_path = await save_upload(image)
    banner = service.update_banner(banner_id, image_path, title_fr, title_ar, subtitle_fr, subtitle_ar, active)
    return banner.to_dict()


@router.delete("/{banner_id}")
async def delete_banner(
    banner_id: int,
    admin: TokenAdmin = Depends(get_current_admin),
    service: BannerService = Depends(get_banner_service)
):
    service.delete_banner(banner_id)
    return {"msg": "Banner removed"}

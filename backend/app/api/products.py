"""
Products API Endpoints
Public catalog reads and admin product management
"""
import json
from typing import Dict, Optional, Tuple

from fastapi import APIRouter, Depends, Query, Request
from starlette.datastructures import UploadFile

from app.core.auth import TokenAdmin, get_current_admin
from app.core.exceptions import ValidationError
from app.core.uploads import remove_files, save_upload
from app.domain.product import ProductSave
from app.services.product_service import ProductService

router = APIRouter()

COLOR_IMAGE_PREFIX = "colorImage_"
PRODUCT_FIELDS = ("name_fr", "name_ar", "desc_fr", "desc_ar", "price", "discount", "category", "stock")


def get_product_service() -> ProductService:
    return ProductService()


async def read_product_form(request: Request) -> Tuple[ProductSave, Optional[str], Dict[int, str]]:
    """
    Parse the multipart product form

    Returns:
        (payload, product image temp path, {color index: color image temp path})
    """
    form = await request.form()
    saved = []
    try:
        image = form.get("image")
        image_path = await save_upload(image) if isinstance(image, UploadFile) else None
        saved.append(image_path)

        color_paths: Dict[int, str] = {}
        for key, value in form.multi_items():
            if not key.startswith(COLOR_IMAGE_PREFIX) or not isinstance(value, UploadFile):
                continue
            try:
                index = int(key[len(COLOR_IMAGE_PREFIX):])
            except ValueError:
                continue
            path = await save_upload(value)
            saved.append(path)
            if path:
                color_paths[index] = path

        fields = {name: form.get(name) for name in PRODUCT_FIELDS if isinstance(form.get(name), str)}
        colors = form.get("colors")
        if isinstance(colors, str) and colors.strip():
            try:
                fields["colors"] = json.loads(colors)
            except json.JSONDecodeError:
                raise ValidationError("Invalid colors payload")

        return ProductSave(**fields), image_path, color_paths
    except Exception:
        remove_files(saved)
        raise


# ============================================================================
# Catalog (public)
# ============================================================================

@router.get("/search")
async def search_products(
    q: Optional[str] = Query(None, description="Text to search in names and descriptions"),
    sort: Optional[str] = Query(None, description="newest, price_asc, price_desc, discount, name_asc, name_desc"),
    service: ProductService = Depends(get_product_service)
):
    return [product.to_dict() for product in service.search(q, sort)]


@router.get("")
async def get_products(
    sort: Optional[str] = Query(None),
    service: ProductService = Depends(get_product_service)
):
    return [product.to_dict() for product in service.list_products(sort)]


@router.get("/discounted")
async def get_discounted_products(
    sort: Optional[str] = Query(None, description="Defaults to highest discount first"),
    service: ProductService = Depends(get_product_service)
):
    return [product.to_dict() for product in service.list_discounted(sort)]


@router.get("/category/{category}")
async def get_category_products(
    category: str,
    sort: Optional[str] = Query(None),
    service: ProductService = Depends(get_product_service)
):
    return [product.to_dict() for product in service.list_by_category(category, sort)]


@router.get("/{product_id}")
async def get_product(
    product_id: int,
    service: ProductService = Depends(get_product_service)
):
    return service.get_product(product_id).to_dict()


@router.get("/{product_id}/colors")
async def get_product_colors(
    product_id: int,
    service: ProductService = Depends(get_product_service)
):
    return [color.model_dump() for color in service.get_colors(product_id)]


# ============================================================================
# Admin
# ============================================================================

@router.post("", status_code=201)
async def create_product(
    request: Request,
    admin: TokenAdmin = Depends(get_current_admin),
    service: ProductService = Depends(get_product_service)
):
    """
    Create a product from a multipart form

    Fields: name_fr, name_ar, desc_fr, desc_ar, price, discount, category,
    stock, colors (JSON list), image (required), colorImage_<index>
    """
    payload, image_path, color_paths = await read_product_form(request)
    product = service.save_product(payload, image_path=image_path, color_image_paths=color_paths)
    return product.to_dict()


@router.put("/{product_id}")
async def update_product(
    product_id: int,
    request: Request,
    admin: TokenAdmin = Depends(get_current_admin),
    service: ProductService = Depends(get_product_service)
):
    """Update a product and reconcile its colors; the image is optional"""
    payload, image_path, color_paths = await read_product_form(request)
    product = service.save_product(payload, product_id=product_id, image_path=image_path,
                                   color_image_paths=color_paths)
    return product.to_dict()


@router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    admin: TokenAdmin = Depends(get_current_admin),
    service: ProductService = Depends(get_product_service)
):
    service.delete_product(product_id)
    return {"msg": "Product removed"}

"""
Product Service
Catalog reads and the admin product-save operation

Saving a product writes the product row and reconciles its colors in one
transaction: colors missing from the submitted list are deleted, new ones
inserted and the rest updated in place.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from app.core.database import Database, db as default_db
from app.core.exceptions import NotFoundError, ShopError, TransactionFailure, ValidationError
from app.core.uploads import remove_files
from app.domain.product import ColorIn, Product, ProductColor, ProductSave
from app.repositories.product_repository import ProductRepository
from app.services.image_upload import ImgbbClient

logger = logging.getLogger(__name__)


def parse_decimal(value) -> Decimal:
    """Form numbers; blank or malformed values count as 0"""
    try:
        return Decimal(str(value).strip()) if value not in (None, "") else Decimal("0")
    except InvalidOperation:
        return Decimal("0")


def parse_stock(value) -> Optional[int]:
    """Integer stock, or None (stock tracked per color)"""
    if value is None or str(value).strip() in ("", "null"):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


class ProductService:
    """
    Service for product business logic

    Handles:
    - Catalog listing, search and lookups
    - Create / update with color reconciliation and image uploads
    - Deletion
    """

    def __init__(
        self,
        database: Optional[Database] = None,
        products: Optional[ProductRepository] = None,
        images: Optional[ImgbbClient] = None
    ):
        self.db = database or default_db
        self.products = products or ProductRepository(self.db)
        self.images = images or ImgbbClient()

    # ------------------------------------------------------------------
    # Catalog reads
    # ------------------------------------------------------------------

    def list_products(self, sort: Optional[str] = None) -> List[Product]:
        return self.products.find_all(sort)

    def search(self, query: Optional[str], sort: Optional[str] = None) -> List[Product]:
        if not query or not query.strip():
            return []
        return self.products.search(query.strip(), sort)

    def list_discounted(self, sort: Optional[str] = None) -> List[Product]:
        return self.products.find_discounted(sort)

    def list_by_category(self, category: str, sort: Optional[str] = None) -> List[Product]:
        return self.products.find_by_category(category, sort)

    def get_product(self, product_id: int) -> Product:
        product = self.products.find_by_id(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    def get_colors(self, product_id: int) -> List[ProductColor]:
        return self.products.find_colors(product_id)

    def delete_product(self, product_id: int) -> None:
        if self.products.delete(product_id) == 0:
            raise NotFoundError("Product not found")
        logger.info(f"Deleted product {product_id}")

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def save_product(
        self,
        payload: ProductSave,
        product_id: Optional[int] = None,
        image_path: Optional[str] = None,
        color_image_paths: Optional[Dict[int, str]] = None
    ) -> Product:
        """
        Create (product_id is None) or update a product with its colors

        Args:
            payload: Form fields and submitted colors
            product_id: Product to update
            image_path: Temp file of a newly uploaded product image
            color_image_paths: Temp files of uploaded color images keyed by
                the color's index in payload.colors

        Returns:
            The saved product with its colors

        Raises:
            ValidationError: Creating without an image
            NotFoundError: Updating a missing product
            TransactionFailure: Datastore error (rolled back)
        """
        color_image_paths = color_image_paths or {}
        try:
            return self._save(payload, product_id, image_path, color_image_paths)
        finally:
            remove_files([image_path, *color_image_paths.values()])

    def _save(self, payload: ProductSave, product_id: Optional[int], image_path: Optional[str],
              color_image_paths: Dict[int, str]) -> Product:
        if product_id is None and not image_path:
            raise ValidationError("Please upload an image")

        colors: List[ColorIn] = payload.colors or []
        for color in colors:
            if not color.is_new and not str(color.id).isdigit():
                raise ValidationError(f"Invalid color id: {color.id}")

        image = self.images.upload_image(image_path) if image_path else None
        color_images = {
            index: self.images.upload_image(path)
            for index, path in color_image_paths.items()
            if index < len(colors)
        }

        fields: Dict[str, Any] = {
            'name_fr': payload.name_fr,
            'name_ar': payload.name_ar,
            'desc_fr': payload.desc_fr or '',
            'desc_ar': payload.desc_ar or '',
            'price': parse_decimal(payload.price),
            'discount': parse_decimal(payload.discount),
            'category': payload.category,
            'stock': parse_stock(payload.stock),
        }

        is_update = product_id is not None

        try:
            with self.db.transaction() as cursor:
                if is_update:
                    existing = self.products.find_image(cursor, product_id)
                    if existing is None:
                        raise NotFoundError("Product not found")
                    fields['image'] = image or existing['image']
                    self.products.update(cursor, product_id, fields)
                else:
                    fields['image'] = image
                    product_id = self.products.insert(cursor, fields)

                if payload.colors is not None:
                    if is_update:
                        keep_ids = [int(color.id) for color in colors if not color.is_new]
                        removed = self.products.delete_colors_except(cursor, product_id, keep_ids)
                        if removed:
                            logger.info(f"Removed {removed} color(s) from product {product_id}")

                    for index, color in enumerate(colors):
                        color_image = color_images.get(index, color.image)
                        if color.is_new:
                            self.products.insert_color(cursor, product_id, color, color_image)
                        else:
                            self.products.update_color(cursor, product_id, color, color_image)

                product = self.products.load_with_colors(cursor, product_id)
        except ShopError:
            raise
        except Exception as e:
            logger.error(f"Error saving product: {e}")
            raise TransactionFailure("Server error", details=str(e))

        logger.info(f"Saved product {product.id} with {len(product.colors)} color(s)")
        return product

"""
Product Domain Model

Catalog entities (products with bilingual content and per-color stock) and
the payload used by the admin product-save operation.
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List, Union
from datetime import datetime
from decimal import Decimal


class ProductColor(BaseModel):
    """A color variant with its own stock and optional image"""

    id: int
    product_id: int
    name_fr: Optional[str] = None
    name_ar: Optional[str] = None
    hex_code: Optional[str] = None
    stock: int = 0
    image: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class Product(BaseModel):
    """
    Product domain model - represents a product in the catalog

    Fields:
        id: Product ID
        name_fr / name_ar: Bilingual name
        desc_fr / desc_ar: Bilingual description
        price: List price
        discount: Discount percentage (0-100)
        category: Catalog category
        image: Primary image URL
        stock: Product stock, NULL when stock is tracked per color
        colors: Color variants (only populated where requested)
    """

    id: int = Field(..., description="Product ID")
    name_fr: str = Field(..., description="French name")
    name_ar: Optional[str] = Field(None, description="Arabic name")
    desc_fr: Optional[str] = Field(None, description="French description")
    desc_ar: Optional[str] = Field(None, description="Arabic description")
    price: Decimal = Field(Decimal("0"), description="List price", ge=0)
    discount: Decimal = Field(Decimal("0"), description="Discount percentage", ge=0)
    category: Optional[str] = Field(None, description="Category")
    image: Optional[str] = Field(None, description="Primary image URL")
    stock: Optional[int] = Field(None, description="Stock, NULL means per-color stock")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")

    colors: List[ProductColor] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

    @property
    def final_price(self) -> Decimal:
        """Price after the percentage discount"""
        if not self.discount:
            return self.price
        return (self.price * (Decimal("100") - self.discount) / Decimal("100")).quantize(Decimal("0.01"))

    def to_dict(self) -> dict:
        data = self.model_dump()
        data['price'] = float(self.price)
        data['discount'] = float(self.discount)
        data['final_price'] = float(self.final_price)
        if self.created_at:
            data['created_at'] = self.created_at.isoformat()
        return data


class ColorIn(BaseModel):
    """A color as submitted by the admin product form"""

    id: Optional[Union[int, str]] = None
    isNew: bool = False
    name_fr: Optional[str] = None
    name_ar: Optional[str] = None
    hex_code: Optional[str] = None
    stock: Optional[int] = None
    image: Optional[str] = None

    @property
    def is_new(self) -> bool:
        """New colors are flagged, have no id, or carry a client-side temp- id"""
        return self.isNew or not self.id or str(self.id).startswith("temp-")


class ProductSave(BaseModel):
    """Fields of the multipart product form (create and update)"""

    name_fr: Optional[str] = None
    name_ar: Optional[str] = None
    desc_fr: Optional[str] = None
    desc_ar: Optional[str] = None
    price: Optional[str] = None
    discount: Optional[str] = None
    category: Optional[str] = None
    stock: Optional[str] = None
    colors: Optional[List[ColorIn]] = None

"""
Order Domain Models

Represents order-related entities of the shop: persisted orders and items,
plus the request payloads accepted by the order and export endpoints.
"""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List, Union
from datetime import datetime
from decimal import Decimal


ORDER_STATUSES = ("pending", "confirmed", "delivered", "cancelled")
ORDER_SOURCES = ("website", "whatsapp")
EXPORT_FORMATS = ("excel", "pdf", "word")


class OrderItem(BaseModel):
    """
    Order Item domain model - a line item as stored, enriched from the catalog

    Fields:
        id: Order item ID
        order_id: Parent order ID
        product_id: Product catalog ID
        color_id: Selected product color (optional)
        quantity: Units ordered
        price: Unit price, discount already applied when the order was placed

        # From catalog JOINs (optional)
        product_name: Product display name (French)
        product_name_ar: Product name (Arabic)
        image: Product image, replaced by the color image when the color has one
        color_name_fr / color_name_ar / color_hex: Selected color details
    """

    id: Optional[int] = Field(None, description="Order item ID")
    order_id: Optional[int] = Field(None, description="Parent order ID")
    product_id: int = Field(..., description="Product catalog ID")
    color_id: Optional[int] = Field(None, description="Product color ID")
    quantity: int = Field(..., description="Quantity ordered")
    price: Decimal = Field(Decimal("0"), description="Final unit price")
    discount: Optional[Decimal] = Field(None, description="Discount percentage at order time")

    product_name: Optional[str] = Field(None, description="Product name (from JOIN)")
    product_name_ar: Optional[str] = Field(None, description="Arabic product name (from JOIN)")
    image: Optional[str] = Field(None, description="Image to display for this line")
    color_name_fr: Optional[str] = None
    color_name_ar: Optional[str] = None
    color_hex: Optional[str] = None
    color_image: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump()
        data['price'] = float(self.price)
        if data.get('discount') is not None:
            data['discount'] = float(data['discount'])
        return data


class Order(BaseModel):
    """
    Order domain model - a customer order as stored in `orders`

    WhatsApp-sourced orders carry placeholder customer fields until an admin
    confirms them manually.
    """

    id: int = Field(..., description="Order ID")
    name: Optional[str] = Field(None, description="Customer name")
    phone: Optional[str] = Field(None, description="Customer phone")
    address: Optional[str] = Field(None, description="Delivery address")
    notes: Optional[str] = Field(None, description="Free-text notes")
    status: str = Field("pending", description="pending, confirmed, delivered or cancelled")
    order_source: str = Field("website", description="website or whatsapp")
    order_date: datetime = Field(..., description="Creation timestamp")
    completed_date: Optional[datetime] = Field(None, description="Set on first delivery")

    items: List[OrderItem] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_whatsapp(self) -> bool:
        return self.order_source == "whatsapp"

    def to_dict(self, include_items: bool = False) -> dict:
        data = self.model_dump(exclude={'items'})
        data['order_date'] = self.order_date.isoformat()
        if self.completed_date:
            data['completed_date'] = self.completed_date.isoformat()
        if include_items:
            data['items'] = [item.to_dict() for item in self.items]
        return data


# ============================================================================
# Request payloads
# ============================================================================

class OrderItemIn(BaseModel):
    """One cart line as sent by the storefront"""

    productId: int
    colorId: Optional[int] = None
    quantity: int = Field(..., ge=1)
    price: Decimal = Decimal("0")

    @field_validator('colorId', mode='before')
    @classmethod
    def empty_color_is_none(cls, value):
        if value in ("", 0, "0"):
            return None
        return value

    @field_validator('price', mode='before')
    @classmethod
    def missing_price_is_zero(cls, value):
        if value in (None, ""):
            return Decimal("0")
        return value


class OrderCreate(BaseModel):
    """Body of POST /orders and POST /orders/whatsapp"""

    items: Optional[List[OrderItemIn]] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    order_source: Optional[str] = None

    @property
    def is_whatsapp(self) -> bool:
        return self.order_source == "whatsapp"


class StatusUpdate(BaseModel):
    status: Optional[str] = None


class ExportFilters(BaseModel):
    """Filters shared by the synchronous and deferred exports"""

    format: Optional[str] = None
    status: Optional[str] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    orderId: Optional[int] = None

    @field_validator('status', 'startDate', 'endDate', mode='before')
    @classmethod
    def blank_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator('orderId', mode='before')
    @classmethod
    def blank_order_id_is_none(cls, value):
        if value in ("", None):
            return None
        return value

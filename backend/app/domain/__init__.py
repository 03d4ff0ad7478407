"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities.
These models enforce type safety and validation across the application.
"""
from app.domain.product import Product, ProductColor
from app.domain.order import Order, OrderItem
from app.domain.banner import Banner

__all__ = ['Product', 'ProductColor', 'Order', 'OrderItem', 'Banner']

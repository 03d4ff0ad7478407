"""
Modelos de base de datos
"""
from .order import Order, OrderItem
from .product import Product, ProductColor
from .banner import Banner, Admin

__all__ = [
    "Order",
    "OrderItem",
    "Product",
    "ProductColor",
    "Banner",
    "Admin",
]

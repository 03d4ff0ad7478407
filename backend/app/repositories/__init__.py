"""
Repository Layer - Data Access

This layer handles all database queries and returns domain models.
Repositories abstract away SQL details from business logic.
"""
from app.repositories.product_repository import ProductRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.banner_repository import BannerRepository
from app.repositories.admin_repository import AdminRepository

__all__ = [
    'ProductRepository',
    'OrderRepository',
    'BannerRepository',
    'AdminRepository'
]

"""
Modelos relacionados con órdenes/pedidos
"""
from sqlalchemy import Column, Integer, String, DateTime, Text, DECIMAL, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Order(Base):
    """
    Tabla principal de órdenes
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)

    # Cliente (placeholders para pedidos WhatsApp)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    address = Column(Text, nullable=False)
    notes = Column(Text)

    # Estados
    status = Column(String(20), nullable=False, default="pending", server_default="pending", index=True)
    order_source = Column(String(20), nullable=False, default="website", server_default="website", index=True)

    # Fechas
    order_date = Column(DateTime, nullable=False, server_default=func.now(), index=True)
    completed_date = Column(DateTime)

    # Relationships
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")


class OrderItem(Base):
    """
    Items/productos de cada orden
    """
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), index=True, nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), index=True, nullable=False)
    color_id = Column(Integer, ForeignKey("product_colors.id", ondelete="SET NULL"))

    # Precio final (descuento ya aplicado por el cliente)
    quantity = Column(Integer, nullable=False)
    price = Column(DECIMAL(10, 2), nullable=False)
    discount = Column(DECIMAL(5, 2))

    # Relationships
    order = relationship("Order", back_populates="items")
    product = relationship("Product")

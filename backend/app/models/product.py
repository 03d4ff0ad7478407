"""
Modelos del catálogo: productos y colores
"""
from sqlalchemy import Column, Integer, String, DateTime, Text, DECIMAL, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)

    # Bilingual content
    name_fr = Column(String(255), nullable=False)
    name_ar = Column(String(255))
    desc_fr = Column(Text)
    desc_ar = Column(Text)

    price = Column(DECIMAL(10, 2), nullable=False, default=0)
    discount = Column(DECIMAL(5, 2), nullable=False, default=0)
    category = Column(String(100), index=True)
    image = Column(String(500))

    # NULL means stock is tracked per color
    stock = Column(Integer)

    created_at = Column(DateTime, server_default=func.now())

    colors = relationship("ProductColor", back_populates="product", cascade="all, delete-orphan")


class ProductColor(Base):
    __tablename__ = "product_colors"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), index=True, nullable=False)

    name_fr = Column(String(100))
    name_ar = Column(String(100))
    hex_code = Column(String(20))
    stock = Column(Integer, nullable=False, default=0)
    image = Column(String(500))

    product = relationship("Product", back_populates="colors")

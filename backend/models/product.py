# backend/models/product.py
from sqlalchemy import Column, Integer, String, Float, Text, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

PRODUCT_STATUSES = ("active", "inactive")

# Model Product
# A catalog item sold by a store and classified under one category.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    thumbnail = Column(String, nullable=True)
    description = Column(Text, nullable=True)

    # Price and stock, guarded by check constraints
    price = Column(Float, CheckConstraint("price >= 0"), nullable=False)
    stock = Column(Integer, CheckConstraint("stock >= 0"), nullable=False, default=0)
    status = Column(String(20), nullable=False, default="active", index=True)

    store_id = Column(Integer, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    store = relationship("Store", back_populates="products")
    category = relationship("Category", back_populates="products")
    images = relationship("ProductImage", back_populates="product", cascade="all, delete-orphan", passive_deletes=True, order_by="ProductImage.id")
    reviews = relationship(
        "Review",
        primaryjoin="and_(Product.id == Review.product_id, Review.deleted_at.is_(None))",
        order_by="Review.id",
        viewonly=True,
    )


# Additional gallery image attached to a product
class ProductImage(Base):
    __tablename__ = "product_images"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    path = Column(String, nullable=False)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    product = relationship("Product", back_populates="images")

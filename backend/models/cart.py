# backend/models/cart.py
from sqlalchemy import Column, Integer, ForeignKey, DateTime, Float, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

# A single purchase intent: one product and a quantity, owned by a user
class Cart(Base):
    __tablename__ = "carts" # Table name

    id = Column(Integer, primary_key=True, index=True) # Primary key
    quantity = Column(Integer, CheckConstraint("quantity >= 1"), nullable=False)
    total_price = Column(Float, nullable=False) # product.price * quantity at the moment of writing
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now()) # Creation timestamp
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="carts")
    product = relationship("Product")

    # At most one order per cart
    order = relationship("Order", back_populates="cart", uselist=False, cascade="all", passive_deletes=True)

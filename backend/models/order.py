from sqlalchemy import Column, Integer, Float, Date, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

# Finalized purchase built from exactly one cart and one payment
class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    final_price = Column(Float, CheckConstraint("final_price >= 0"), nullable=False)
    # Unique as a backstop for the one-order-per-cart check
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    payment_id = Column(Integer, ForeignKey("payments.id", ondelete="CASCADE"), nullable=False, index=True)
    order_date = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    cart = relationship("Cart", back_populates="order")
    payment = relationship("Payment", back_populates="order")

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import date, datetime

from schemas.common import ORMBase, reject_null


# Output schema for an order without its relations
class OrderOut(ORMBase):
    id: int
    final_price: float
    cart_id: int
    payment_id: int
    order_date: date
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Input schema for creating a new order from a cart and a payment
class OrderCreate(BaseModel):
    final_price: float = Field(ge=0)
    cart_id: int
    payment_id: int
    order_date: date


# Schema for partial order updates
class OrderUpdate(BaseModel):
    final_price: Optional[float] = Field(None, ge=0)
    cart_id: Optional[int] = None
    payment_id: Optional[int] = None
    order_date: Optional[date] = None

    @field_validator("final_price", "cart_id", "payment_id", "order_date", mode="before")
    @classmethod
    def _required_when_present(cls, value):
        return reject_null(value)

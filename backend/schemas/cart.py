from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from schemas.common import ORMBase, reject_null


# Response schema for a single cart
class CartOut(ORMBase):
    id: int
    quantity: int
    total_price: float
    product_id: int
    user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Request schema for creating a cart; total_price is computed server-side
class CartCreate(BaseModel):
    quantity: int = Field(ge=1)
    product_id: int
    user_id: int


class CartUpdate(BaseModel):
    quantity: Optional[int] = Field(None, ge=1)
    product_id: Optional[int] = None
    user_id: Optional[int] = None

    @field_validator("quantity", "product_id", "user_id", mode="before")
    @classmethod
    def _required_when_present(cls, value):
        return reject_null(value)

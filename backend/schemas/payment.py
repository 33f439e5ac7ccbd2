from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from schemas.common import ORMBase, reject_null

PaymentStatus = Literal["pending", "paid", "failed"]


class PaymentOut(ORMBase):
    id: int
    payment_method: str
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PaymentCreate(BaseModel):
    payment_method: str = Field(min_length=1, max_length=100)
    status: PaymentStatus


class PaymentUpdate(BaseModel):
    payment_method: Optional[str] = Field(None, min_length=1, max_length=100)
    status: Optional[PaymentStatus] = None

    @field_validator("payment_method", "status", mode="before")
    @classmethod
    def _required_when_present(cls, value):
        return reject_null(value)

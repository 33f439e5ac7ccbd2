from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from schemas.common import ORMBase, reject_null


class ReviewOut(ORMBase):
    id: int
    user_id: int
    product_id: int
    rating: int
    review: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReviewCreate(BaseModel):
    user_id: int
    product_id: int
    rating: int = Field(ge=1, le=5)
    review: Optional[str] = Field(None, max_length=1000)


# user_id and product_id are not part of the update payload
class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    review: Optional[str] = Field(None, max_length=1000)

    @field_validator("rating", mode="before")
    @classmethod
    def _required_when_present(cls, value):
        return reject_null(value)

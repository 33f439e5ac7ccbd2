from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from schemas.common import ORMBase, reject_null


class CategoryOut(ORMBase):
    id: int
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)

    @field_validator("name", mode="before")
    @classmethod
    def _required_when_present(cls, value):
        return reject_null(value)

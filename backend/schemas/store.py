from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from schemas.common import ORMBase, reject_null


class StoreOut(ORMBase):
    id: int
    name: str
    city: str
    profile_image: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StoreCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    city: str = Field(min_length=1, max_length=255)
    profile_image: Optional[str] = None


class StoreUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    city: Optional[str] = Field(None, min_length=1, max_length=255)
    profile_image: Optional[str] = None

    @field_validator("name", "city", mode="before")
    @classmethod
    def _required_when_present(cls, value):
        return reject_null(value)

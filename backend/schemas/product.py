# backend/schemas/product.py
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from schemas.common import ORMBase, reject_null

ProductStatus = Literal["active", "inactive"]


# Flat product representation including ID
class ProductOut(ORMBase):
    id: int
    name: str
    thumbnail: Optional[str] = None
    stock: int
    status: str
    description: Optional[str] = None
    price: float
    store_id: int
    category_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Schema for creating a new product
class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    thumbnail: Optional[str] = None
    stock: int = Field(ge=0)
    status: ProductStatus
    description: Optional[str] = None
    price: float = Field(ge=0)
    store_id: int
    category_id: int


# Schema for partial product updates - all fields optional
class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    thumbnail: Optional[str] = None
    stock: Optional[int] = Field(None, ge=0)
    status: Optional[ProductStatus] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    store_id: Optional[int] = None
    category_id: Optional[int] = None

    @field_validator("name", "stock", "status", "price", "store_id", "category_id", mode="before")
    @classmethod
    def _required_when_present(cls, value):
        return reject_null(value)


class ProductImageOut(ORMBase):
    id: int
    name: str
    path: str
    product_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductImageCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    path: str = Field(min_length=1)
    product_id: int


class ProductImageUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    path: Optional[str] = Field(None, min_length=1)
    product_id: Optional[int] = None

    @field_validator("name", "path", "product_id", mode="before")
    @classmethod
    def _required_when_present(cls, value):
        return reject_null(value)
